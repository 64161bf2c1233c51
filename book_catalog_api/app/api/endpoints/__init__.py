"""Endpoint modules, one ``APIRouter`` per resource."""
