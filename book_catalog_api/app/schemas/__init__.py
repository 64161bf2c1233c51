"""
Pydantic schema definitions for API payloads.

Each resource defines its own request and response models.  Schemas
are separate from the SQL in ``services`` so the API representation
does not depend on the table layout.
"""
