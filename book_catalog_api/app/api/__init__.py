"""
HTTP layer.

``router`` in ``api.router`` includes one ``APIRouter`` per resource
from the ``endpoints`` subpackage.
"""
