"""
Catalog package for the books and authors API.

``service`` holds the rules (author resolution, description fallback,
list/detail shaping, validation and permission checks). ``router``
exposes them as a REST API and ``ajax`` as the older form-action
endpoint; both are thin translations onto the same service. Storage
lives behind the ``Repository`` port in ``app.storage``.
"""

from .ajax import register_actions  # noqa: F401
from .ajax import router as ajax_router  # noqa: F401
from .router import router as catalog_router  # noqa: F401
from .service import CatalogService  # noqa: F401
