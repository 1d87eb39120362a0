"""Abstract file-system blueprint and core utilities.

Every storage backend inherits from :class:`FileSystemBlueprint`.
Import it to type-hint your own code or to create custom backends.
"""

from .filesystem import FileSystemBlueprint
from .types import ObjectKey, RelativePath, ObjectMetadata, ListingPage
from .supported_services import existing_providers


__all__ = [
    "FileSystemBlueprint",
    "ObjectKey",
    "RelativePath",
    "ObjectMetadata",
    "ListingPage",
    "existing_providers",
]
