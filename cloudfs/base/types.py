"""Value types shared by file-system backends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType


# A path relative to the adapter's root; resolved against ``sub_path``.
RelativePath = NewType("RelativePath", str)

# A fully-qualified object key inside the bucket; used as given.
ObjectKey = NewType("ObjectKey", str)


@dataclass(frozen=True)
class ObjectMetadata:
    """Metadata of a stored object.

    Attributes:
        content_length: Object size in bytes.
        last_modified: Last modification time as a Unix timestamp.
    """

    content_length: int
    last_modified: int


@dataclass(frozen=True)
class ListingPage:
    """One page of a prefix listing."""

    keys: list[ObjectKey] = field(default_factory=list)
    next_marker: str | None = None
    is_truncated: bool = False
