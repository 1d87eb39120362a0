"""Object key construction."""

from __future__ import annotations

from .types import ObjectKey, RelativePath


def resolve_key(path: RelativePath | str, sub_path: str | None = None) -> ObjectKey:
    """Join an adapter-relative path with the configured sub-path.

    Plain concatenation: separators are not inserted and ``.``/``..``
    segments are not resolved, so callers must pass clean paths.

    Args:
        path: Path relative to the adapter's root.
        sub_path: Optional key prefix, e.g. ``"a/b/"``.

    Returns:
        The object key.
    """
    if sub_path:
        return ObjectKey(sub_path + path)
    return ObjectKey(path)
