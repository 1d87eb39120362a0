"""Cloudfs: file-system style access to object storage.

Entry point for the library. Import :func:`filesystem_factory` to create
an adapter with a single call::

    from cloudfs import filesystem_factory

    fs = filesystem_factory("cos", {
        "secret_id": "...", "secret_key": "...",
        "bucket": "examplebucket-1250000000", "region": "ap-guangzhou",
        "base_url": "https://files.example.com",
    })
    fs.write("reports/today.txt", b"hello")
    fs.build_url(fs.uri, expires=600)
"""

from .base import FileSystemBlueprint, ObjectKey, RelativePath, ObjectMetadata
from .base.exceptions import CloudfsError, FileSystemError, ConfigurationError
from .factory import filesystem_factory

__all__ = [
    "FileSystemBlueprint",
    "ObjectKey",
    "RelativePath",
    "ObjectMetadata",
    "CloudfsError",
    "FileSystemError",
    "ConfigurationError",
    "filesystem_factory",
]
