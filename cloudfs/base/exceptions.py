"""
Cloudfs exception hierarchy.

Every file-system operation has its own error type inheriting from
:class:`FileSystemError`, so callers can tell failure kinds apart
without parsing messages.  The low-level cause is kept on the
exception (``error_message``, ``error_code``, ``status_code`` and
``__cause__``) but is never part of ``str(exc)``.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class CloudfsError(Exception):
    """Root exception for all Cloudfs errors."""


# ── Configuration / connection ────────────────────────────────────────
class ConfigurationError(CloudfsError):
    """A required setting is missing or a setting is invalid."""


class FileSystemError(CloudfsError):
    """Base exception for file-system operations.

    Attributes:
        operation: Name of the failing operation (e.g. ``"write"``).
        error_message: Raw text of the underlying error, for diagnostics.
        error_code: Provider error code (e.g. ``"NoSuchKey"``), if known.
        status_code: HTTP status returned by the provider, if known.
    """

    operation: str | None = None

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        error_message: str | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        if operation is not None:
            self.operation = operation
        self.error_message = error_message
        self.error_code = error_code
        self.status_code = status_code


class ConnectionInitError(FileSystemError):
    """The connection handle to the storage service could not be built."""

    operation = "connect"


# ── Mutations ─────────────────────────────────────────────────────────
class WriteError(FileSystemError):
    """Failed to write file content."""

    operation = "write"


class AppendError(FileSystemError):
    """Failed to append file content."""

    operation = "append"


class CopyError(FileSystemError):
    """Failed to copy an object."""

    operation = "copy"


class MoveError(FileSystemError):
    """Failed to move an object (copy and delete are not distinguished)."""

    operation = "move"


class UploadError(FileSystemError):
    """Failed to upload a local file."""

    operation = "upload"


class DeleteError(FileSystemError):
    """Failed to delete an object."""

    operation = "delete"


class MkDirError(FileSystemError):
    """Failed to create a directory marker."""

    operation = "mk_dir"


# ── Queries ───────────────────────────────────────────────────────────
class ExistenceCheckError(FileSystemError):
    """The existence check itself failed."""

    operation = "exists"


class ReadError(FileSystemError):
    """Failed to read object content."""

    operation = "read"


class MetadataLookupError(FileSystemError):
    """Failed to fetch object metadata (size, last-modified time)."""

    operation = "head"


class ListError(FileSystemError):
    """Failed to list objects under a prefix."""

    operation = "read_dir"


class UrlError(FileSystemError):
    """Failed to build an object URL."""

    operation = "build_url"
