"""File-system blueprint for object-storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .types import ObjectKey, ObjectMetadata, RelativePath


class FileSystemBlueprint(ABC):
    """Abstract file-system interface over a bucket/key object store.

    Destinations of newly created objects (``write``, ``copy``, ``move``,
    ``upload``) are paths relative to the adapter's root.  Everything else,
    including copy and move sources, addresses a fully-qualified object key.

    Attributes:
        uri: Key produced by the last successful mutating operation, or
            ``None`` before the first one.
        error_message: Raw text of the most recent underlying failure.
    """

    def __init__(self) -> None:
        self._uri: ObjectKey | None = None
        self.error_message: str | None = None

    @property
    def uri(self) -> ObjectKey | None:
        return self._uri

    def _set_uri(self, key: ObjectKey) -> None:
        self._uri = key

    # --- Mutations ---

    @abstractmethod
    def write(self, path: RelativePath | str, content: bytes | str) -> None:
        """Write content to a new or existing file.

        Args:
            path: Destination path relative to the adapter's root.
            content: Data to store from position 0.
        """
        pass

    @abstractmethod
    def append(self, path: ObjectKey | str, content: bytes | str) -> None:
        """Append content to the end of a file, creating it if needed.

        Args:
            path: Fully-qualified object key.
            content: Data to append.
        """
        pass

    @abstractmethod
    def copy(self, source: ObjectKey | str, destination: RelativePath | str) -> None:
        """Copy an object server-side.

        Args:
            source: Fully-qualified key of the object to copy.
            destination: Destination path relative to the adapter's root.
        """
        pass

    @abstractmethod
    def move(self, source: ObjectKey | str, destination: RelativePath | str) -> None:
        """Move an object (copy, then delete the source).

        Args:
            source: Fully-qualified key of the object to move.
            destination: Destination path relative to the adapter's root.
        """
        pass

    @abstractmethod
    def upload(self, local_path: str, to: RelativePath | str) -> None:
        """Upload a local file.

        Args:
            local_path: Local filesystem path to read.
            to: Destination path relative to the adapter's root.
        """
        pass

    @abstractmethod
    def delete(self, path: ObjectKey | str) -> None:
        """Delete an object."""
        pass

    @abstractmethod
    def mk_dir(self, path: ObjectKey | str) -> None:
        """Create a directory marker (a zero-length object) at ``path``."""
        pass

    # --- Queries ---

    @abstractmethod
    def exists(self, path: ObjectKey | str) -> bool:
        """Return whether an object exists at ``path``."""
        pass

    @abstractmethod
    def read(self, path: ObjectKey | str, start: int | None = None, end: int | None = None) -> bytes:
        """Read an object, or a byte range of it.

        Args:
            path: Fully-qualified object key.
            start: First byte offset (inclusive); ``None`` reads from 0.
            end: Last byte offset (inclusive); ``None`` reads to the end.

        Returns:
            The raw object bytes.
        """
        pass

    @abstractmethod
    def head(self, path: ObjectKey | str) -> ObjectMetadata:
        """Fetch object metadata."""
        pass

    @abstractmethod
    def last_modified(self, path: ObjectKey | str) -> int:
        """Return the object's last modification time as a Unix timestamp."""
        pass

    @abstractmethod
    def file_size(self, path: ObjectKey | str) -> int:
        """Return the object's size in bytes."""
        pass

    @abstractmethod
    def read_dir(self, path: ObjectKey | str) -> list[ObjectKey]:
        """List the keys under a prefix (first page only, no delimiter).

        Args:
            path: Key prefix, e.g. ``"a/"``.

        Returns:
            Object keys in the order the backend returned them.
        """
        pass

    # --- URLs ---

    @abstractmethod
    def build_url(self, uri: ObjectKey | str, expires: int | None = None) -> str:
        """Build a URL for an object.

        Args:
            uri: Fully-qualified object key.
            expires: Validity in seconds; ``None`` builds a permanent,
                unsigned URL.
        """
        pass

    @abstractmethod
    def build_presigned_url(self, path: ObjectKey | str, expires: int | None = None) -> str:
        """Build a signed GET URL for an object.

        Args:
            path: Fully-qualified object key.
            expires: Validity in seconds; ``None`` uses the backend's
                default lifetime.
        """
        pass
