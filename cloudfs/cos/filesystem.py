"""Tencent COS implementation of the FileSystem blueprint."""

from __future__ import annotations

from email.utils import parsedate_to_datetime
from typing import NoReturn
from urllib.parse import unquote

from qcloud_cos import CosConfig, CosS3Client
from qcloud_cos.cos_exception import CosClientError, CosServiceError
from urllib3.exceptions import HTTPError as TransportError

from cloudfs.base.client_cache import LazyClient
from cloudfs.base.config import CosFileSystemConfig
from cloudfs.base.exceptions import (
    FileSystemError,
    ConnectionInitError,
    WriteError,
    AppendError,
    CopyError,
    MoveError,
    UploadError,
    ExistenceCheckError,
    ReadError,
    DeleteError,
    MkDirError,
    MetadataLookupError,
    ListError,
    UrlError,
)
from cloudfs.base.filesystem import FileSystemBlueprint
from cloudfs.base.logger import fs_logger
from cloudfs.base.paths import resolve_key
from cloudfs.base.types import ListingPage, ObjectKey, ObjectMetadata, RelativePath

_PROVIDER = "cos"

# COS returns at most 1000 keys per listObjects call.
LIST_PAGE_SIZE = 1000

# requests errors are OSErrors; urllib3 errors escape while a body streams.
_REMOTE_ERRORS = (CosServiceError, CosClientError, OSError, TransportError)
# Metadata responses are parsed as well as fetched.
_LOOKUP_ERRORS = _REMOTE_ERRORS + (KeyError, ValueError, TypeError)


def _to_bytes(content: bytes | str) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


def _expiry_seconds(expires: int) -> int:
    """Truncate ``expires`` to whole minutes, with a one-minute floor."""
    return max(int(expires) // 60, 1) * 60


def _parse_http_date(value: str) -> int:
    return int(parsedate_to_datetime(value).timestamp())


class CosFileSystem(FileSystemBlueprint):
    """Tencent COS implementation of file-system operations.

    COS has no directories and no path normalization: directories are
    zero-length marker objects, listings are prefix queries, and writes
    use COS appendable objects so a file can be extended later.

    Attributes:
        config: Validated COS configuration.
        bucket: Bucket name (BucketName-APPID).
        region: Bucket region.
    """

    def __init__(self, config: CosFileSystemConfig) -> None:
        """Prepare the adapter.  No connection is made until first use.

        Args:
            config: COS configuration object.
        """
        super().__init__()
        self.config = config
        self.bucket = config.bucket
        self.region = config.region
        self._client: LazyClient[CosS3Client] = LazyClient(self._build_client)

    def _build_client(self) -> CosS3Client:
        proxies = None
        if self.config.proxy:
            proxies = {"http": self.config.proxy, "https": self.config.proxy}
        cos_config = CosConfig(
            Region=self.region,
            SecretId=self.config.secret_id,
            SecretKey=self.config.secret_key,
            Scheme=self.config.scheme,
            # requests accepts a (connect, read) timeout pair
            Timeout=(self.config.connect_timeout, self.config.timeout),
            Proxies=proxies,
        )
        return CosS3Client(cos_config)

    @property
    def client(self) -> CosS3Client:
        """The COS client, built on first access.

        Raises:
            ConnectionInitError: If the client cannot be constructed.
        """
        try:
            return self._client.get()
        except ConnectionInitError as e:
            self.error_message = e.error_message
            fs_logger.error(
                str(e),
                provider=_PROVIDER,
                operation=e.operation,
                error_message=e.error_message,
            )
            raise

    def _fail(
        self,
        exc_class: type[FileSystemError],
        message: str,
        key: str,
        cause: BaseException | None = None,
        *,
        error_message: str | None = None,
    ) -> NoReturn:
        """Log the failure, keep its diagnostics and raise ``exc_class``."""
        error_code = None
        status_code = None
        if isinstance(cause, CosServiceError):
            error_code = cause.get_error_code()
            status_code = cause.get_status_code()
            error_message = error_message or cause.get_error_msg()
        elif cause is not None:
            error_message = error_message or str(cause)
        self.error_message = error_message
        fs_logger.error(
            message,
            provider=_PROVIDER,
            operation=exc_class.operation,
            key=key,
            error_message=error_message,
        )
        raise exc_class(
            message,
            error_message=error_message,
            error_code=error_code,
            status_code=status_code,
        ) from cause

    def _mutated(self, operation: str, key: ObjectKey) -> None:
        self._set_uri(key)
        fs_logger.debug(f"{operation} succeeded.", provider=_PROVIDER, operation=operation, key=key)

    def _copy_object(self, client: CosS3Client, source: str, key: ObjectKey) -> None:
        client.copy(
            Bucket=self.bucket,
            Key=key,
            CopySource={"Bucket": self.bucket, "Key": source, "Region": self.region},
        )

    def _head_object(self, client: CosS3Client, key: str) -> ObjectMetadata:
        response = client.head_object(Bucket=self.bucket, Key=key)
        # proxies may lowercase header names
        headers = {name.lower(): value for name, value in response.items()}
        return ObjectMetadata(
            content_length=int(headers["content-length"]),
            last_modified=_parse_http_date(headers["last-modified"]),
        )

    # --- Mutations ---

    def write(self, path: RelativePath | str, content: bytes | str) -> None:
        """Write content to ``path`` under the adapter's root.

        Always an append at position 0, so the object stays appendable.

        Raises:
            WriteError: If the write fails.
        """
        key = resolve_key(path, self.config.sub_path)
        client = self.client
        try:
            client.append_object(Bucket=self.bucket, Key=key, Position=0, Data=_to_bytes(content))
        except _REMOTE_ERRORS as e:
            self._fail(WriteError, f"Failed to write '{key}'.", key, e)
        self._mutated("write", key)

    def append(self, path: ObjectKey | str, content: bytes | str) -> None:
        """Append content at the current end of the object at ``path``.

        The current length is fetched on every call; a missing object is
        created by appending at position 0.

        Raises:
            AppendError: If the lookup or the append fails.
        """
        key = ObjectKey(path)
        client = self.client
        try:
            position = 0
            if client.object_exists(Bucket=self.bucket, Key=key):
                position = self._head_object(client, key).content_length
            client.append_object(
                Bucket=self.bucket, Key=key, Position=position, Data=_to_bytes(content)
            )
        except _LOOKUP_ERRORS as e:
            self._fail(AppendError, f"Failed to append to '{key}'.", key, e)
        self._mutated("append", key)

    def copy(self, source: ObjectKey | str, destination: RelativePath | str) -> None:
        """Server-side copy within the bucket.

        Raises:
            CopyError: If the copy fails.
        """
        key = resolve_key(destination, self.config.sub_path)
        client = self.client
        try:
            self._copy_object(client, source, key)
        except _REMOTE_ERRORS as e:
            self._fail(CopyError, f"Failed to copy '{source}' to '{key}'.", key, e)
        self._mutated("copy", key)

    def move(self, source: ObjectKey | str, destination: RelativePath | str) -> None:
        """Copy ``source`` to ``destination`` then delete ``source``.

        Not atomic: if the delete fails, both objects remain.

        Raises:
            MoveError: If either step fails.
        """
        key = resolve_key(destination, self.config.sub_path)
        client = self.client
        try:
            self._copy_object(client, source, key)
            client.delete_object(Bucket=self.bucket, Key=source)
        except _REMOTE_ERRORS as e:
            self._fail(MoveError, f"Failed to move '{source}' to '{key}'.", key, e)
        self._mutated("move", key)

    def upload(self, local_path: str, to: RelativePath | str) -> None:
        """Stream a local file to ``to``; the SDK handles multipart chunking.

        Raises:
            UploadError: If the local file cannot be read or the upload fails.
        """
        key = resolve_key(to, self.config.sub_path)
        client = self.client
        try:
            with open(local_path, "rb") as fp:
                client.upload_file_from_buffer(Bucket=self.bucket, Key=key, Body=fp)
        except _REMOTE_ERRORS as e:
            self._fail(UploadError, f"Failed to upload '{local_path}' to '{key}'.", key, e)
        self._mutated("upload", key)

    def delete(self, path: ObjectKey | str) -> None:
        """Delete the object at ``path``.

        Args:
            path: Fully-qualified object key.

        Raises:
            DeleteError: If deletion fails.
        """
        client = self.client
        try:
            client.delete_object(Bucket=self.bucket, Key=path)
        except _REMOTE_ERRORS as e:
            self._fail(DeleteError, f"Failed to delete '{path}'.", path, e)

    def mk_dir(self, path: ObjectKey | str) -> None:
        """Create a directory marker: a zero-length object at ``path``.

        Args:
            path: Fully-qualified key of the marker, usually ending in ``/``.

        Raises:
            MkDirError: If the marker cannot be stored.
        """
        client = self.client
        try:
            client.put_object(Bucket=self.bucket, Body=b"", Key=path)
        except _REMOTE_ERRORS as e:
            self._fail(MkDirError, f"Failed to create directory '{path}'.", path, e)

    # --- Queries ---

    def exists(self, path: ObjectKey | str) -> bool:
        """Return whether ``path`` exists.

        Raises:
            ExistenceCheckError: On any failure, including ones unrelated
                to the object being absent.
        """
        client = self.client
        try:
            return bool(client.object_exists(Bucket=self.bucket, Key=path))
        except _REMOTE_ERRORS as e:
            self._fail(ExistenceCheckError, f"Failed to check whether '{path}' exists.", path, e)

    def read(self, path: ObjectKey | str, start: int | None = None, end: int | None = None) -> bytes:
        """Read the object at ``path``, whole or as an inclusive byte range.

        Raises:
            ReadError: If the request fails or the response has no body.
        """
        client = self.client
        params = {}
        if start is not None or end is not None:
            params["Range"] = f"bytes={start or 0}-{'' if end is None else end}"
        try:
            response = client.get_object(Bucket=self.bucket, Key=path, **params)
            body = response.get("Body") if response else None
            if body is not None:
                return body.get_raw_stream().read()
        except _REMOTE_ERRORS as e:
            self._fail(ReadError, f"Failed to read '{path}'.", path, e)
        self._fail(
            ReadError,
            f"Failed to read '{path}'.",
            path,
            error_message="Response contained no body.",
        )

    def head(self, path: ObjectKey | str) -> ObjectMetadata:
        """Fetch the size and last-modified time of ``path``.

        Args:
            path: Fully-qualified object key.

        Returns:
            The object's metadata; never cached.

        Raises:
            MetadataLookupError: If the object is missing or the lookup fails.
        """
        client = self.client
        try:
            return self._head_object(client, path)
        except _LOOKUP_ERRORS as e:
            self._fail(MetadataLookupError, f"Failed to get metadata of '{path}'.", path, e)

    def last_modified(self, path: ObjectKey | str) -> int:
        """Return the last modification time of ``path``.

        Args:
            path: Fully-qualified object key.

        Returns:
            Unix timestamp parsed from the ``Last-Modified`` header.

        Raises:
            MetadataLookupError: If the object is missing or the lookup fails.
        """
        client = self.client
        try:
            return self._head_object(client, path).last_modified
        except _LOOKUP_ERRORS as e:
            self._fail(MetadataLookupError, f"Failed to get last-modified time of '{path}'.", path, e)

    def file_size(self, path: ObjectKey | str) -> int:
        """Return the size of ``path`` in bytes.

        Args:
            path: Fully-qualified object key.

        Returns:
            The ``Content-Length`` of the object.

        Raises:
            MetadataLookupError: If the object is missing or the lookup fails.
        """
        client = self.client
        try:
            return self._head_object(client, path).content_length
        except _LOOKUP_ERRORS as e:
            self._fail(MetadataLookupError, f"Failed to get file size of '{path}'.", path, e)

    def read_dir(self, path: ObjectKey | str) -> list[ObjectKey]:
        """List up to 1000 keys starting with ``path``.

        No delimiter is applied, so nested keys are included.

        Raises:
            ListError: If listing fails.
        """
        try:
            return self._list_objects(path).keys
        except _LOOKUP_ERRORS as e:
            self._fail(ListError, f"Failed to list '{path}'.", path, e)

    def _list_objects(
        self,
        prefix: str,
        limit: int = LIST_PAGE_SIZE,
        delimiter: str = "",
        marker: str | None = None,
    ) -> ListingPage:
        """Fetch one page of keys under ``prefix``.

        Keys are requested URL-encoded and decoded here.
        """
        client = self.client
        params = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "Delimiter": delimiter,
            "MaxKeys": limit,
            "EncodingType": "url",
        }
        if marker:
            params["Marker"] = marker
        response = client.list_objects(**params)
        next_marker = response.get("NextMarker")
        return ListingPage(
            keys=[ObjectKey(unquote(row["Key"])) for row in response.get("Contents", [])],
            next_marker=unquote(next_marker) if next_marker else None,
            is_truncated=str(response.get("IsTruncated", "false")).lower() == "true",
        )

    # --- URLs ---

    def build_url(self, uri: ObjectKey | str, expires: int | None = None) -> str:
        """Build a URL for ``uri``.

        With ``expires`` the URL is signed and valid for ``expires`` seconds
        truncated to whole minutes (at least one minute).  Without it the
        URL is unsigned and permanent.

        Raises:
            UrlError: If the SDK rejects the bucket or key.
        """
        client = self.client
        try:
            if expires:
                return client.get_presigned_download_url(
                    Bucket=self.bucket, Key=uri, Expired=_expiry_seconds(expires)
                )
            return client.get_object_url(Bucket=self.bucket, Key=uri)
        except CosClientError as e:
            self._fail(UrlError, f"Failed to build URL for '{uri}'.", uri, e)

    def build_presigned_url(self, path: ObjectKey | str, expires: int | None = None) -> str:
        """Build a signed GET URL for ``path``.

        Valid for ``expires`` seconds truncated to whole minutes (at least
        one minute), or for the SDK's default lifetime when omitted.

        Raises:
            UrlError: If signing fails.
        """
        client = self.client
        params = {"Bucket": self.bucket, "Key": path, "Method": "GET", "Params": {}, "Headers": {}}
        if expires:
            params["Expired"] = _expiry_seconds(expires)
        try:
            return client.get_presigned_url(**params)
        except CosClientError as e:
            self._fail(UrlError, f"Failed to build pre-signed URL for '{path}'.", path, e)
