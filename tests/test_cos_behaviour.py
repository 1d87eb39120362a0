"""Behavioural tests of the COS adapter against an in-memory bucket."""

import io
from urllib.parse import quote
from unittest.mock import patch
import pytest
from qcloud_cos.cos_exception import CosServiceError

from cloudfs.cos.filesystem import CosFileSystem
from cloudfs.base.config import CosFileSystemConfig
from cloudfs.base.exceptions import MetadataLookupError, MoveError, UploadError


def _error(method: str, code: str, status: int) -> CosServiceError:
    return CosServiceError(
        method,
        {"code": code, "message": code, "resource": "", "requestid": "", "traceid": ""},
        status,
    )


class _StreamBody:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def get_raw_stream(self):
        return io.BytesIO(self._data)


class FakeCosClient:
    """Strongly consistent single-bucket stand-in for CosS3Client."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    def _get(self, key: str, method: str) -> bytes:
        if key not in self.objects:
            raise _error(method, "NoSuchKey", 404)
        return self.objects[key]

    def append_object(self, Bucket, Key, Position, Data, **kwargs):
        current = self.objects.get(Key, b"")
        if Position > len(current):
            raise _error("POST", "PositionNotEqualToLength", 409)
        self.objects[Key] = current[:Position] + Data
        return {"x-cos-next-append-position": str(len(self.objects[Key]))}

    def put_object(self, Bucket, Body, Key, **kwargs):
        self.objects[Key] = Body

    def get_object(self, Bucket, Key, **kwargs):
        return {"Body": _StreamBody(self._get(Key, "GET"))}

    def head_object(self, Bucket, Key, **kwargs):
        data = self._get(Key, "HEAD")
        return {"Content-Length": str(len(data)), "Last-Modified": "Wed, 18 Oct 2023 10:00:00 GMT"}

    def delete_object(self, Bucket, Key, **kwargs):
        self.objects.pop(Key, None)

    def copy(self, Bucket, Key, CopySource, **kwargs):
        self.objects[Key] = self._get(CopySource["Key"], "PUT")

    def object_exists(self, Bucket, Key):
        return Key in self.objects

    def list_objects(self, Bucket, Prefix="", Delimiter="", Marker="", MaxKeys=1000, EncodingType="", **kwargs):
        keys = sorted(k for k in self.objects if k.startswith(Prefix) and k > Marker)
        page = keys[:MaxKeys]
        response = {"IsTruncated": "true" if len(keys) > MaxKeys else "false"}
        if page:
            encode = (lambda k: quote(k, safe="/")) if EncodingType == "url" else (lambda k: k)
            response["Contents"] = [{"Key": encode(k)} for k in page]
        return response

    def upload_file_from_buffer(self, Bucket, Key, Body, **kwargs):
        self.objects[Key] = Body.read()


@pytest.fixture
def backend():
    fake = FakeCosClient()
    with patch("cloudfs.cos.filesystem.CosS3Client", return_value=fake), \
            patch("cloudfs.cos.filesystem.CosConfig"):
        yield fake


def _fs(sub_path=None) -> CosFileSystem:
    return CosFileSystem(CosFileSystemConfig(
        secret_id="id",
        secret_key="key",
        bucket="bucket-1250000000",
        region="ap-guangzhou",
        base_url="https://files.example.com",
        sub_path=sub_path,
    ))


def test_write_then_read(backend):
    fs = _fs(sub_path="site/")
    fs.write("index.html", b"<h1>hi</h1>")
    assert fs.uri == "site/index.html"
    assert fs.read(fs.uri) == b"<h1>hi</h1>"


def test_append_advances_offset(backend):
    fs = _fs()
    fs.append("logs/app.log", b"first;")
    fs.append("logs/app.log", b"second")
    assert fs.read("logs/app.log") == b"first;second"
    assert fs.file_size("logs/app.log") == 12


def test_write_then_append(backend):
    fs = _fs(sub_path="s/")
    fs.write("a.log", "one\n")
    fs.append(fs.uri, "two\n")
    assert backend.objects["s/a.log"] == b"one\ntwo\n"


def test_move(backend):
    fs = _fs()
    fs.write("a.txt", b"payload")
    fs.move("a.txt", "b.txt")
    assert fs.exists("a.txt") is False
    assert fs.exists("b.txt") is True
    assert fs.read("b.txt") == b"payload"
    assert fs.uri == "b.txt"


def test_move_leaves_duplicate_when_delete_fails(backend):
    def refuse(**kwargs):
        raise _error("DELETE", "AccessDenied", 403)

    backend.delete_object = refuse
    fs = _fs()
    fs.write("a.txt", b"payload")
    with pytest.raises(MoveError):
        fs.move("a.txt", "b.txt")
    assert fs.exists("a.txt") and fs.exists("b.txt")


def test_copy_keeps_source(backend):
    fs = _fs(sub_path="copies/")
    backend.objects["orig.txt"] = b"x"
    fs.copy("orig.txt", "orig.txt")
    assert backend.objects == {"orig.txt": b"x", "copies/orig.txt": b"x"}


def test_read_dir_filters_by_prefix(backend):
    for key in ("b/1", "a/2", "a/1"):
        backend.objects[key] = b""
    fs = _fs()
    assert fs.read_dir("a/") == ["a/1", "a/2"]


def test_read_dir_flattens_nested_keys(backend):
    for key in ("a/1", "a/deep/2", "a/my file.txt"):
        backend.objects[key] = b""
    assert _fs().read_dir("a/") == ["a/1", "a/deep/2", "a/my file.txt"]


def test_read_dir_returns_single_page(backend):
    for i in range(1005):
        backend.objects[f"many/{i:04d}"] = b""
    keys = _fs().read_dir("many/")
    assert len(keys) == 1000
    assert keys[-1] == "many/0999"


def test_mk_dir_creates_marker(backend):
    fs = _fs()
    fs.mk_dir("photos/")
    assert backend.objects["photos/"] == b""
    assert fs.exists("photos/") is True
    assert fs.read_dir("photos/") == ["photos/"]


def test_delete(backend):
    fs = _fs()
    fs.write("a.txt", b"x")
    fs.delete("a.txt")
    assert fs.exists("a.txt") is False


def test_metadata_of_missing_key_fails(backend):
    fs = _fs()
    with pytest.raises(MetadataLookupError):
        fs.file_size("missing")
    with pytest.raises(MetadataLookupError):
        fs.last_modified("missing")


def test_upload(backend, tmp_path):
    local = tmp_path / "photo.jpg"
    local.write_bytes(b"\xff\xd8\xff")
    fs = _fs(sub_path="u/")
    fs.upload(str(local), "photo.jpg")
    assert backend.objects["u/photo.jpg"] == b"\xff\xd8\xff"
    assert fs.uri == "u/photo.jpg"


def test_upload_unreadable_local_file(backend, tmp_path):
    fs = _fs()
    with pytest.raises(UploadError):
        fs.upload(str(tmp_path / "missing.jpg"), "photo.jpg")
    assert backend.objects == {}
    assert fs.uri is None


def test_uri_tracks_last_mutation(backend):
    fs = _fs()
    fs.write("a", b"1")
    fs.write("b", b"2")
    fs.delete("b")
    assert fs.uri == "b"
