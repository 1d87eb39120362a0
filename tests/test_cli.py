import json
from unittest.mock import patch, MagicMock
import pytest

from cloudfs.cli import main
from cloudfs.base.exceptions import ReadError

CONFIG = json.dumps({
    "secret_id": "k",
    "secret_key": "s",
    "bucket": "bucket-1250000000",
    "region": "ap-guangzhou",
    "base_url": "https://files.example.com",
})


@pytest.fixture
def fs():
    with patch("cloudfs.factory.filesystem_factory") as mock_factory:
        instance = MagicMock()
        mock_factory.return_value = instance
        yield instance, mock_factory


class TestCli:
    def test_list(self, fs, capsys):
        instance, factory = fs
        instance.read_dir.return_value = ["a/1", "a/2"]
        main(["-c", CONFIG, "read-dir", "a/"])
        instance.read_dir.assert_called_once_with("a/")
        assert json.loads(capsys.readouterr().out) == ["a/1", "a/2"]
        assert factory.call_args.args[0] == "cos"

    def test_none_prints_ok(self, fs, capsys):
        instance, _ = fs
        instance.write.return_value = None
        main(["-c", CONFIG, "write", "a.txt", "hello"])
        instance.write.assert_called_once_with("a.txt", "hello")
        assert capsys.readouterr().out.strip() == "OK"

    def test_bytes_printed_as_text(self, fs, capsys):
        instance, _ = fs
        instance.read.return_value = b"hello"
        main(["-c", CONFIG, "read", "a.txt"])
        assert capsys.readouterr().out == "hello"

    def test_kwargs(self, fs, capsys):
        instance, _ = fs
        instance.build_presigned_url.return_value = "https://signed"
        main(["-c", CONFIG, "build-presigned-url", "a.txt", "-k", '{"expires": 600}'])
        instance.build_presigned_url.assert_called_once_with("a.txt", expires=600)
        assert "https://signed" in capsys.readouterr().out

    def test_config_file(self, fs, tmp_path):
        instance, factory = fs
        path = tmp_path / "cos.json"
        path.write_text(CONFIG)
        instance.exists.return_value = True
        main(["-c", f"@{path}", "exists", "a.txt"])
        assert factory.call_args.args[1]["bucket"] == "bucket-1250000000"

    def test_invalid_config_json(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", "{bad", "read", "a"])
        assert exc_info.value.code == 1
        assert "Invalid --config" in capsys.readouterr().err

    def test_unknown_operation(self, fs, capsys):
        instance, _ = fs
        instance.nope = None
        with pytest.raises(SystemExit):
            main(["-c", CONFIG, "nope"])
        assert "Unknown operation" in capsys.readouterr().err

    def test_private_operation_rejected(self, fs, capsys):
        with pytest.raises(SystemExit):
            main(["-c", CONFIG, "_fail"])
        assert "Unknown operation" in capsys.readouterr().err

    def test_operation_failure_shows_diagnostics(self, fs, capsys):
        instance, _ = fs
        instance.read.side_effect = ReadError("Failed to read 'a'.", error_message="NoSuchKey")
        with pytest.raises(SystemExit):
            main(["-c", CONFIG, "read", "a"])
        err = capsys.readouterr().err
        assert "Failed to read 'a'." in err
        assert "NoSuchKey" in err

    def test_bad_config_reported(self, capsys):
        with pytest.raises(SystemExit):
            main(["-c", "{}", "read", "a"])
        assert "Error:" in capsys.readouterr().err
