import pytest
import yaml

from binstream.bootstrap.boot import EXIT_NO_FILENAME, EXIT_OK, EXIT_OPEN_FAILED, EXIT_READ_FAILED, main
from tests.helpers import local_file_bytes


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BINSTREAM_CONFIG", raising=False)


@pytest.mark.it
def test_extracts_entry_and_prints_description(archive_path, tmp_path, capsys):
    out_dir = tmp_path / "out"

    code = main([str(archive_path), "-o", str(out_dir), "-f", "yaml"])

    assert code == EXIT_OK
    assert (out_dir / "test").read_bytes() == b"hello"
    description = yaml.safe_load(capsys.readouterr().out)
    assert description["file_name"] == "test"
    assert description["data"] == "68 65 6C 6C 6F"


@pytest.mark.it
def test_silent_render(archive_path, tmp_path, capsys):
    assert main([str(archive_path), "-o", str(tmp_path), "-f", "none"]) == EXIT_OK
    assert capsys.readouterr().out == ""


@pytest.mark.it
def test_config_file_drives_output(archive_path, tmp_path):
    config = tmp_path / "custom.yaml"
    config.write_text(yaml.dump({
        "output": {"directory": str(tmp_path / "from-config")},
        "render": {"format": "none"},
    }))

    assert main([str(archive_path), "-c", str(config)]) == EXIT_OK
    assert (tmp_path / "from-config" / "test").read_bytes() == b"hello"


@pytest.mark.it
def test_missing_archive(tmp_path):
    assert main([str(tmp_path / "missing.zip"), "-f", "none"]) == EXIT_OPEN_FAILED


@pytest.mark.it
def test_truncated_archive(tmp_path):
    path = tmp_path / "short.zip"
    path.write_bytes(local_file_bytes(data=b"he", compressed_size=50))

    assert main([str(path), "-f", "none"]) == EXIT_READ_FAILED


@pytest.mark.it
def test_entry_without_name(tmp_path):
    path = tmp_path / "noname.zip"
    path.write_bytes(local_file_bytes(name=b""))

    assert main([str(path), "-f", "none"]) == EXIT_NO_FILENAME
