import pytest

from binstream.core.serializer.serializer import Serializer
from binstream.infra.memory_backend import MemoryBackend
from tests.helpers import local_file_bytes


@pytest.fixture
def memory_stream():
    stream = Serializer(MemoryBackend())
    stream.initialize()
    yield stream
    stream.quiesce()


@pytest.fixture
def archive_path(tmp_path):
    path = tmp_path / "archive.zip"
    path.write_bytes(local_file_bytes())
    return path
