import pytest

from binstream.core.models.status import StatusCode
from binstream.infra.memory_backend import MemoryBackend


def opened(data: bytes = b"") -> MemoryBackend:
    backend = MemoryBackend()
    assert backend.initialize(data)
    return backend


@pytest.mark.ut
def test_lifecycle():
    backend = MemoryBackend()
    assert not backend.validate()

    assert backend.initialize(b"abc")
    assert backend.validate()
    assert backend.size() == 3

    assert backend.quiesce()
    assert not backend.validate()


@pytest.mark.ut
@pytest.mark.parametrize("method", ["on_read", "on_peek", "on_write"])
def test_zero_count_is_failed_precondition(method):
    backend = opened(b"abc")
    status = getattr(backend, method)(bytearray(4), 0)
    assert status.code is StatusCode.FAILED_PRECONDITION


@pytest.mark.ut
@pytest.mark.parametrize("method", ["on_read", "on_peek", "on_write"])
def test_uninitialized_transfer_fails(method):
    status = getattr(MemoryBackend(), method)(bytearray(1), 1)
    assert status.code is StatusCode.FAILED_PRECONDITION


@pytest.mark.ut
def test_count_larger_than_buffer_is_invalid_argument():
    backend = opened(b"abcdef")
    assert backend.on_read(bytearray(2), 4).code is StatusCode.INVALID_ARGUMENT
    assert backend.position() == 0


@pytest.mark.ut
def test_read_advances_and_peek_restores():
    backend = opened(b"abcdef")
    buffer = bytearray(3)

    assert backend.on_peek(buffer, 3)
    assert buffer == b"abc"
    assert backend.position() == 0

    assert backend.on_read(buffer, 3)
    assert buffer == b"abc"
    assert backend.position() == 3


@pytest.mark.ut
def test_short_read_is_out_of_range():
    backend = opened(b"ab")
    buffer = bytearray(4)

    status = backend.on_read(buffer, 4)

    assert status.code is StatusCode.OUT_OF_RANGE
    assert buffer[:2] == b"ab"
    assert backend.position() == 2


@pytest.mark.ut
def test_write_overwrites_then_grows():
    backend = opened(b"abcd")
    backend.seek(2)

    assert backend.on_write(b"XYZ", 3)

    assert backend.getvalue() == b"abXYZ"
    assert backend.position() == 5


@pytest.mark.ut
def test_write_after_seek_past_end_zero_fills():
    backend = opened(b"a")
    backend.seek(3)
    backend.on_write(b"b", 1)
    assert backend.getvalue() == b"a\x00\x00b"


@pytest.mark.ut
def test_write_honours_count():
    backend = opened()
    backend.on_write(b"abcdef", 2)
    assert backend.getvalue() == b"ab"


@pytest.mark.ut
def test_negative_seek_is_rejected():
    assert not opened(b"a").seek(-1)
