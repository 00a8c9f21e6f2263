from typing import Any

from binstream.core.models.status import Status
from binstream.core.ports.backend import StreamBackend


class MemoryBackend(StreamBackend):
    """
    Backend over an in-memory bytearray.

    `initialize(data)` copies the initial content. Writes overwrite bytes
    at the cursor and grow the buffer when they run past its end. Seeking
    past the end is allowed; the gap is zero-filled on the next write.
    """
    def __init__(self) -> None:
        self._data: bytearray | None = None
        self._pos = 0

    def initialize(self, target: bytes | bytearray | None = None, **options: Any) -> bool:
        self._data = bytearray(target or b"")
        self._pos = 0
        return True

    def quiesce(self) -> bool:
        self._data = None
        self._pos = 0
        return True

    def validate(self) -> bool:
        return self._data is not None

    def size(self) -> int:
        return 0 if self._data is None else len(self._data)

    def position(self) -> int:
        return self._pos

    def seek(self, position: int) -> bool:
        if self._data is None or position < 0:
            return False
        self._pos = position
        return True

    def getvalue(self) -> bytes:
        return b"" if self._data is None else bytes(self._data)

    def on_read(self, buffer: bytearray | memoryview, count: int) -> Status:
        if (status := self._precondition(buffer, count, "read")) is not None:
            return status

        received = self._copy_out(buffer, count)
        # A short read still consumes what was available, like a file does.
        self._pos += received

        if received < count:
            return Status.out_of_range("EOF reached.")
        return Status.ok()

    def on_peek(self, buffer: bytearray | memoryview, count: int) -> Status:
        if (status := self._precondition(buffer, count, "peek")) is not None:
            return status

        if self._copy_out(buffer, count) < count:
            return Status.out_of_range("EOF reached.")
        return Status.ok()

    def _copy_out(self, buffer: bytearray | memoryview, count: int) -> int:
        chunk = self._data[self._pos:self._pos + count]  # type: ignore[index]
        memoryview(buffer)[:len(chunk)] = chunk
        return len(chunk)

    def on_write(self, buffer: bytes | bytearray | memoryview, count: int) -> Status:
        if (status := self._precondition(buffer, count, "write")) is not None:
            return status

        end = self._pos + count
        if self._pos > len(self._data):  # type: ignore[arg-type]
            self._data.extend(bytes(self._pos - len(self._data)))  # type: ignore[union-attr, arg-type]
        self._data[self._pos:end] = memoryview(buffer)[:count]  # type: ignore[index]
        self._pos = end

        return Status.ok()

    def _precondition(self, buffer: Any, count: int, verb: str) -> Status | None:
        if self._data is None:
            return Status.failed_precondition("Backend is not initialized.")
        if count <= 0:
            return Status.failed_precondition(f"Cannot {verb} less than 1 byte.")
        if count > len(buffer):
            return Status.invalid_argument("Buffer is smaller than the requested count.")
        return None
