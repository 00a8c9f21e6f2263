from typing import Any

from binstream.core.models.status import Status
from binstream.core.ports.backend import StreamBackend


class NullBackend(StreamBackend):
    """
    Backend without a resource. Reads succeed and leave the buffer
    untouched, writes are discarded. Useful as a stand-in when only the
    Serializer's own logic is under test.

    The lifecycle and argument preconditions are still enforced, so the
    backend behaves like any other one regarding failures.
    """
    def __init__(self) -> None:
        self._open = False

    def initialize(self, target: Any = None, **options: Any) -> bool:
        self._open = True
        return True

    def quiesce(self) -> bool:
        self._open = False
        return True

    def validate(self) -> bool:
        return self._open

    def size(self) -> int:
        return 0

    def position(self) -> int:
        return 0

    def seek(self, position: int) -> bool:
        return self._open and position >= 0

    def on_read(self, buffer: bytearray | memoryview, count: int) -> Status:
        return self._check(buffer, count, "read")

    def on_peek(self, buffer: bytearray | memoryview, count: int) -> Status:
        return self._check(buffer, count, "peek")

    def on_write(self, buffer: bytes | bytearray | memoryview, count: int) -> Status:
        return self._check(buffer, count, "write")

    def _check(self, buffer: Any, count: int, verb: str) -> Status:
        if not self._open:
            return Status.failed_precondition("Backend is not initialized.")
        if count <= 0:
            return Status.failed_precondition(f"Cannot {verb} less than 1 byte.")
        if count > len(buffer):
            return Status.invalid_argument("Buffer is smaller than the requested count.")
        return Status.ok()
