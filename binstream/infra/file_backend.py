import io
import logging
import os
from typing import Any, BinaryIO

from binstream.core.models.status import Status
from binstream.core.ports.backend import StreamBackend


class FileBackend(StreamBackend):
    """
    Backend over a binary file object opened by `initialize`.

    Open modes:
        - default:        "r+b" (file must exist, readable and writable)
        - readonly=True:  "rb"
        - overwrite=True: "w+b" (file is created or truncated)

    A short read reports OUT_OF_RANGE and leaves the stream usable (the
    caller may seek back). An OSError during a transfer reports ABORTED
    and marks the stream as failed, after which `validate()` is False
    until the backend is quiesced and initialized again.
    """
    def __init__(self) -> None:
        self._file: BinaryIO | None = None
        self._failed = False
        self._logger = logging.getLogger("infra.file_backend")

    @property
    def name(self) -> str | None:
        return None if self._file is None else self._file.name

    def initialize(
        self,
        target: str | os.PathLike[str] | None = None,
        overwrite: bool = False,
        readonly: bool = False,
        **options: Any,
    ) -> bool:
        if target is None:
            self._logger.warning("No file path given")
            return False

        if self._file is not None:
            self._logger.warning(f"Backend already holds {self._file.name}, refusing to reopen")
            return False

        if overwrite:
            mode = "w+b"
        elif readonly:
            mode = "rb"
        else:
            mode = "r+b"

        try:
            self._file = open(target, mode)  # noqa: SIM115
        except OSError as exc:
            self._logger.warning(f"Failed to open {target}: {exc}")
            self._file = None
            return False

        self._failed = False
        self._logger.debug(f"Opened {target} ({mode})")
        return True

    def quiesce(self) -> bool:
        if self._file is None:
            return True

        try:
            self._file.close()
        except OSError as exc:
            self._logger.error(f"Failed to close {self._file.name}: {exc}")
            return False
        finally:
            self._file = None
            self._failed = False

        return True

    def validate(self) -> bool:
        return self._file is not None and not self._file.closed and not self._failed

    def size(self) -> int:
        if self._file is None:
            return 0

        try:
            old_pos = self._file.tell()
            end = self._file.seek(0, io.SEEK_END)
            self._file.seek(old_pos)
        except OSError as exc:
            self._logger.error(f"Failed to compute size: {exc}")
            self._failed = True
            return 0

        return end

    def position(self) -> int:
        if self._file is None:
            return 0
        return self._file.tell()

    def seek(self, position: int) -> bool:
        if self._file is None or position < 0:
            return False

        try:
            self._file.seek(position)
        except OSError as exc:
            self._logger.error(f"Failed to seek to {position}: {exc}")
            self._failed = True
            return False

        return True

    def on_read(self, buffer: bytearray | memoryview, count: int) -> Status:
        if (status := self._precondition(buffer, count, "read")) is not None:
            return status

        try:
            received = self._file.readinto(memoryview(buffer)[:count])  # type: ignore[union-attr]
        except OSError as exc:
            self._failed = True
            return Status.aborted(f"Unknown error, safe abort: {exc}")

        if received is None or received < count:
            return Status.out_of_range("EOF reached.")

        return Status.ok()

    def on_peek(self, buffer: bytearray | memoryview, count: int) -> Status:
        if (status := self._precondition(buffer, count, "peek")) is not None:
            return status

        file = self._file
        try:
            old_pos = file.tell()  # type: ignore[union-attr]
            try:
                received = file.readinto(memoryview(buffer)[:count])  # type: ignore[union-attr]
            finally:
                file.seek(old_pos)  # type: ignore[union-attr]
        except OSError as exc:
            self._failed = True
            return Status.aborted(f"Unknown error, safe abort: {exc}")

        if received is None or received < count:
            return Status.out_of_range("EOF reached.")

        return Status.ok()

    def on_write(self, buffer: bytes | bytearray | memoryview, count: int) -> Status:
        if (status := self._precondition(buffer, count, "write")) is not None:
            return status

        try:
            written = self._file.write(memoryview(buffer)[:count])  # type: ignore[union-attr]
        except OSError as exc:
            self._failed = True
            return Status.aborted(f"Unknown error, safe abort: {exc}")

        if written is not None and written < count:
            return Status.out_of_range("Short write.")

        return Status.ok()

    def _precondition(self, buffer: Any, count: int, verb: str) -> Status | None:
        if self._file is None:
            return Status.failed_precondition("Backend is not initialized.")
        if count <= 0:
            return Status.failed_precondition(f"Cannot {verb} less than 1 byte.")
        if count > len(buffer):
            return Status.invalid_argument("Buffer is smaller than the requested count.")
        return None
