import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Generic, TypeVar

from binstream.core.models.status import Result, Status
from binstream.core.ports.backend import StreamBackend
from binstream.core.serializer.endian import Endian, endian_swap
from binstream.core.serializer.layout import DecodeError, Scalar, is_record, layout_of, sizeof

B = TypeVar("B", bound=StreamBackend)

STREAM_STATE_INVALID = "Stream is not in a valid state."


@dataclass(frozen=True, slots=True)
class TextUnit:
    """Code unit of a string encoding: its width in bytes and its codec."""
    name: str
    width: int
    family: str

    def codec(self, endian: Endian) -> str:
        if self.width == 1:
            return self.family
        suffix = "le" if Endian(endian) is Endian.LITTLE else "be"
        return f"{self.family}-{suffix}"


UTF8 = TextUnit("utf8", 1, "utf-8")
UTF16 = TextUnit("utf16", 2, "utf-16")
UTF32 = TextUnit("utf32", 4, "utf-32")


class Serializer(Generic[B]):
    """
    Typed, endian-aware reader/writer over a single StreamBackend.

    The Serializer owns its backend and keeps no state of its own: the
    cursor, the open resource and its health all live in the backend.
    Every typed operation checks `validate()` first and reports failures
    as a Status (or a failed Result) instead of raising.

    Lifecycle calls are forwarded untouched. Used as a context manager,
    the Serializer quiesces its backend on exit if it was initialized:

        with Serializer(FileBackend()) as stream:
            if not stream.initialize(path, readonly=True):
                ...
            header = stream.read(Header, Endian.LITTLE)

    Instances are not thread-safe and must not be shared between
    concurrent callers.
    """
    def __init__(self, backend: B) -> None:
        self._backend = backend
        self._initialized = False
        self._logger = logging.getLogger("core.serializer")

    @property
    def backend(self) -> B:
        return self._backend

    def __enter__(self) -> "Serializer[B]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._initialized:
            self.quiesce()

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def initialize(self, *args: Any, **kwargs: Any) -> bool:
        # A refused re-initialize leaves the current resource open and owned.
        ok = self._backend.initialize(*args, **kwargs)
        self._initialized = self._initialized or ok
        return ok

    def quiesce(self) -> bool:
        self._initialized = False
        return self._backend.quiesce()

    def validate(self) -> bool:
        return self._backend.validate()

    def size(self) -> int:
        return self._backend.size()

    def seek(self, position: int) -> bool:
        return self._backend.seek(position)

    def position(self) -> int:
        return self._backend.position()

    # -------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------

    def read(self, tp: Scalar | type, endian: Endian = Endian.NATIVE) -> Result[Any]:
        """
        Read one scalar or one record.

        Scalars are swapped when `endian` is not the native order. Records
        are read in a single transfer and then converted field by field.
        """
        return self._transfer_in(tp, endian, peek=False)

    def peek(self, tp: Scalar | type, endian: Endian = Endian.NATIVE) -> Result[Any]:
        """Same as `read`, but leaves the cursor where it was."""
        return self._transfer_in(tp, endian, peek=True)

    def read_cstring(self, unit: TextUnit = UTF8, endian: Endian = Endian.NATIVE) -> Result[str]:
        """
        Read code units until a NUL unit and decode them. The terminator
        is consumed but not part of the returned text.
        """
        if not self.validate():
            return Result.failure(Status.failed_precondition(STREAM_STATE_INVALID))

        terminator = bytes(unit.width)
        chunks = bytearray()
        buffer = bytearray(unit.width)

        while True:
            status = self._backend.on_read(buffer, unit.width)
            if not status:
                self._logger.debug(f"C-string read stopped after {len(chunks)} bytes: {status}")
                return Result.failure(status)

            code_unit = endian_swap(endian, buffer, unit.width)
            if code_unit == terminator:
                break
            chunks += code_unit

        return self._decode_text(bytes(chunks), unit.codec(Endian.NATIVE))

    def read_text(
        self,
        length: int,
        unit: TextUnit = UTF8,
        endian: Endian = Endian.NATIVE,
        encoding: str | None = None,
    ) -> Result[str]:
        """
        Read exactly `length` code units in one transfer. The bytes are
        decoded as stored in `endian` order; `encoding` overrides the
        codec for single-byte legacy encodings such as cp437.
        """
        data = self.read_bytes(length * unit.width)
        if not data:
            return Result.failure(data.status)

        return self._decode_text(data.value, encoding or unit.codec(endian))

    def read_bytes(self, length: int) -> Result[bytes]:
        """Read an opaque, length-bounded payload."""
        if not self.validate():
            return Result.failure(Status.failed_precondition(STREAM_STATE_INVALID))

        if length < 0:
            return Result.failure(Status.invalid_argument(f"Negative length: {length}"))

        if length == 0:
            return Result.success(b"")

        buffer = bytearray(length)
        status = self._backend.on_read(buffer, length)
        if not status:
            return Result.failure(status)

        return Result.success(bytes(buffer))

    # -------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------

    def write(self, value: Any, endian: Endian = Endian.NATIVE, tp: Scalar | None = None) -> Status:
        """
        Convert a copy of `value` to `endian` and write it at the cursor.

        `tp` is required for scalars since a Python int does not carry a
        width. Records carry their own layout; bytes-like values and str
        (UTF-8) are written verbatim. An empty payload reaches the backend
        as a zero-count write and fails with FAILED_PRECONDITION.
        """
        if not self.validate():
            return Status.failed_precondition(STREAM_STATE_INVALID)

        try:
            data = self._encode(value, endian, tp)
        except ValueError as exc:
            return Status.invalid_argument(str(exc))

        return self._backend.on_write(data, len(data))

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------

    def _transfer_in(self, tp: Scalar | type, endian: Endian, peek: bool) -> Result[Any]:
        if not self.validate():
            return Result.failure(Status.failed_precondition(STREAM_STATE_INVALID))

        length = sizeof(tp)
        buffer = bytearray(length)

        if peek:
            status = self._backend.on_peek(buffer, length)
        else:
            status = self._backend.on_read(buffer, length)

        if not status:
            return Result.failure(status)

        try:
            if isinstance(tp, Scalar):
                return Result.success(tp.decode(bytes(buffer), endian))
            return Result.success(layout_of(tp).decode(buffer, endian))
        except DecodeError as exc:
            return Result.failure(Status.data_loss(str(exc)))

    @staticmethod
    def _encode(value: Any, endian: Endian, tp: Scalar | None) -> bytes:
        if tp is not None:
            return tp.encode(value, endian)

        if is_record(type(value)):
            return layout_of(type(value)).encode(value, endian)

        if isinstance(value, bytes | bytearray | memoryview):
            return bytes(value)

        if isinstance(value, str):
            return value.encode("utf-8")

        raise TypeError(f"Cannot infer a binary encoding for {type(value).__name__}; pass tp=")

    @staticmethod
    def _decode_text(data: bytes, codec: str) -> Result[str]:
        try:
            return Result.success(data.decode(codec))
        except UnicodeDecodeError as exc:
            return Result.failure(Status.data_loss(f"Undecodable text: {exc}"))


def is_stream_serializer(obj: Any) -> bool:
    return isinstance(obj, Serializer)
