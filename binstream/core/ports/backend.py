from typing import Any, Protocol, runtime_checkable

from binstream.core.models.status import Status


@runtime_checkable
class StreamBackend(Protocol):
    """
    Minimal synchronous interface for a byte-oriented resource (file,
    memory buffer, socket...) that a Serializer can drive.

    A backend owns at most one underlying resource between `initialize`
    and `quiesce`. Before `initialize` succeeds, and after `quiesce`, every
    transfer must fail with a non-success Status. Implementations never
    raise for I/O conditions: faults are reported through the returned
    Status or boolean.

    Backends are not thread-safe. A single caller owns a backend for its
    whole lifetime.
    """

    def initialize(self, target: Any = None, **options: Any) -> bool:
        """
        Acquire the underlying resource.

        Returns False on failure and leaves the backend uninitialized, so
        that `validate()` reports False and transfers are rejected.
        """

    def quiesce(self) -> bool:
        """
        Release the underlying resource. Must be called once per successful
        `initialize`, on every exit path.
        """

    def validate(self) -> bool:
        """
        Report whether the resource is open and has not hit an
        unrecoverable fault.
        """

    def size(self) -> int:
        """Total size of the resource in bytes. Does not move the cursor."""

    def position(self) -> int:
        """Current cursor offset in bytes."""

    def seek(self, position: int) -> bool:
        """Move the cursor to an absolute byte offset."""

    def on_read(self, buffer: bytearray | memoryview, count: int) -> Status:
        """
        Transfer exactly `count` bytes from the cursor into `buffer` and
        advance the cursor.

        Fails with FAILED_PRECONDITION when `count` is zero, OUT_OF_RANGE
        when the resource ends before `count` bytes are available and
        ABORTED on any other I/O fault.
        """

    def on_peek(self, buffer: bytearray | memoryview, count: int) -> Status:
        """
        Same contract as `on_read`, but the cursor is restored to its
        previous position afterwards.
        """

    def on_write(self, buffer: bytes | bytearray | memoryview, count: int) -> Status:
        """
        Transfer the first `count` bytes of `buffer` to the resource at the
        cursor, with the same failure codes as `on_read`.
        """
