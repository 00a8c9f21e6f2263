from dataclasses import dataclass, field
from enum import IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class StatusCode(IntEnum):
    """
    Canonical failure categories shared by every fallible operation.

    The numbering is stable: codes may be persisted or exchanged as raw
    integers and rebuilt with `from_value`.
    """
    SUCCESS = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @classmethod
    def from_value(cls, value: int) -> "StatusCode":
        """Map a raw code to a known variant, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    StatusCode.SUCCESS: "Success",
    StatusCode.CANCELLED: "Cancelled",
    StatusCode.UNKNOWN: "Unknown",
    StatusCode.INVALID_ARGUMENT: "Invalid Argument",
    StatusCode.DEADLINE_EXCEEDED: "Deadline Exceeded",
    StatusCode.NOT_FOUND: "Not Found",
    StatusCode.ALREADY_EXISTS: "Already Exists",
    StatusCode.PERMISSION_DENIED: "Permission Denied",
    StatusCode.RESOURCE_EXHAUSTED: "Resource Exhausted",
    StatusCode.FAILED_PRECONDITION: "Failed Precondition",
    StatusCode.ABORTED: "Aborted",
    StatusCode.OUT_OF_RANGE: "Out of Range",
    StatusCode.UNIMPLEMENTED: "Unimplemented",
    StatusCode.INTERNAL: "Internal",
    StatusCode.UNAVAILABLE: "Unavailable",
    StatusCode.DATA_LOSS: "Data Loss",
    StatusCode.UNAUTHENTICATED: "Unauthenticated",
}


@dataclass(frozen=True, slots=True)
class Status:
    """
    Outcome of a fallible operation: a code plus a human-readable message.

    Two statuses are equal when their codes are equal; the message is
    informational only. A Status is truthy only on success.
    """
    code: StatusCode
    message: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.code, StatusCode):
            object.__setattr__(self, "code", StatusCode.from_value(int(self.code)))

    def __bool__(self) -> bool:
        return self.is_success()

    def __str__(self) -> str:
        if self.message:
            return f"{self.code.label}: {self.message}"
        return self.code.label

    def is_success(self) -> bool:
        return self.code is StatusCode.SUCCESS

    @classmethod
    def ok(cls) -> "Status":
        return cls(StatusCode.SUCCESS)

    @classmethod
    def invalid_argument(cls, message: str) -> "Status":
        return cls(StatusCode.INVALID_ARGUMENT, message)

    @classmethod
    def not_found(cls, message: str) -> "Status":
        return cls(StatusCode.NOT_FOUND, message)

    @classmethod
    def already_exists(cls, message: str) -> "Status":
        return cls(StatusCode.ALREADY_EXISTS, message)

    @classmethod
    def failed_precondition(cls, message: str) -> "Status":
        return cls(StatusCode.FAILED_PRECONDITION, message)

    @classmethod
    def aborted(cls, message: str) -> "Status":
        return cls(StatusCode.ABORTED, message)

    @classmethod
    def out_of_range(cls, message: str) -> "Status":
        return cls(StatusCode.OUT_OF_RANGE, message)

    @classmethod
    def data_loss(cls, message: str) -> "Status":
        return cls(StatusCode.DATA_LOSS, message)


class ResultError(Exception):
    """Raised when the value of a failed Result is requested."""

    def __init__(self, status: Status) -> None:
        super().__init__(str(status))
        self.status = status


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Either a value or a non-success Status.

    The value is only reachable after the caller has checked the outcome:
    reading `value` on a failure raises ResultError instead of handing
    back a placeholder.
    """
    status: Status
    _value: T | None = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(Status.ok(), value)

    @classmethod
    def failure(cls, status: Status) -> "Result[T]":
        if status.is_success():
            raise ValueError("A failed Result requires a non-success Status")
        return cls(status)

    def __bool__(self) -> bool:
        return self.ok

    @property
    def ok(self) -> bool:
        return self.status.is_success()

    @property
    def value(self) -> T:
        if not self.ok:
            raise ResultError(self.status)
        return self._value  # type: ignore[return-value]

    def unwrap(self) -> T:
        return self.value

    def value_or(self, default: T) -> T:
        return self._value if self.ok else default  # type: ignore[return-value]
