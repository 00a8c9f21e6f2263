import dataclasses
import logging
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from binstream.core.serializer.endian import Endian, endian_swap

logger = logging.getLogger("core.serializer.layout")


class LayoutError(TypeError):
    """A record class declares a field the layout engine cannot encode."""


class DecodeError(ValueError):
    """Well-sized bytes that do not map to a valid field value."""


@dataclass(frozen=True, slots=True)
class Scalar:
    """
    Fixed-size arithmetic type, described by its `struct` format code.
    Values are always packed in native order and swapped afterwards, so
    `endian_swap` is the only place where byte order is decided.
    """
    name: str
    code: str

    @property
    def size(self) -> int:
        return struct.calcsize("=" + self.code)

    def decode(self, raw: bytes, endian: Endian = Endian.NATIVE) -> Any:
        native = endian_swap(endian, raw, self.size)
        return struct.unpack("=" + self.code, native)[0]

    def encode(self, value: Any, endian: Endian = Endian.NATIVE) -> bytes:
        try:
            native = struct.pack("=" + self.code, value)
        except struct.error as exc:
            raise ValueError(f"{value!r} does not fit in {self.name}: {exc}") from exc
        return endian_swap(endian, native, self.size)

    def __repr__(self) -> str:
        return self.name


u8 = Scalar("u8", "B")
i8 = Scalar("i8", "b")
u16 = Scalar("u16", "H")
i16 = Scalar("i16", "h")
u32 = Scalar("u32", "I")
i32 = Scalar("i32", "i")
u64 = Scalar("u64", "Q")
i64 = Scalar("i64", "q")
f32 = Scalar("f32", "f")
f64 = Scalar("f64", "d")
boolean = Scalar("bool", "?")
char = Scalar("char", "c")


@dataclass(frozen=True, slots=True)
class Array:
    """Fixed-length array of scalars, decoded as a tuple."""
    element: Scalar
    length: int


@dataclass(frozen=True, slots=True)
class Raw:
    """Opaque fixed-size byte block, decoded as bytes and never swapped."""
    length: int


class FieldKind(Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    ARRAY = "array"
    RECORD = "record"
    RAW = "raw"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """
    One entry of a record's descriptor table: where a field lives in the
    packed encoding and how it must be converted.
    """
    name: str
    offset: int
    size: int
    kind: FieldKind
    scalar: Scalar | None = None
    length: int = 1
    type_: type | None = None

    def decode(self, raw: bytes, endian: Endian) -> Any:
        match self.kind:
            case FieldKind.SCALAR:
                return self.scalar.decode(raw, endian)  # type: ignore[union-attr]
            case FieldKind.ENUM:
                value = self.scalar.decode(raw, endian)  # type: ignore[union-attr]
                try:
                    return self.type_(value)  # type: ignore[misc]
                except ValueError as exc:
                    raise DecodeError(f"{self.name}: {value} is not a valid {self.type_.__name__}") from exc  # type: ignore[union-attr]
            case FieldKind.ARRAY:
                width = self.scalar.size  # type: ignore[union-attr]
                native = endian_swap(endian, raw, width, self.length)
                return struct.unpack(f"={self.length}{self.scalar.code}", native)  # type: ignore[union-attr]
            case FieldKind.RECORD:
                return layout_of(self.type_).decode(raw, endian)  # type: ignore[arg-type]
            case _:
                logger.debug(f"No endian conversion for {self.kind.value} field '{self.name}'")
                return bytes(raw)

    def encode(self, value: Any, endian: Endian) -> bytes:
        match self.kind:
            case FieldKind.SCALAR:
                return self.scalar.encode(value, endian)  # type: ignore[union-attr]
            case FieldKind.ENUM:
                return self.scalar.encode(int(value), endian)  # type: ignore[union-attr]
            case FieldKind.ARRAY:
                if len(value) != self.length:
                    raise ValueError(f"{self.name}: expected {self.length} elements, got {len(value)}")
                native = struct.pack(f"={self.length}{self.scalar.code}", *value)  # type: ignore[union-attr]
                return endian_swap(endian, native, self.scalar.size, self.length)  # type: ignore[union-attr]
            case FieldKind.RECORD:
                return layout_of(self.type_).encode(value, endian)  # type: ignore[arg-type]
            case _:
                logger.debug(f"No endian conversion for {self.kind.value} field '{self.name}'")
                data = bytes(value)
                if len(data) != self.size:
                    raise ValueError(f"{self.name}: expected {self.size} bytes, got {len(data)}")
                return data


@dataclass(frozen=True, slots=True)
class Layout:
    """
    Descriptor table of a record type, built once when the class is
    declared. Fields are packed back to back in declaration order, with
    no padding: `size` is the sum of the field sizes.
    """
    cls: type
    fields: tuple[FieldSpec, ...]
    size: int

    def decode(self, data: bytes | bytearray | memoryview, endian: Endian = Endian.NATIVE) -> Any:
        if len(data) != self.size:
            raise DecodeError(f"{self.cls.__name__} needs {self.size} bytes, got {len(data)}")

        view = memoryview(data)
        values = {
            f.name: f.decode(bytes(view[f.offset:f.offset + f.size]), endian)
            for f in self.fields
        }
        return self.cls(**values)

    def encode(self, value: Any, endian: Endian = Endian.NATIVE) -> bytes:
        if not isinstance(value, self.cls):
            raise TypeError(f"Expected {self.cls.__name__}, got {type(value).__name__}")
        return b"".join(f.encode(getattr(value, f.name), endian) for f in self.fields)

    def offsets(self) -> dict[str, int]:
        return {f.name: f.offset for f in self.fields}


def is_record(tp: Any) -> bool:
    return isinstance(tp, type) and isinstance(getattr(tp, "__layout__", None), Layout)


def layout_of(tp: type) -> Layout:
    if not is_record(tp):
        raise LayoutError(f"{tp!r} is not a record type")
    return tp.__layout__  # type: ignore[attr-defined]


def sizeof(tp: Scalar | type) -> int:
    if isinstance(tp, Scalar):
        return tp.size
    return layout_of(tp).size


def _field_spec(owner: type, name: str, hint: Any, offset: int) -> FieldSpec:
    if is_record(hint):
        size = layout_of(hint).size
        return FieldSpec(name, offset, size, FieldKind.RECORD, type_=hint)

    if get_origin(hint) is not Annotated:
        raise LayoutError(f"{owner.__name__}.{name}: missing binary annotation for {hint!r}")

    base, *metadata = get_args(hint)
    marker = next((m for m in metadata if isinstance(m, Scalar | Array | Raw)), None)

    match marker:
        case Scalar() if isinstance(base, type) and issubclass(base, Enum):
            return FieldSpec(name, offset, marker.size, FieldKind.ENUM, scalar=marker, type_=base)
        case Scalar():
            return FieldSpec(name, offset, marker.size, FieldKind.SCALAR, scalar=marker)
        case Array(element=element, length=length) if length > 0:
            return FieldSpec(
                name, offset, element.size * length, FieldKind.ARRAY, scalar=element, length=length
            )
        case Raw(length=length) if length > 0:
            return FieldSpec(name, offset, length, FieldKind.RAW, length=length)
        case _:
            raise LayoutError(f"{owner.__name__}.{name}: unsupported binary annotation {hint!r}")


def build_layout(cls: type) -> Layout:
    hints = get_type_hints(cls, include_extras=True)
    specs: list[FieldSpec] = []
    offset = 0

    for f in dataclasses.fields(cls):
        spec = _field_spec(cls, f.name, hints[f.name], offset)
        specs.append(spec)
        offset += spec.size

    if not specs:
        raise LayoutError(f"{cls.__name__} declares no fields")

    return Layout(cls=cls, fields=tuple(specs), size=offset)


def record(cls: type | None = None, /) -> Any:
    """
    Class decorator turning an annotated class into an immutable,
    fixed-layout binary record.

        @record
        class Point:
            x: Annotated[int, i32]
            y: Annotated[int, i32]

    The resulting class is a frozen dataclass carrying its Layout in
    `__layout__`. Supported annotations are scalars, enums with a scalar
    marker, `Array`, `Raw` and nested record types.
    """
    def wrap(klass: type) -> type:
        klass = dataclass(frozen=True, slots=True)(klass)
        klass.__layout__ = build_layout(klass)  # type: ignore[attr-defined]
        return klass

    if cls is None:
        return wrap
    return wrap(cls)
