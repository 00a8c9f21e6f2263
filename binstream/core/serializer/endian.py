import sys
from enum import Enum


class Endian(str, Enum):
    LITTLE = "little"
    BIG = "big"
    # Alias of LITTLE or BIG, resolved once at import time.
    NATIVE = sys.byteorder

    @property
    def is_native(self) -> bool:
        return self.value == sys.byteorder


def needs_swap(endian: Endian, width: int) -> bool:
    """True when a value `width` bytes wide must be reversed for `endian`."""
    return width > 1 and not Endian(endian).is_native


def endian_swap(endian: Endian, data: bytes | bytearray, width: int, count: int = 1) -> bytes:
    """
    Convert `count` consecutive elements of `width` bytes between native
    order and `endian`. The conversion is symmetric, so the same call is
    used on the way in and on the way out.

    Single-byte elements and native order are returned unchanged.
    """
    if not needs_swap(endian, width):
        return bytes(data)

    if len(data) != width * count:
        raise ValueError(f"Expected {width * count} bytes, got {len(data)}")

    out = bytearray(data)
    for start in range(0, len(out), width):
        out[start:start + width] = out[start:start + width][::-1]
    return bytes(out)
