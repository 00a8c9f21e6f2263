import struct

LOCAL_HEADER_FORMAT = "<IHHHHHIIIHH"


def local_file_bytes(
    name: bytes = b"test",
    data: bytes = b"hello",
    extra: bytes = b"",
    crc32: int = 0xDEADBEEF,
    flags: int = 0,
    method: int = 0,
    compressed_size: int | None = None,
    signature: int = 0x04034B50,
) -> bytes:
    """Little-endian encoding of one ZIP local file record."""
    size = len(data) if compressed_size is None else compressed_size
    header = struct.pack(
        LOCAL_HEADER_FORMAT,
        signature,
        20,
        flags,
        method,
        0,
        0,
        crc32,
        size,
        len(data),
        len(name),
        len(extra),
    )
    return header + name + extra + data
