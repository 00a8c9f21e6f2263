import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Annotated, Any

from binstream.core.models.status import Result, Status
from binstream.core.serializer.endian import Endian
from binstream.core.serializer.layout import record, u16, u32
from binstream.core.serializer.serializer import Serializer

LOCAL_FILE_SIGNATURE = 0x04034B50

# General purpose flag bit 11: file name and comment are UTF-8.
FLAG_UTF8 = 1 << 11

logger = logging.getLogger("core.formats.zip")


class CompressionMethod(IntEnum):
    STORED = 0
    SHRUNK = 1
    IMPLODED = 6
    DEFLATED = 8
    DEFLATE64 = 9
    BZIP2 = 12
    LZMA = 14
    ZSTD = 93
    XZ = 95


@record
class LocalFileHeader:
    """
    Fixed part of a ZIP local file record. The encoding is packed: 30
    bytes, fields back to back in this order.
    """
    signature: Annotated[int, u32]
    version_needed: Annotated[int, u16]
    flags: Annotated[int, u16]
    compression_method: Annotated[int, u16]
    last_mod_time: Annotated[int, u16]
    last_mod_date: Annotated[int, u16]
    crc32: Annotated[int, u32]
    compressed_size: Annotated[int, u32]
    uncompressed_size: Annotated[int, u32]
    file_name_length: Annotated[int, u16]
    extra_field_length: Annotated[int, u16]

    @property
    def has_valid_signature(self) -> bool:
        return self.signature == LOCAL_FILE_SIGNATURE

    @property
    def method(self) -> CompressionMethod | None:
        try:
            return CompressionMethod(self.compression_method)
        except ValueError:
            return None

    @property
    def name_encoding(self) -> str:
        return "utf-8" if self.flags & FLAG_UTF8 else "cp437"


@dataclass(frozen=True, slots=True)
class LocalFile:
    header: LocalFileHeader
    file_name: str
    extra_field: bytes
    data: bytes


class ZipArchive:
    """
    Reader for the first local file record of a ZIP archive.

    The payload is returned exactly as stored: no CRC check and no
    decompression, whatever `compression_method` says.

    Header fields are decoded as little-endian by default, which is the
    byte order mandated by the ZIP format. `header_endian=Endian.NATIVE`
    reproduces a host-order read.
    """
    def __init__(
        self,
        serializer: Serializer[Any],
        header_endian: Endian = Endian.LITTLE,
    ) -> None:
        self._serializer = serializer
        self._header_endian = header_endian
        self._filename: str | None = None

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def serializer(self) -> Serializer[Any]:
        return self._serializer

    def initialize(self, filepath: str | os.PathLike[str]) -> bool:
        if not self._serializer.initialize(filepath, readonly=True):
            logger.warning(f"Failed to open archive {filepath}")
            return False

        self._filename = Path(filepath).name
        return True

    def quiesce(self) -> bool:
        return self._serializer.quiesce()

    def __enter__(self) -> "ZipArchive":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._serializer.__exit__(*exc_info)

    def local_file(self) -> Result[LocalFile]:
        """
        Assemble the local file record found at offset 0.

        The first failing step aborts the assembly and its Status is
        returned, so a truncated name, extra field or payload is reported
        instead of being replaced by an empty value.
        """
        stream = self._serializer

        if not stream.seek(0):
            return Result.failure(Status.failed_precondition("Cannot seek to the start of the archive."))

        header = stream.read(LocalFileHeader, self._header_endian)
        if not header:
            logger.debug(f"Failed to read local file header: {header.status}")
            return Result.failure(header.status)

        h: LocalFileHeader = header.value

        file_name = stream.read_text(h.file_name_length, encoding=h.name_encoding)
        if not file_name:
            return Result.failure(file_name.status)

        extra_field = stream.read_bytes(h.extra_field_length)
        if not extra_field:
            return Result.failure(extra_field.status)

        data = stream.read_bytes(h.compressed_size)
        if not data:
            return Result.failure(data.status)

        return Result.success(
            LocalFile(
                header=h,
                file_name=file_name.value,
                extra_field=extra_field.value,
                data=data.value,
            )
        )

    def filelist(self) -> Result[list[LocalFile]]:
        entry = self.local_file()
        if not entry:
            return Result.failure(entry.status)
        return Result.success([entry.value])


def extract_local_file(
    local_file: LocalFile,
    output: Serializer[Any],
    directory: str | os.PathLike[str] = ".",
    overwrite: bool = True,
) -> Result[Path]:
    """
    Write the raw payload of `local_file` to `directory / file_name`
    through `output`, an uninitialized file serializer.

    The output stream is quiesced on every path. Names that would land
    outside `directory` are rejected.
    """
    if not local_file.file_name:
        return Result.failure(Status.not_found("Zip entry doesn't have a filename."))

    root = Path(directory).resolve()
    target = (root / local_file.file_name).resolve()
    if root not in target.parents:
        return Result.failure(Status.invalid_argument(f"Entry escapes output directory: {local_file.file_name}"))

    if target.exists() and not overwrite:
        return Result.failure(Status.already_exists(f"{target} already exists"))

    target.parent.mkdir(parents=True, exist_ok=True)

    with output as out:
        if not out.initialize(target, overwrite=True):
            return Result.failure(Status.aborted(f"Cannot open {target} for writing"))

        if local_file.data:
            status = out.write(local_file.data)
            if not status:
                return Result.failure(status)

    logger.info(f"Extracted {local_file.file_name} ({len(local_file.data)} bytes)")
    return Result.success(target)


def describe_local_file(local_file: LocalFile) -> dict[str, Any]:
    """Human-readable summary of a local file record."""
    h = local_file.header
    method = h.method

    return {
        "header": {
            "signature": f"{h.signature:#x}",
            "version_needed": f"{h.version_needed:#x}",
            "flags": f"{h.flags:#x}",
            "compression_method": method.name.lower() if method is not None else f"{h.compression_method:#x}",
            "last_mod_time": f"{h.last_mod_time:#x}",
            "last_mod_date": f"{h.last_mod_date:#x}",
            "crc32": f"{h.crc32:#x}",
            "compressed_size": h.compressed_size,
            "uncompressed_size": h.uncompressed_size,
            "file_name_length": h.file_name_length,
            "extra_field_length": h.extra_field_length,
        },
        "file_name": local_file.file_name,
        "extra_field": local_file.extra_field.hex(" ").upper(),
        "data": local_file.data.hex(" ").upper(),
    }
