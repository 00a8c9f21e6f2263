from binstream.bootstrap.config.settings import BinstreamConfig
from binstream.core.formats.zip import ZipArchive
from binstream.core.ports.render import Renderer
from binstream.core.serializer.serializer import Serializer
from binstream.infra.file_backend import FileBackend
from binstream.infra.format_renderer import get_renderer


def get_archive(config: BinstreamConfig) -> ZipArchive:
    return ZipArchive(
        serializer=Serializer(FileBackend()),
        header_endian=config.zip.endian
    )


def get_output_serializer() -> Serializer[FileBackend]:
    return Serializer(FileBackend())


def get_description_renderer(config: BinstreamConfig) -> Renderer | None:
    return get_renderer(config.render.format)
