import logging
import sys
from typing import Any, Sequence

from binstream.bootstrap.config.loader import get_configfile, parse_cli_args
from binstream.bootstrap.config.settings import load_config
from binstream.bootstrap.deps import get_archive, get_description_renderer, get_output_serializer
from binstream.core.formats.zip import describe_local_file, extract_local_file
from binstream.core.helpers.utils import setup_logging

EXIT_OK = 0
EXIT_OPEN_FAILED = 2
EXIT_NO_FILENAME = 3
EXIT_READ_FAILED = 4

logger = logging.getLogger("bootstrap")


def main(argv: Sequence[str] | None = None) -> int:
    cli = parse_cli_args(argv)

    overrides: dict[str, Any] = {}
    if cli.log_level:
        overrides["log_level"] = cli.log_level
    if cli.output_dir:
        overrides["output"] = {"directory": cli.output_dir}
    if cli.format:
        overrides["render"] = {"format": cli.format}

    config = load_config(get_configfile(cli.config), **overrides)
    setup_logging(config.log_level)

    with get_archive(config) as archive:
        if not archive.initialize(cli.archive):
            return EXIT_OPEN_FAILED

        files = archive.filelist()
        if not files:
            logger.error(f"Cannot read {archive.filename}: {files.status}")
            return EXIT_READ_FAILED

    renderer = get_description_renderer(config)

    for local_file in files.value:
        if not local_file.header.has_valid_signature:
            logger.warning(f"Unexpected local file signature {local_file.header.signature:#x}")

        if renderer is not None:
            print(renderer.render(describe_local_file(local_file)))

        if not local_file.file_name:
            logger.error("Zip entry doesn't have a filename.")
            return EXIT_NO_FILENAME

        extracted = extract_local_file(
            local_file,
            get_output_serializer(),
            directory=config.output.directory,
            overwrite=config.output.overwrite,
        )
        if not extracted:
            logger.error(f"Cannot extract {local_file.file_name}: {extracted.status}")
            return EXIT_READ_FAILED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
