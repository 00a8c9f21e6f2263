import argparse
import os
from pathlib import Path
from typing import Sequence

DEFAULT_CONFIGFILE = "binstream.yaml"


def parse_cli_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="binstream-unzip",
        description=(
            "Extract the first entry of a ZIP archive.\n\n"
            "The local file record at the start of the archive is decoded,\n"
            "described, and its payload is copied verbatim (no decompression)\n"
            "to a file named after the entry."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "archive",
        type=str,
        help="Path to the ZIP archive"
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a binstream configuration file"
    )

    parser.add_argument(
        "-o", "--output-dir",
        type=str,
        help="Directory receiving the extracted entry (default: output.directory)"
    )

    parser.add_argument(
        "-f", "--format",
        type=str,
        choices=["yaml", "json", "none"],
        help="How to print the entry description (default: render.format)"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity.\n"
            "DEBUG    → field-level decoding traces.\n"
            "INFO     → one line per extracted entry (default).\n"
            "WARNING  → open failures and signature mismatches only."
        ),
    )

    return parser.parse_args(argv)


def get_configfile(cli_path: str | None = None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv("BINSTREAM_CONFIG")

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIGFILE
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the BINSTREAM_CONFIG environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIGFILE}' file in the current working directory."
        )

    return file
