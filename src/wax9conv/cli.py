"""Command-line entry point: ``wax9conv INPUT OUTPUT_DIR [split|no_split]``."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from .config.runtime import load_config, resolve_timezone
from .core.pipeline import convert_file
from .errors import Wax9Error

logger = logging.getLogger(__name__)

MIN_INPUT_BYTES = 4
_SPLIT_WORDS = {"split": True, "no_split": False}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wax9conv",
        description="Convert a WAX9 binary stream into mHealth accelerometer CSV files.",
    )
    parser.add_argument("input", type=str, help="WAX9 binary input file")
    parser.add_argument("output_dir", type=str, help="Existing directory for the CSV output")
    parser.add_argument(
        "mode",
        nargs="*",
        metavar="split|no_split",
        help="Start a new file at every hour boundary (default: no_split)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Optional YAML config file (CLI values take precedence)",
    )
    parser.add_argument(
        "--timezone",
        type=str,
        default=None,
        help="IANA timezone for timestamps and hour boundaries (default: UTC)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return parser


def _parse_split(parser: argparse.ArgumentParser, words: Sequence[str]) -> Optional[bool]:
    split: Optional[bool] = None
    for word in words:
        key = word.lower()
        if key not in _SPLIT_WORDS:
            parser.error(f"Unknown option {word!r}; expected split or no_split")
        if split is not None:
            parser.error("Already specified split option.")
        split = _SPLIT_WORDS[key]
    return split


def validate_input_file(path: Path) -> None:
    """Raise ``OSError`` unless *path* is a readable file of useful size."""
    if not path.exists():
        raise FileNotFoundError(f"Input file {path} doesn't exist")
    if path.is_dir():
        raise IsADirectoryError(f"{path} is a directory. Input must be a file.")
    if not os.access(path, os.R_OK):
        raise PermissionError(f"Cannot read file {path.resolve()}")
    if path.stat().st_size < MIN_INPUT_BYTES:
        raise OSError(f"Input file {path} is empty")


def validate_output_directory(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Output directory {path} doesn't exist")
    if not path.is_dir():
        raise NotADirectoryError(f"{path} is not a directory.")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    split = _parse_split(parser, args.mode)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.timezone is not None:
        try:
            resolve_timezone(args.timezone)
        except ValueError as exc:
            parser.error(str(exc))

    input_path = Path(args.input).expanduser()
    output_dir = Path(args.output_dir).expanduser()
    try:
        validate_input_file(input_path)
        validate_output_directory(output_dir)
        config = load_config(args.config).with_overrides(
            split_by_hour=split,
            timezone=args.timezone,
        )
        result = convert_file(input_path, output_dir, config)
    except Wax9Error as exc:
        logger.error("Conversion of %s failed: %s", input_path, exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Problem occurred while reading %s: %s", input_path, exc)
        return 1

    for path in result.output_paths:
        print(path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
