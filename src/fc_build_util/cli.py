"""
build_util — Put an executable and supplemental files into a zip file that
works with Aliyun FunctionCompute.

Usage:
    build_util [-o OUTPUT] [--preserve-paths] <input> [<input> ...]

    build_util ./handler                      # -> handler.zip
    build_util -o fn.zip ./handler conf/ scf_bootstrap
    build_util dist/                          # directory only, no bootstrap link

Environment:
    BUILD_UTIL_LOG_LEVEL  default for --log-level (INFO)

Exit codes:
    0  archive written
    1  no input provided, or the archive could not be written
    2  invalid command line (argparse)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import zipfile

from fc_build_util.archive import build_archive
from fc_build_util.exceptions import ArchiveBuildError, BuildUtilError
from fc_build_util.models import resolve_request

logger = logging.getLogger("build_util")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVEL_ENV = "BUILD_UTIL_LOG_LEVEL"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_log_level() -> str:
    level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    return level or "INFO"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="build_util",
        description=(
            "Put an executable and supplemental files into a zip file that works "
            "with Aliyun FunctionCompute."
        ),
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="input",
        help="Executable followed by supplemental files or directories",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="",
        help="output file path for the zip. Defaults to the first input file name.",
    )
    parser.add_argument(
        "--preserve-paths",
        action="store_true",
        help="Keep paths relative to each directory argument instead of base names",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=default_log_level(),
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or INFO)",
    )
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid {LOG_LEVEL_ENV}: {args.log_level!r}")
    return args


def configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    # "wrote <path>" is part of the success output at every level
    logger.setLevel(min(numeric_level, logging.INFO))


def run(inputs: list[str], output: str = "", *, preserve_paths: bool = False) -> str:
    """Build the archive and return its path.

    Raises:
        UsageError:        no input provided.
        ArchiveBuildError: reading an input or writing the archive failed.
    """
    request = resolve_request(inputs, output, preserve_paths=preserve_paths)
    try:
        entries = build_archive(request)
    except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        raise ArchiveBuildError(output_path=request.output_path, cause=exc) from exc

    logger.debug("%d entries written to %s", len(entries), request.output_path)
    logger.info("wrote %s", request.output_path)
    return request.output_path


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        run(args.inputs, args.output, preserve_paths=args.preserve_paths)
    except BuildUtilError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
