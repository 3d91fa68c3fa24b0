#!/usr/bin/env python3
"""
Command line for pixel-level image processing.

Usage:
    pcv gray in.png -o out.png                 # 8-bit BT.709 grayscale
    pcv gray in.png -o out.png --gray-depth 16 --depth 16
    pcv bgr in.png -o out.png                  # swap red and blue
    pcv binarize in.png -o out.png -t 128      # fixed threshold
    pcv otsu in.png -o out.png                 # Otsu threshold
    pcv gaussian in.png -o out.png -s 1.5 -k 5 # Gaussian blur
    pcv median a.png b.png -o out_dir/ -k 3    # median blur, several files
    pcv mean in.png -o out.png -k 3            # box blur
"""

import argparse
import logging
import sys

from cli.operations import add_operation_subparsers
from logging_utils import add_logging_args, configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcv",
        description="Pixel-level image processing: color conversion, binarization and blur filters",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Operation to run")
    add_operation_subparsers(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level, args.verbose, args.quiet)
    except ValueError as exc:
        parser.error(str(exc))

    cmd = getattr(args, "_cmd", None)
    if args.command is None or cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
