"""Image operation subcommands: parsing and control flow."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from tqdm import tqdm

from config import (
    DEFAULT_GRAY_DEPTH,
    DEFAULT_KERNEL_SIZE,
    DEFAULT_OUTPUT_DEPTH,
    DEFAULT_SIGMA,
    DEFAULT_THRESHOLD,
)
from image_io import load_image, save_image
from logging_utils import progress_enabled
from processing import ProcessConfig, run_pipeline

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 2


def _common_parser() -> argparse.ArgumentParser:
    """Arguments shared by every operation subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "sources",
        nargs="+",
        metavar="SOURCE",
        help="Input image file(s)",
    )
    common.add_argument(
        "-o", "--output",
        required=True,
        help="Output file (one source) or directory (several sources)",
    )
    common.add_argument(
        "--depth",
        type=int,
        choices=(8, 16),
        default=DEFAULT_OUTPUT_DEPTH,
        help=f"Bits per sample written (default: {DEFAULT_OUTPUT_DEPTH}; 16 needs PNG/TIFF)",
    )
    common.add_argument(
        "--artifact-dir",
        help="Save the input and each intermediate step under this directory",
    )
    return common


def _band_parser() -> argparse.ArgumentParser:
    bands = argparse.ArgumentParser(add_help=False)
    bands.add_argument(
        "--band-rows",
        type=int,
        default=None,
        metavar="N",
        help="Process the image in bands of N rows (default: whole image)",
    )
    return bands


def _kernel_parser() -> argparse.ArgumentParser:
    kernel = argparse.ArgumentParser(add_help=False)
    kernel.add_argument(
        "-k", "--kernel-size",
        type=int,
        default=DEFAULT_KERNEL_SIZE,
        help=f"Odd neighborhood side length (default: {DEFAULT_KERNEL_SIZE})",
    )
    return kernel


def add_operation_subparsers(subparsers: argparse._SubParsersAction) -> None:
    common = _common_parser()
    kernel = _kernel_parser()
    bands = _band_parser()

    gray_parser = subparsers.add_parser(
        "gray",
        parents=[common],
        help="Convert to grayscale (BT.709 luma)",
    )
    gray_parser.add_argument(
        "--gray-depth",
        type=int,
        choices=(8, 16),
        default=DEFAULT_GRAY_DEPTH,
        help=f"Grayscale precision (default: {DEFAULT_GRAY_DEPTH})",
    )
    gray_parser.set_defaults(_cmd=cmd_process)

    bgr_parser = subparsers.add_parser(
        "bgr",
        parents=[common],
        help="Swap red and blue channels",
    )
    bgr_parser.set_defaults(_cmd=cmd_process, color="bgr")

    binarize_parser = subparsers.add_parser(
        "binarize",
        parents=[common],
        help="Binarize at a fixed threshold",
    )
    binarize_parser.add_argument(
        "-t", "--threshold",
        type=int,
        default=DEFAULT_THRESHOLD,
        help=f"Pixels below this gray value become black (default: {DEFAULT_THRESHOLD})",
    )
    binarize_parser.set_defaults(_cmd=cmd_process, operation="binarize")

    otsu_parser = subparsers.add_parser(
        "otsu",
        parents=[common],
        help="Binarize at the threshold chosen by Otsu's method",
    )
    otsu_parser.set_defaults(_cmd=cmd_process, operation="otsu")

    gaussian_parser = subparsers.add_parser(
        "gaussian",
        parents=[common, kernel, bands],
        help="Gaussian blur",
    )
    gaussian_parser.add_argument(
        "-s", "--sigma",
        type=float,
        default=DEFAULT_SIGMA,
        help=f"Standard deviation in pixels (default: {DEFAULT_SIGMA})",
    )
    gaussian_parser.set_defaults(_cmd=cmd_process, operation="gaussian")

    median_parser = subparsers.add_parser(
        "median",
        parents=[common, kernel, bands],
        help="Median blur",
    )
    median_parser.set_defaults(_cmd=cmd_process, operation="median")

    mean_parser = subparsers.add_parser(
        "mean",
        parents=[common, kernel, bands],
        help="Mean (box) blur",
    )
    mean_parser.set_defaults(_cmd=cmd_process, operation="mean")


def build_config(args: argparse.Namespace) -> ProcessConfig:
    """Translate parsed arguments into a ProcessConfig."""
    color = getattr(args, "color", None)
    if args.command == "gray":
        color = f"gray{args.gray_depth}"
    return ProcessConfig(
        color=color,
        operation=getattr(args, "operation", None),
        kernel_size=getattr(args, "kernel_size", DEFAULT_KERNEL_SIZE),
        sigma=getattr(args, "sigma", DEFAULT_SIGMA),
        threshold=getattr(args, "threshold", DEFAULT_THRESHOLD),
        band_rows=getattr(args, "band_rows", None),
    )


def resolve_targets(sources: list[Path], output: Path) -> list[tuple[Path, Path]]:
    """Pair each source with its destination.

    A single source is written to ``output`` itself; several sources are
    written into ``output`` as a directory, one PNG per source stem.
    """
    if len(sources) == 1:
        return [(sources[0], output)]
    return [(source, output / f"{source.stem}.png") for source in sources]


def find_collisions(pairs: list[tuple[Path, Path]]) -> dict[Path, list[Path]]:
    """Destinations claimed by more than one source, with those sources.

    Artifact directories are named after the same stem, so a collision here
    also means two sources would share an artifact directory.
    """
    claims: dict[Path, list[Path]] = {}
    for source, target in pairs:
        claims.setdefault(target, []).append(source)
    return {target: sources for target, sources in claims.items() if len(sources) > 1}


def cmd_process(args: argparse.Namespace) -> int:
    config = build_config(args)
    try:
        config.validate()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_FAILED

    pairs = resolve_targets([Path(s) for s in args.sources], Path(args.output))
    collisions = find_collisions(pairs)
    if collisions:
        for target, sources in collisions.items():
            logger.error(
                "Sources %s would all be written to %s",
                ", ".join(str(s) for s in sources),
                target,
            )
        logger.error("Rename the inputs or process them separately; nothing was written")
        return EXIT_FAILED

    failures = 0

    show_progress = len(pairs) > 1 and progress_enabled()
    for source, target in tqdm(pairs, desc="Processing", disable=not show_progress):
        try:
            buffer = load_image(source)
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Skipping %s: %s", source, exc)
            failures += 1
            continue

        artifact_dir = None
        if args.artifact_dir:
            artifact_dir = str(Path(args.artifact_dir) / source.stem)

        try:
            result = run_pipeline(buffer, config, artifact_dir=artifact_dir)
            save_image(result.processed, target, depth=args.depth)
        except (OSError, ValueError) as exc:
            logger.error("Could not write %s: %s", target, exc)
            failures += 1
            continue

        if result.threshold is not None:
            logger.info("Wrote %s (threshold %s)", target, result.threshold)
        else:
            logger.info("Wrote %s", target)

    if failures:
        logger.warning("%s of %s image(s) failed", failures, len(pairs))
        return EXIT_FAILED
    return EXIT_OK
