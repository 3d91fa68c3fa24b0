"""Logging setup for the pcv command line.

Verbosity is chosen, in order of precedence, by ``--log-level``, the
``PCV_LOG_LEVEL`` environment variable, or the ``-v``/``-q`` counters.
At DEBUG the filters report kernel weights, band layout and the Otsu split.
Progress bars are only shown while INFO messages are.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_ENV = "PCV_LOG_LEVEL"

# -qq, -q, (none), -v
VERBOSITY_LADDER = (logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(threadName)s]: %(message)s"


def add_logging_args(parser) -> None:
    """Add --log-level, -v and -q to a pcv argument parser."""
    parser.add_argument(
        "--log-level",
        choices=tuple(LOG_LEVELS),
        help=f"Log level (default: ${LOG_LEVEL_ENV}, else info)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Show debug output: kernels, band layout, Otsu split",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Only warnings and failures (-qq: failures only); hides progress bars",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Numeric level for the given flags.

    Raises:
        ValueError: If the level named by ``log_level`` or PCV_LOG_LEVEL is unknown.
    """
    name = log_level or os.environ.get(LOG_LEVEL_ENV)
    if name:
        try:
            return LOG_LEVELS[name.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown log level {name!r}; expected one of {', '.join(LOG_LEVELS)}"
            ) from None

    step = 2 + verbose - quiet
    return VERBOSITY_LADDER[min(max(step, 0), len(VERBOSITY_LADDER) - 1)]


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Route log records to stderr at the resolved level and return that level.

    DEBUG output carries timestamps and the thread name, which identifies the
    executor worker that computed a band.
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format=DEBUG_LOG_FORMAT if level <= logging.DEBUG else LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    return level


def progress_enabled() -> bool:
    """Whether progress bars should be drawn at the current root level."""
    return logging.getLogger().getEffectiveLevel() <= logging.INFO
