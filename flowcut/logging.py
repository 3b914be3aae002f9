"""Logging setup for flowcut.

All package loggers hang below the ``flowcut`` logger, which carries the only
handler. Its level and record format default to ``FLOW_CONFIG.log_level`` and
``FLOW_CONFIG.log_format``.

Messages emitted by the package:
    DEBUG: construction start and finish, stage progress every
        ``FLOW_CONFIG.progress_interval`` stages, matching summary.
    INFO: construction stopped early by a predicate or stage limit; CLI
        file loading.
    WARNING: cut extraction before the engine is DONE; construction aborted
        by an exception.
"""

import logging
import sys
from typing import Optional, Union

from flowcut.config import FLOW_CONFIG

ROOT_LOGGER_NAME = "flowcut"

_configured = False


def _as_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return value
    return level


def setup_root_logger(
    level: Union[int, str, None] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
    force: bool = False,
) -> logging.Logger:
    """Attach a single handler to the ``flowcut`` logger.

    Later calls are no-ops unless ``force`` is set, in which case the existing
    handler is replaced.

    Args:
        level: Level as int or name; defaults to ``FLOW_CONFIG.log_level``.
        format_string: Record format; defaults to ``FLOW_CONFIG.log_format``.
        handler: Handler to install; defaults to a StreamHandler on stdout.
        force: Reconfigure even if already set up.

    Returns:
        The ``flowcut`` logger.
    """
    global _configured

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _configured and not force:
        return root_logger

    root_logger.setLevel(_as_level(FLOW_CONFIG.log_level if level is None else level))
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or FLOW_CONFIG.log_format))
    root_logger.addHandler(handler)

    # Records also reach the interpreter root so pytest's caplog sees them
    root_logger.propagate = True

    _configured = True
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a package logger; its level comes from the ``flowcut`` logger."""
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Set the level of the ``flowcut`` logger and its handlers."""
    value = _as_level(level)
    root_logger = setup_root_logger()
    root_logger.setLevel(value)
    for handler in root_logger.handlers:
        handler.setLevel(value)


def cli_log_level(verbose: bool, quiet: bool) -> int:
    """Map the CLI ``--verbose``/``--quiet`` switches onto a level.

    ``--verbose`` wins over ``--quiet``; with neither, the configured level
    applies.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return _as_level(FLOW_CONFIG.log_level)


setup_root_logger()
