"""Logging setup for the char-diff command line."""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "char_diff"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def configure_logging(
    log_level: int | str,
    log_file: str | None = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Only the ``char_diff`` logger is touched, so an embedding application
    keeps its own root configuration. Records still propagate to the root.
    Calling this again replaces the handlers installed by the last call.

    Args:
        log_level: Numeric logging level or level name (e.g. ``"INFO"``).
        log_file: Optional path; records are also appended there.
        trace_mode: Emit timestamps and logger names.

    Returns:
        The configured ``char_diff`` logger.
    """
    if isinstance(log_level, int):
        resolved_level = log_level
    else:
        resolved_level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug("Logging to file: %s", log_file)

    return logger
