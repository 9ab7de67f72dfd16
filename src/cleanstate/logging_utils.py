"""Logging setup for the cleanstate command line and host applications.

Library modules only call ``logging.getLogger(__name__)``. This module attaches
handlers to the ``cleanstate`` package logger so that an application embedding
a session keeps control of the root logger and its own handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "cleanstate"

# Marks handlers installed here so reconfiguring replaces only those
_HANDLER_TAG = "_cleanstate_handler"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def remove_handlers(logger_name: str = PACKAGE_LOGGER) -> None:
    """Detach and close the handlers a previous :func:`configure_logging` installed."""
    logger = logging.getLogger(logger_name)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """Send cleanstate log records to stderr and, optionally, a file.

    Calling this again replaces the handlers from the previous call. Handlers
    added by the host application, and the root logger, are left alone.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name such as "INFO"; unknown names
        fall back to INFO
    log_file : str, optional
        Path of a file that receives a copy of the output
    trace_mode : bool, default False
        Prefix records with a timestamp and the emitting module
    logger_name : str, default "cleanstate"
        Logger to configure

    Returns
    -------
    logging.Logger
        The configured logger

    """
    resolved_level = _resolve_level(log_level)

    logger = logging.getLogger(logger_name)
    remove_handlers(logger_name)
    logger.setLevel(resolved_level)

    if trace_mode:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter("cleanstate %(levelname)s: %(message)s")

    console_handler = _tag(logging.StreamHandler(sys.stderr))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = _tag(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            logger.warning(f"Could not open log file {log_file}: {exc}")
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.debug(f"Logging to file: {log_file}")

    return logger


__all__ = ["PACKAGE_LOGGER", "configure_logging", "remove_handlers"]
