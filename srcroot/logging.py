"""Logger hierarchy for the resolution engine and its front ends.

Engine modules only ever call :func:`get_logger`; handlers are installed by the
CLI through :func:`configure_logging`. Library callers that embed a
``ResolutionRun`` keep full control of where ``srcroot.*`` records go.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "srcroot"

_CONSOLE_FORMAT = "[srcroot] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Return ``srcroot.<component>``, or the hierarchy root when omitted."""
    if not component:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send srcroot records to stderr, and to ``log_file`` when given.

    ``verbose`` lowers the threshold to DEBUG, which shows how every path was
    classified. Diagnostics are WARNING records and always show. Calling this
    again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(), level, _CONSOLE_FORMAT)
    if log_file is not None:
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT)
    return logger


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
