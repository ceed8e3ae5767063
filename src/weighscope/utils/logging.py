"""Logging setup shared by the library and the CLI."""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER = "weighscope"
DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def get_logger(
    name: str = ROOT_LOGGER,
    level: Optional[Union[int, str]] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Return ``name``'s logger with a single ``StreamHandler`` attached.

    ``level`` may be a number or a level name such as ``"DEBUG"``; ``None``
    leaves the current level alone.  Repeated calls (one per CLI invocation
    in tests, for instance) never stack handlers.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def set_verbosity(debug: bool) -> logging.Logger:
    """DEBUG for the whole package under ``--debug``, WARNING otherwise."""

    return get_logger(ROOT_LOGGER, level=logging.DEBUG if debug else logging.WARNING)
