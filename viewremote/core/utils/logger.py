#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging base class for viewremote components.

Components inherit from ``ModernLogger`` and call ``self.debug(...)``,
``self.info(...)`` and friends. Records go to a child of the ``viewremote``
logger; console output is produced by a single ``RichHandler`` on stderr that
``ModernLogger.configure`` installs once per process.
"""

import logging
import threading
from typing import Any, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "viewremote"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

_CONFIGURE_LOCK = threading.Lock()
_HANDLER: Optional[RichHandler] = None


def parse_level(level: Union[str, int, None]) -> int:
    """
    Convert ``"info"``/``"DEBUG"``/``10`` style levels to logging constants.
    """
    if level is None:
        return logging.WARNING
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[str(level).strip().lower()]
    except KeyError:
        raise ValueError(
            "Unknown log level '{0}', expected one of: {1}".format(level, ", ".join(_LEVELS))
        ) from None


class ModernLogger:
    """
    Mixin giving a component its own named logger.
    """

    def __init__(self, name: str, level: Union[str, int, None] = None) -> None:
        if not name.startswith(ROOT_LOGGER_NAME):
            name = "{0}.{1}".format(ROOT_LOGGER_NAME, name)
        self._logger = logging.getLogger(name)
        if level is not None:
            self._logger.setLevel(parse_level(level))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @classmethod
    def configure(cls, level: Union[str, int, None] = "warning", console: Optional[Console] = None) -> RichHandler:
        """
        Attach the shared console handler to the ``viewremote`` logger.

        Calling this again only updates the level.
        """
        global _HANDLER

        root = logging.getLogger(ROOT_LOGGER_NAME)
        with _CONFIGURE_LOCK:
            if _HANDLER is None:
                _HANDLER = RichHandler(
                    console=console or Console(stderr=True),
                    show_path=False,
                    rich_tracebacks=True,
                )
                _HANDLER.setFormatter(logging.Formatter("%(name)s: %(message)s"))
                root.addHandler(_HANDLER)
                root.propagate = False
            root.setLevel(parse_level(level))
        return _HANDLER

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.critical(msg, *args, **kwargs)
