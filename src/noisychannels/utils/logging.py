"""Logging for the noisychannels package.

The package logs through loguru but stays silent until the application opts
in with :func:`configure_logger`. Importing the package never touches the
handlers or the ``warnings`` hook of the host program.
"""

import logging
import os
import sys
import warnings
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

PACKAGE = "noisychannels"

# Extra levels around the built-in ones: VALUES below DEBUG for numeric dumps,
# HEADER between SUCCESS and WARNING for section banners
_CUSTOM_LEVELS = {
    "VALUES": dict(no=5, color="<cyan>", icon="➤"),
    "HEADER": dict(no=28, color="<blue>", icon="🧠"),
}

for _name, _options in _CUSTOM_LEVELS.items():
    try:
        logger.level(_name)
    except ValueError:
        logger.level(_name, **_options)

logger.disable(PACKAGE)

# Handlers added by configure_logger; host handlers are never removed
_handler_ids: List[int] = []


class WarningToLogger:
    """``warnings.showwarning`` replacement that logs each distinct warning once in a row."""

    def __init__(self):
        self._last_warning = None

    def __call__(self, message, category, filename, lineno, file=None, line=None):
        key = (str(message), category, filename, lineno)
        if key == self._last_warning:
            return
        self._last_warning = key
        logger.warning(f"{category.__name__}: {message}")


class LogLevel(str, Enum):
    """Verbosity names accepted by :func:`configure_logger`."""

    VALUES = "VALUES"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    HEADER = "HEADER"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def from_value(cls, value: Union[str, int, bool, None]) -> "LogLevel":
        """Convert a bool, logging number, level name or None to a LogLevel.

        ``True``/``False`` mean INFO/WARNING. Numbers map to the highest level
        not above them. ``None`` reads ``MNE_LOGGING_LEVEL`` (default INFO).
        Unknown names give INFO.
        """
        if value is None:
            return cls.from_value(os.getenv("MNE_LOGGING_LEVEL", "INFO"))
        if isinstance(value, bool):
            return cls.INFO if value else cls.WARNING
        if isinstance(value, int):
            thresholds = [
                (logging.CRITICAL, cls.CRITICAL),
                (logging.ERROR, cls.ERROR),
                (logging.WARNING, cls.WARNING),
                (logging.INFO, cls.INFO),
                (logging.DEBUG, cls.DEBUG),
            ]
            for number, level in thresholds:
                if value >= number:
                    return level
            return cls.VALUES
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.INFO


#: MNE understands only the standard level names
_MNE_LEVELS = {
    LogLevel.VALUES: "DEBUG",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.SUCCESS: "INFO",
    LogLevel.HEADER: "WARNING",
    LogLevel.WARNING: "WARNING",
    LogLevel.ERROR: "ERROR",
    LogLevel.CRITICAL: "CRITICAL",
}


def message(level: str, text: str, **kwargs) -> None:
    """Log ``text`` at ``level`` ('values', 'debug', 'info', 'header', ...).

    Keyword arguments are callables, evaluated only if the message is emitted.
    """
    level = level.upper()
    if kwargs:
        logger.opt(lazy=True, depth=1).log(level, text, **kwargs)
    else:
        logger.opt(depth=1).log(level, text)


def configure_logger(
    verbose: Optional[Union[bool, str, int, LogLevel]] = None,
    output_dir: Optional[Union[str, Path]] = None,
    capture_warnings: bool = True,
) -> str:
    """Enable package logging and (re)install its handlers.

    Calling this again replaces the handlers added by the previous call;
    handlers added elsewhere in the application are left alone.

    Parameters
    ----------
    verbose : bool, str, int, LogLevel, optional
        Minimum level shown, see :meth:`LogLevel.from_value`.
    output_dir : str or Path, optional
        If given, logs are also written to rotating files in ``output_dir/logs``.
    capture_warnings : bool, default True
        Route Python warnings (e.g. from MNE or numpy) into the log.

    Returns
    -------
    str
        The matching MNE verbosity ('DEBUG', 'INFO', 'WARNING', 'ERROR' or 'CRITICAL').
    """
    while _handler_ids:
        logger.remove(_handler_ids.pop())

    level = LogLevel.from_value(verbose)

    if output_dir is not None:
        log_dir = Path(output_dir) / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        _handler_ids.append(
            logger.add(
                str(log_dir / "noisychannels_{time}.log"),
                rotation="1 day",
                retention="1 week",
                level=level.value,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
                colorize=False,
                catch=True,
            )
        )

    _handler_ids.append(
        logger.add(
            sys.stderr,
            level=level.value,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
            colorize=True,
            catch=True,
        )
    )

    if capture_warnings:
        warnings.showwarning = WarningToLogger()

    logger.enable(PACKAGE)
    return _MNE_LEVELS[level]
