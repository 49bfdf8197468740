"""
Logging configuration for the application.
Colored level names on a terminal, plain text otherwise.
"""
import copy
import logging
import sys
from config import Config


class ColoredFormatter(logging.Formatter):
    """Formatter coloring the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers may share the record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_level(level: int | str | None = None) -> int:
    """
    Turn a level name or number into a logging level.

    Args:
        level: Level such as "debug" or logging.DEBUG, defaults to Config.LOG_LEVEL

    Returns:
        Numeric logging level, INFO for unknown names
    """
    if level is None:
        level = Config.LOG_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logger(name: str, level: int | str | None = None, stream=None) -> logging.Logger:
    """
    Set up a logger writing to stdout.

    Args:
        name: Logger name
        level: Logging level, defaults to Config.LOG_LEVEL
        stream: Output stream, defaults to sys.stdout

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if logger.handlers:
        return logger

    stream = stream or sys.stdout
    handler = logging.StreamHandler(stream)

    formatter_class = ColoredFormatter if getattr(stream, "isatty", lambda: False)() else logging.Formatter
    handler.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(handler)
    return logger


app_logger = setup_logger("fda_chat")
