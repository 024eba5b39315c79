"""
Logging configuration for the Module Troubleshooter.

All loggers live under the ``module_troubleshooter`` namespace. Run
diagnostics go to stderr so that a report printed to stdout stays clean.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = 'module_troubleshooter'

SHORT_FORMAT = '%(levelname)s - %(message)s'
DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
RESET = '\033[0m'


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name of console records."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        # Other handlers of the same record keep the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(colored)


def _stream_supports_color(stream) -> bool:
    return hasattr(stream, 'isatty') and stream.isatty()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, verbose: bool = False,
                  use_colors: Optional[bool] = None) -> logging.Logger:
    """
    Configure the troubleshooter's loggers.

    Calling it again replaces the handlers of a previous call.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file receiving every record at DEBUG level
        verbose: Use the detailed format with timestamp, logger and source line
        use_colors: Color console level names; auto-detected from stderr when None

    Returns:
        The ``module_troubleshooter`` logger
    """
    console_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    if use_colors is None:
        use_colors = _stream_supports_color(sys.stderr)
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    console_handler.setFormatter(formatter_class(DETAILED_FORMAT if verbose else SHORT_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the troubleshooter namespace.

    Args:
        name: Short component name, e.g. "config"

    Returns:
        Logger named ``module_troubleshooter.<name>``
    """
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
