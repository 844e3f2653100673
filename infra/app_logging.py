"""Application logger with colored console output."""

import logging
import os
from typing import ClassVar


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET: ClassVar[str] = "\033[0m"

    def format(self, record):
        """Format the log record with color codes for the level name."""
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger():
    """Set up the application logger with a colored console handler."""
    logger = logging.getLogger("AppLogger")

    # Get log level from environment variable, default to INFO
    log_level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    format_str = "%(asctime)s - %(name)s - %(filename)s - %(levelname)s - %(message)s"

    # Diagnostics go to stderr so the report table owns stdout
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(ColoredFormatter(format_str))
    logger.addHandler(console_handler)

    return logger


# Create the logger instance
app_logger = setup_logger()
