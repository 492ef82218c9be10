"""Python logging configuration for the nginx load balancer.

Sets up console output for every component. Stage transitions of a poll
cycle are logged at INFO, rendered configuration at TRACE.

Environment Variables:
    LOG_LEVEL: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    PYTHON_LOG_FORMAT: Log message format (default: see below)
"""

import os
import sys
import logging
from typing import Optional

from .log_levels import TRACE


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    # ANSI color codes
    COLORS = {
        'TRACE': '\033[90m',     # Dark gray
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        msg = super().format(record)

        if sys.stdout.isatty():
            color = self.COLORS.get(record.levelname, '')
            if color:
                msg = f"{color}{msg}{self.RESET}"

        return msg


def resolve_level(log_level: str) -> int:
    """Convert a level name to a logging constant."""
    log_level = log_level.upper()
    if log_level == 'TRACE':
        return TRACE
    return getattr(logging, log_level, logging.INFO)


def setup_python_logging(
    log_level: Optional[str] = None,
    use_colors: bool = True,
    log_format: Optional[str] = None
) -> logging.Logger:
    """Configure Python logging with console output.

    Args:
        log_level: Logging level (if None, reads from env)
        use_colors: Whether to use colored output for TTY
        log_format: Custom log format (if None, uses default)

    Returns:
        Configured root logger
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    if log_format is None:
        log_format = os.getenv(
            'PYTHON_LOG_FORMAT',
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    level = resolve_level(log_level)

    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if use_colors and sys.stdout.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    console_handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    logging.getLogger('nginx_lb').setLevel(level)

    silence_noisy_loggers()

    root_logger.info(f"Python logging configured: level={log_level.upper()}, colors={use_colors and sys.stdout.isatty()}")

    return root_logger


def silence_noisy_loggers():
    """Reduce verbosity of noisy third-party loggers."""
    noisy_loggers = [
        'asyncio',
        'httpx',
        'httpcore',
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
