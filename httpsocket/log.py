#!/usr/bin/env python3
"""
httpsocket Logging Configuration

Centralized logging setup for consistent formatting across the project.
Console output always; a log file only when HTTPSOCKET_LOG_FILE is set.

Usage:
    from httpsocket.log import get_logger

    logger = get_logger(__name__)
    logger.info("Connecting...")
    logger.debug("Adding socket", extra={"socket_id": str(sock.id), "endpoint": str(sock.endpoint)})
"""

from __future__ import annotations
import logging
import os
import sys
from pathlib import Path
from typing import Optional


# ========================================
#           LOGGING FORMATTERS
# ========================================

class SocketContextFormatter(logging.Formatter):
    """Prefixes records carrying socket_id / endpoint extras"""

    def format(self, record: logging.LogRecord) -> str:
        context = []
        if hasattr(record, 'socket_id'):
            context.append(f"sock={str(record.socket_id)[:8]}...")
        if hasattr(record, 'endpoint'):
            context.append(f"url={record.endpoint}")

        message = super().format(record)
        if context:
            return f"[{' '.join(context)}] {message}"
        return message


class ColoredFormatter(SocketContextFormatter):
    """Colored formatter for console output"""

    # ANSI Color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        # Restored afterwards so other handlers see the plain level name
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


# ========================================
#           LOGGING CONFIGURATION
# ========================================

_loggers_configured = set()

_CONSOLE_FORMAT = '[%(levelname)-8s][%(asctime)s][%(threadName)s][%(name)-5s]: %(message)s'
_FILE_FORMAT = '%(asctime)s | %(name)-30s | %(threadName)-22s | %(levelname)-8s | %(message)s'


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger for the given module.

    Args:
        name: Usually __name__ from the calling module
        level: Override log level ("DEBUG", "INFO", "WARNING", "ERROR")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure each logger once
    if name not in _loggers_configured:
        _configure_logger(logger, level)
        _loggers_configured.add(name)

    return logger


def _configure_logger(logger: logging.Logger, level: Optional[str] = None) -> None:
    """Configure a logger with appropriate handlers and formatters"""

    logger.setLevel(_get_log_level(level))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    _add_console_handler(logger, colored=_is_development())
    log_file = os.getenv('HTTPSOCKET_LOG_FILE')
    if log_file:
        _add_file_handler(logger, Path(log_file))

    # Prevent duplicate messages from parent loggers
    logger.propagate = False


def _get_log_level(level: Optional[str] = None) -> int:
    """Determine appropriate log level"""

    level = level or os.getenv('HTTPSOCKET_LOG_LEVEL')
    if level:
        return getattr(logging, level.upper(), logging.INFO)

    # Default based on environment
    return logging.DEBUG if _is_development() else logging.INFO


def _is_development() -> bool:
    """Detect if we're in development mode"""
    return (
        os.getenv('PYTHON_ENV', '').lower() in ['dev', 'development'] or
        'pytest' in sys.modules
    )


def _add_console_handler(logger: logging.Logger, colored: bool = True) -> None:
    """Add console handler with appropriate formatter"""

    handler = logging.StreamHandler(sys.stdout)

    if colored and _supports_color():
        formatter = ColoredFormatter(fmt=_CONSOLE_FORMAT, datefmt='%H:%M:%S')
    else:
        formatter = SocketContextFormatter(fmt=_CONSOLE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _add_file_handler(logger: logging.Logger, log_file: Path) -> None:
    """Add file handler for production logging"""

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(SocketContextFormatter(fmt=_FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(handler)


def _supports_color() -> bool:
    """Check if terminal supports color output"""

    # stdout must be a terminal
    if not (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()):
        return False

    # TERM should not be dumb
    if os.getenv("TERM", "") == "dumb":
        return False

    if sys.platform == "win32":
        # On modern Windows terminals, ANSI colors are supported
        return os.getenv("ANSICON") is not None or os.getenv("WT_SESSION") is not None or os.getenv("TERM_PROGRAM") == "vscode"

    return True


# ========================================
#           CONVENIENCE FUNCTIONS
# ========================================

def configure_root_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the entire application.
    Call this once at application startup.

    Args:
        level: Root log level ("DEBUG", "INFO", "WARNING", "ERROR")
    """
    root_logger = logging.getLogger()
    _configure_logger(root_logger, level)
    # Module loggers configured earlier keep their own level otherwise
    for name in _loggers_configured:
        logging.getLogger(name).setLevel(_get_log_level(level))
