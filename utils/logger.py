"""
Logger utility for the activity tracker
Provides centralized logging functionality
"""

from datetime import datetime
import logging
import os
from pathlib import Path
import sys
from typing import Any, Optional


LOGGER_NAME = "ActivityTracker"
LOG_DIR_ENV = "ACTIVITY_TRACKER_LOG_DIR"
LOG_LEVEL_ENV = "ACTIVITY_TRACKER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_file(log_dir: Path) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d")
    return log_dir / f"activity_tracker_{timestamp}.log"


class Logger:
    """Centralized logging utility"""

    _instance: Optional["Logger"] = None
    _initialized: bool = False

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self.setup_logging()
            Logger._initialized = True

    def setup_logging(self) -> None:
        """Setup logging configuration.

        Note:
            If the host application already configured logging and marked the
            root logger with ``_activity_tracker_logging_configured``, this
            method will not reconfigure handlers. It will simply obtain the
            namespaced logger.
        """
        root = logging.getLogger()
        if getattr(root, "_activity_tracker_logging_configured", False):
            self.logger = logging.getLogger(LOGGER_NAME)
            return

        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

        # File logging only when a directory is configured
        log_dir_raw = os.environ.get(LOG_DIR_ENV)
        if log_dir_raw:
            handlers.append(logging.FileHandler(_log_file(Path(log_dir_raw)), encoding="utf-8"))

        logging.basicConfig(
            level=os.environ.get(LOG_LEVEL_ENV, "INFO").upper(),
            format=LOG_FORMAT,
            handlers=handlers,
        )

        self.logger = logging.getLogger(LOGGER_NAME)

    def configure(self, level: str, log_dir: str | None = None) -> None:
        """Apply a configured level and optional log directory to the tracker logger."""
        self.logger.setLevel(level.upper())
        if not log_dir:
            return
        log_file = _log_file(Path(log_dir)).resolve()
        for handler in self.logger.handlers:
            if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file:
                return
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.addHandler(file_handler)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message"""
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message"""
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message"""
        self.logger.error(message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message"""
        self.logger.debug(message, *args, **kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log critical message"""
        self.logger.critical(message, *args, **kwargs)


# Convenience functions for direct import
def log_info(message: str) -> None:
    """Convenience wrapper for info logging."""
    Logger().info(message)


def log_warning(message: str) -> None:
    """Convenience wrapper for warning logging."""
    Logger().warning(message)


def log_error(message: str) -> None:
    """Convenience wrapper for error logging."""
    Logger().error(message)


def log_debug(message: str) -> None:
    """Convenience wrapper for debug logging."""
    Logger().debug(message)


def log_critical(message: str) -> None:
    """Convenience wrapper for critical logging."""
    Logger().critical(message)
