# gitclient/core/logging/manager.py

"""
Logging manager for centralized logging configuration.

The git client logs through plain ``logging.Logger`` objects. Library
users who already configure logging never need this module; it exists so
command line tools and tests can get a console handler with credential
redaction in one call.
"""

import logging
import sys

from .filters import CredentialRedactionFilter
from .formatters import create_formatter

ROOT_LOGGER_NAME = "gitclient"


class LoggingManager:
    """Centralized logging manager for the ``gitclient`` logger tree."""

    def __init__(self, level: str | int = "INFO", formatter_type: str = "structured"):
        """Initialize the logging manager.

        Args:
            level: Log level for the ``gitclient`` logger tree.
            formatter_type: ``structured`` or ``json``.
        """
        self.level = level
        self.formatter_type = formatter_type
        self._configured = False
        self._handler: logging.Handler | None = None

    def configure(self) -> None:
        """Install one console handler with redaction on the root client logger."""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        if self._handler is not None:
            root_logger.removeHandler(self._handler)

        level = self.level
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        root_logger.setLevel(level)

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(create_formatter(self.formatter_type))
        handler.addFilter(CredentialRedactionFilter())
        root_logger.addHandler(handler)

        self._handler = handler
        self._configured = True

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger by name, configuring the manager on first use.

        Args:
            name: Logger name.

        Returns:
            Logger instance.
        """
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


# Global logging manager instance
_logging_manager: LoggingManager | None = None


def get_logging_manager() -> LoggingManager:
    """Get the global logging manager."""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def configure_logging(level: str | int = "INFO", formatter_type: str = "structured") -> None:
    """Configure the global logging system.

    Args:
        level: Log level for the ``gitclient`` logger tree.
        formatter_type: ``structured`` or ``json``.
    """
    global _logging_manager
    _logging_manager = LoggingManager(level, formatter_type)
    _logging_manager.configure()


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    return get_logging_manager().get_logger(name)
