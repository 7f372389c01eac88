# gitclient/core/logging/__init__.py

"""Logging setup for the git client.

Example usage:
    from gitclient.core.logging import configure_logging, get_logger

    configure_logging("DEBUG")
    logger = get_logger("gitclient.build")
"""

from .filters import CredentialRedactionFilter
from .formatters import JSONFormatter, StructuredFormatter, create_formatter
from .manager import LoggingManager, configure_logging, get_logger, get_logging_manager

__all__ = [
    "CredentialRedactionFilter",
    "JSONFormatter",
    "LoggingManager",
    "StructuredFormatter",
    "configure_logging",
    "create_formatter",
    "get_logger",
    "get_logging_manager",
]
