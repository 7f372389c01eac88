# gitclient/core/exceptions/__init__.py

"""Exception hierarchy for the git client."""

from .base import (
    CommandAlreadyExecutedError,
    ConfigurationError,
    CredentialMaterializationError,
    GitException,
    GitLockFailedError,
    GitTimeoutError,
    ProcessFailedError,
    UnsupportedCommandError,
    UnsupportedProtocolError,
    VersionTooOldError,
)

__all__ = [
    "CommandAlreadyExecutedError",
    "ConfigurationError",
    "CredentialMaterializationError",
    "GitException",
    "GitLockFailedError",
    "GitTimeoutError",
    "ProcessFailedError",
    "UnsupportedCommandError",
    "UnsupportedProtocolError",
    "VersionTooOldError",
]
