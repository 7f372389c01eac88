# gitclient/__init__.py

"""
Git client abstraction with two interchangeable backends.

``CliGitClient`` drives the ``git`` executable; ``EmbeddedGitClient``
works in process through dulwich. Both are created through ``Git``::

    client = Git("/path/to/workspace").using("git").get_client()
    client.clone_().url("https://example.com/repo.git").execute()
"""

from .backends import CliGitClient, EmbeddedGitClient, GitClient
from .core.exceptions import (
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
from .credentials import SSHUserPrivateKey, UsernamePasswordCredentials
from .factory import BackendRegistry, Git, registry
from .models import Branch, SubmoduleEntry

__version__ = "0.1.0"

__all__ = [
    "BackendRegistry",
    "Branch",
    "CliGitClient",
    "CommandAlreadyExecutedError",
    "ConfigurationError",
    "CredentialMaterializationError",
    "EmbeddedGitClient",
    "Git",
    "GitClient",
    "GitException",
    "GitLockFailedError",
    "GitTimeoutError",
    "ProcessFailedError",
    "SSHUserPrivateKey",
    "SubmoduleEntry",
    "UnsupportedCommandError",
    "UnsupportedProtocolError",
    "UsernamePasswordCredentials",
    "VersionTooOldError",
    "registry",
]
