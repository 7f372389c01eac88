# gitclient/backends/cli/__init__.py

from .client import CliGitClient, parse_branches
from .credentials import CredentialEnvironment, CredentialEnvironmentBuilder, is_ssh_url
from .submodules import SUBMODULE_URL_CONFIG_KEY, SUBMODULE_URL_PATTERN, parse_submodule_urls

__all__ = [
    "SUBMODULE_URL_CONFIG_KEY",
    "SUBMODULE_URL_PATTERN",
    "CliGitClient",
    "CredentialEnvironment",
    "CredentialEnvironmentBuilder",
    "is_ssh_url",
    "parse_branches",
    "parse_submodule_urls",
]
