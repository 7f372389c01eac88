# gitclient/backends/__init__.py

from .base import ROOT_LOGGER_NAME, GitClient
from .cli import CliGitClient
from .embedded import EmbeddedGitClient

__all__ = ["ROOT_LOGGER_NAME", "CliGitClient", "EmbeddedGitClient", "GitClient"]
