# gitclient/factory.py

"""
Selection of the git client implementation.

``Git(workspace).using("git").with_logger(logger).get_client()`` builds
the client of the named backend. Unknown names are refused; the factory
never falls back to another backend.
"""

import logging
from pathlib import Path

from .backends.base import GitClient
from .backends.cli import CliGitClient
from .backends.embedded import EmbeddedGitClient
from .commands import unsupported_options
from .commands.base import CommandOptions
from .config.proxy import ProxyConfiguration
from .core.exceptions import ConfigurationError
from .verifier.configuration import HostKeyVerificationConfiguration

DEFAULT_BACKEND = "git"


class BackendRegistry:
    """Maps backend names to client classes."""

    def __init__(self) -> None:
        self.backends: dict[str, type[GitClient]] = {}
        self.logger = logging.getLogger(__name__)

    def register(self, name: str, client_class: type[GitClient]) -> None:
        """Register a client class under ``name``."""
        self.backends[name.lower()] = client_class
        self.logger.debug(f"Registered git backend: {name}")

    def get(self, name: str) -> type[GitClient]:
        client_class = self.backends.get((name or "").lower())
        if client_class is None:
            raise ConfigurationError(f"Unsupported git backend: {name}")
        return client_class

    def names(self) -> list[str]:
        return sorted(self.backends)


registry = BackendRegistry()
registry.register("git", CliGitClient)
registry.register("embedded", EmbeddedGitClient)
registry.register("jgit", EmbeddedGitClient)


class Git:
    """Fluent builder of git clients."""

    def __init__(self, workspace: str | Path | None = None, backend_registry: BackendRegistry | None = None) -> None:
        self.workspace = Path(workspace) if workspace is not None else Path.cwd()
        self.registry = backend_registry or registry
        self.backend = DEFAULT_BACKEND
        self.logger: logging.Logger | None = None
        self.env: dict[str, str] = {}
        self.proxy: ProxyConfiguration | None = None
        self.host_key_configuration: HostKeyVerificationConfiguration | None = None

    @classmethod
    def with_workspace(cls, workspace: str | Path) -> "Git":
        return cls(workspace)

    def using(self, backend: str) -> "Git":
        """Select the backend by name: ``git``, ``embedded`` or ``jgit``."""
        self.registry.get(backend)
        self.backend = backend
        return self

    def with_logger(self, logger: logging.Logger) -> "Git":
        self.logger = logger
        return self

    def with_env(self, env: dict[str, str] | None) -> "Git":
        self.env = dict(env or {})
        return self

    def with_proxy(self, proxy: ProxyConfiguration | None) -> "Git":
        self.proxy = proxy
        return self

    def with_host_key_configuration(self, configuration: HostKeyVerificationConfiguration) -> "Git":
        self.host_key_configuration = configuration
        return self

    def get_client(self) -> GitClient:
        """Create the client of the selected backend."""
        client_class = self.registry.get(self.backend)
        return client_class(
            self.workspace,
            logger=self.logger,
            env=self.env,
            proxy=self.proxy,
            host_key_configuration=self.host_key_configuration,
        )

    @staticmethod
    def recommend_backend(*options: CommandOptions) -> str:
        """
        Name of a backend able to run commands with all ``options``.

        The embedded backend is recommended only when none of the options
        needs the command line client.
        """
        if any(unsupported_options(option) for option in options):
            return "git"
        return "embedded"
