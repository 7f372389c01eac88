# gitclient/verifier/configuration.py

"""
Process-wide host key verification configuration.

Exactly one strategy is active at a time. It is read by every network
command and changed only through ``set_strategy`` or ``load``; both are
guarded by a lock. The choice is persisted as YAML::

    strategy: manually_provided
    approved_host_keys: |
      github.com ssh-ed25519 AAAA...
"""

import logging
from pathlib import Path
import threading

from pydantic import BaseModel, Field, field_validator

from ..config.loader import ConfigLoader
from ..config.settings import get_settings
from ..core.exceptions import ConfigurationError
from .strategies import (
    STRATEGIES,
    ManuallyProvidedKeyVerificationStrategy,
    NoHostKeyVerificationStrategy,
    SshHostKeyVerificationStrategy,
)


class HostKeyVerificationSettings(BaseModel):
    """Persisted form of the active strategy."""

    strategy: str = Field(default=NoHostKeyVerificationStrategy.name, description="Strategy name")
    approved_host_keys: str | None = Field(
        default=None, description="known_hosts lines for the manually provided strategy"
    )
    known_hosts_file: str | None = Field(default=None, description="Override of ~/.ssh/known_hosts")

    @field_validator("strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        """Validate the strategy name."""
        if v not in STRATEGIES:
            raise ValueError(f"Unknown host key verification strategy {v}. Supported: {sorted(STRATEGIES)}")
        return v

    def to_strategy(self) -> SshHostKeyVerificationStrategy:
        if self.strategy == ManuallyProvidedKeyVerificationStrategy.name:
            return ManuallyProvidedKeyVerificationStrategy(self.approved_host_keys or "", self.known_hosts_file)
        return STRATEGIES[self.strategy](self.known_hosts_file)

    @classmethod
    def from_strategy(cls, strategy: SshHostKeyVerificationStrategy) -> "HostKeyVerificationSettings":
        data = strategy.to_dict()
        return cls(
            strategy=data["strategy"],
            approved_host_keys=data.get("approved_host_keys"),
            known_hosts_file=str(strategy.known_hosts_file),
        )


class HostKeyVerificationConfiguration:
    """Holds the active host key verification strategy."""

    def __init__(self, strategy: SshHostKeyVerificationStrategy | None = None) -> None:
        self._lock = threading.Lock()
        self._strategy = strategy or NoHostKeyVerificationStrategy()
        self.logger = logging.getLogger(__name__)

    def get_strategy(self) -> SshHostKeyVerificationStrategy:
        with self._lock:
            return self._strategy

    def set_strategy(self, strategy: SshHostKeyVerificationStrategy) -> None:
        if not isinstance(strategy, SshHostKeyVerificationStrategy):
            raise ConfigurationError(f"Not a host key verification strategy: {strategy!r}")
        with self._lock:
            self._strategy = strategy
        self.logger.info(f"Host key verification strategy set to {strategy.display_name}")

    def load(self, path: str | Path) -> SshHostKeyVerificationStrategy:
        """Activate the strategy stored in ``path``; a missing file selects no verification."""
        settings = ConfigLoader().load(path, HostKeyVerificationSettings)
        strategy = settings.to_strategy()
        self.set_strategy(strategy)
        return strategy

    def save(self, path: str | Path) -> Path:
        """Write the active strategy to ``path``."""
        return ConfigLoader().save(path, HostKeyVerificationSettings.from_strategy(self.get_strategy()))


_configuration: HostKeyVerificationConfiguration | None = None
_configuration_lock = threading.Lock()


def get_host_key_configuration() -> HostKeyVerificationConfiguration:
    """
    The process-wide host key verification configuration.

    Created on first use from ``host_key_config_file`` in the client
    settings when one is set.
    """
    global _configuration
    with _configuration_lock:
        if _configuration is None:
            configuration = HostKeyVerificationConfiguration()
            config_file = get_settings().host_key_config_file
            if config_file:
                configuration.load(config_file)
            _configuration = configuration
        return _configuration
