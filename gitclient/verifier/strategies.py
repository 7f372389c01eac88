# gitclient/verifier/strategies.py

"""
SSH host key verification strategies.

A strategy is asked once per network command. Both backends reach ssh
through an ssh executable, so a strategy answers with the ``-o`` options
that make ssh enforce it. The embedded transport also scans the server
keys before connecting and asks ``verify_host_key`` about them.
"""

from abc import ABC, abstractmethod
import logging
from pathlib import Path
from typing import Any, ClassVar

from ..config.settings import get_settings
from ..core.exceptions import ConfigurationError
from ..process.tempfiles import ScopedTempFiles
from .known_hosts import HostKeyStatus, KnownHosts, host_key_name


SSH_DEFAULT_KNOWN_HOSTS = Path.home() / ".ssh" / "known_hosts"


def default_known_hosts_file() -> Path:
    """The known_hosts file named by the client settings."""
    return Path(get_settings().known_hosts_file).expanduser()


class SshHostKeyVerificationStrategy(ABC):
    """Base class of the host key verification strategies."""

    name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    checks_server_key: ClassVar[bool] = True

    def __init__(self, known_hosts_file: str | Path | None = None) -> None:
        self.known_hosts_file = Path(known_hosts_file) if known_hosts_file else default_known_hosts_file()

    @abstractmethod
    def ssh_options(
        self,
        host: str | None,
        port: int | None,
        temp_files: ScopedTempFiles | None,
        logger: logging.Logger,
    ) -> list[str]:
        """
        Options passed to ssh for a connection to ``host``.

        Args:
            host: Host name of the remote, None when unknown.
            port: Port of the remote, None for the default.
            temp_files: Scope for files the options refer to.
            logger: Sink for user visible progress lines.
        """
        pass

    @abstractmethod
    def verify_host_key(self, host: str, port: int | None, key_type: str, key: str, logger: logging.Logger) -> bool:
        """Decide whether the server key ``key`` of type ``key_type`` is acceptable."""
        pass

    def _known_hosts_options(self) -> list[str]:
        if self.known_hosts_file == SSH_DEFAULT_KNOWN_HOSTS:
            return []
        return ["-o", f"UserKnownHostsFile={self.known_hosts_file}"]

    def to_dict(self) -> dict[str, Any]:
        return {"strategy": self.name}

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.to_dict().items())))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NoHostKeyVerificationStrategy(SshHostKeyVerificationStrategy):
    """Trust every host key."""

    name = "none"
    display_name = "No verification"
    checks_server_key = False

    def ssh_options(self, host, port, temp_files, logger) -> list[str]:
        return ["-o", "StrictHostKeyChecking=no"]

    def verify_host_key(self, host, port, key_type, key, logger) -> bool:
        return True


class AcceptFirstConnectionStrategy(SshHostKeyVerificationStrategy):
    """Trust a host's key the first time it is seen, then insist on it."""

    name = "accept_first"
    display_name = "Accept first connection"

    def ssh_options(self, host, port, temp_files, logger) -> list[str]:
        target = f"{host}:{port}" if port and port > 0 else host
        logger.info(
            f"Verifying host key for {target} using {self.known_hosts_file}, "
            f"will automatically accept unseen keys"
        )
        if not self.known_hosts_file.exists():
            strict = "no"
        elif host and KnownHosts.load(self.known_hosts_file).knows_host(host, port):
            strict = "yes"
        else:
            strict = "no"
        return [
            "-o",
            f"StrictHostKeyChecking={strict}",
            "-o",
            "HashKnownHosts=yes",
            *self._known_hosts_options(),
        ]

    def verify_host_key(self, host, port, key_type, key, logger) -> bool:
        name = host_key_name(host, port)
        logger.info(f"Verifying host key for {host} using {self.known_hosts_file}")
        known_hosts = KnownHosts.load(self.known_hosts_file)
        status = known_hosts.verify(host, port, key_type, key)
        if status == HostKeyStatus.NEW:
            if not self.known_hosts_file.exists():
                logger.info(f"Creating new known hosts file {self.known_hosts_file}")
            known_hosts.add(host, port, key_type, key)
            return True
        if status == HostKeyStatus.OK:
            return True
        logger.warning(f"Host key for host {name} was not accepted.")
        return False


class KnownHostsFileVerificationStrategy(SshHostKeyVerificationStrategy):
    """Accept only keys already present in the known_hosts file."""

    name = "known_hosts"
    display_name = "Known hosts file"

    def _log_missing_file(self, logger: logging.Logger) -> None:
        logger.warning(
            f"Using the 'Known hosts file' strategy to verify ssh host keys, "
            f"but {self.known_hosts_file} does not exist; configure host key verification."
        )

    def ssh_options(self, host, port, temp_files, logger) -> list[str]:
        logger.info("Verifying host key using known hosts file")
        if not self.known_hosts_file.exists():
            self._log_missing_file(logger)
        return ["-o", "StrictHostKeyChecking=yes", *self._known_hosts_options()]

    def verify_host_key(self, host, port, key_type, key, logger) -> bool:
        logger.info(f"Verifying host key for {host} using {self.known_hosts_file}")
        if not self.known_hosts_file.exists():
            self._log_missing_file(logger)
        status = KnownHosts.load(self.known_hosts_file).verify(host, port, key_type, key)
        if status != HostKeyStatus.OK:
            logger.warning(f"Host key for host {host_key_name(host, port)} was not accepted.")
            return False
        return True


class ManuallyProvidedKeyVerificationStrategy(SshHostKeyVerificationStrategy):
    """Accept only the operator supplied known_hosts lines."""

    name = "manually_provided"
    display_name = "Manually provided keys"

    def __init__(self, approved_host_keys: str, known_hosts_file: str | Path | None = None) -> None:
        super().__init__(known_hosts_file)
        if approved_host_keys is None or not approved_host_keys.strip():
            raise ConfigurationError("approved_host_keys must not be empty")
        self.approved_host_keys = approved_host_keys.strip()

    def ssh_options(self, host, port, temp_files, logger) -> list[str]:
        if temp_files is None:
            raise ConfigurationError("Manually provided host keys need a temporary known_hosts file")
        known_hosts = temp_files.create("known_hosts", "", self.approved_host_keys + "\n")
        logger.info("Verifying host key using manually-configured host key entries")
        return [
            "-o",
            "StrictHostKeyChecking=yes",
            "-o",
            f"UserKnownHostsFile={known_hosts}",
        ]

    def verify_host_key(self, host, port, key_type, key, logger) -> bool:
        logger.info(f"Verifying host key for {host} using manually-configured host key entries")
        status = KnownHosts.parse(self.approved_host_keys).verify(host, port, key_type, key)
        if status != HostKeyStatus.OK:
            logger.warning(f"Host key for host {host_key_name(host, port)} was not accepted.")
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"strategy": self.name, "approved_host_keys": self.approved_host_keys}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(approved_host_keys=...)"


STRATEGIES: dict[str, type[SshHostKeyVerificationStrategy]] = {
    cls.name: cls
    for cls in (
        NoHostKeyVerificationStrategy,
        AcceptFirstConnectionStrategy,
        KnownHostsFileVerificationStrategy,
        ManuallyProvidedKeyVerificationStrategy,
    )
}
