# gitclient/credentials/backends.py

"""
Credential storage backends module.

Backends resolve a credential identifier to a credential object. They are
the lookup side only; storing secrets is the job of whatever system the
host platform uses.
"""

from abc import ABC, abstractmethod
import logging
import netrc
import os
from pathlib import Path

from pydantic import SecretStr

from ..core.exceptions import ConfigurationError
from .models import Credentials, SSHUserPrivateKey, UsernamePasswordCredentials


class CredentialBackend(ABC):
    """Abstract base class for credential lookup backends."""

    @abstractmethod
    def get(self, credential_id: str) -> Credentials | None:
        """Retrieve credentials by identifier."""
        pass


class InMemoryBackend(CredentialBackend):
    """Credential backend holding credentials in a dictionary."""

    def __init__(self, credentials: dict[str, Credentials] | None = None) -> None:
        self._credentials: dict[str, Credentials] = dict(credentials or {})

    def get(self, credential_id: str) -> Credentials | None:
        return self._credentials.get(credential_id)

    def put(self, credentials: Credentials) -> None:
        """Store credentials under their own ``id``."""
        if not credentials.id:
            raise ConfigurationError("Credentials stored in memory need an id")
        self._credentials[credentials.id] = credentials


class EnvironmentBackend(CredentialBackend):
    """
    Credential backend using environment variables.

    ``GITCLIENT_CREDENTIALS_<ID>_USERNAME`` together with ``_PASSWORD``
    produce username/password credentials; ``_SSH_KEY_FILE`` (with an
    optional ``_PASSPHRASE``) produces SSH key credentials. The id is upper
    cased and every non alphanumeric character becomes ``_``.
    """

    def __init__(self, prefix: str = "GITCLIENT_CREDENTIALS_", environ: dict[str, str] | None = None) -> None:
        self.prefix = prefix
        self.environ = os.environ if environ is None else environ

    def _key(self, credential_id: str, suffix: str) -> str:
        safe_id = "".join(c if c.isalnum() else "_" for c in credential_id).upper()
        return f"{self.prefix}{safe_id}_{suffix}"

    def get(self, credential_id: str) -> Credentials | None:
        username = self.environ.get(self._key(credential_id, "USERNAME"))
        password = self.environ.get(self._key(credential_id, "PASSWORD"))
        key_file = self.environ.get(self._key(credential_id, "SSH_KEY_FILE"))

        if key_file:
            try:
                key = Path(key_file).read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read SSH key file for credentials {credential_id}",
                    original_error=e,
                ) from e
            passphrase = self.environ.get(self._key(credential_id, "PASSPHRASE"))
            return SSHUserPrivateKey(
                id=credential_id,
                username=username or "",
                private_keys=[key],
                passphrase=SecretStr(passphrase) if passphrase else None,
            )

        if username is not None and password is not None:
            return UsernamePasswordCredentials(
                id=credential_id, username=username, password=SecretStr(password)
            )
        return None


class NetrcBackend(CredentialBackend):
    """Credential backend reading a ``.netrc`` file; the identifier is a host name."""

    def __init__(self, netrc_file: str | Path | None = None) -> None:
        self.netrc_file = Path(netrc_file) if netrc_file else Path.home() / ".netrc"
        self.logger = logging.getLogger(__name__)
        self._parsed: netrc.netrc | None = None
        self._mtime: float | None = None

    def _load(self) -> netrc.netrc | None:
        if not self.netrc_file.exists():
            return None
        mtime = self.netrc_file.stat().st_mtime
        if self._parsed is None or mtime != self._mtime:
            try:
                self._parsed = netrc.netrc(str(self.netrc_file))
            except netrc.NetrcParseError as e:
                raise ConfigurationError(
                    f"Invalid netrc file {self.netrc_file}", original_error=e
                ) from e
            self._mtime = mtime
            self.logger.debug(f"Loaded netrc file {self.netrc_file}")
        return self._parsed

    def get(self, credential_id: str) -> Credentials | None:
        parsed = self._load()
        if parsed is None:
            return None
        entry = parsed.authenticators(credential_id)
        if entry is None:
            return None
        login, _, password = entry
        return UsernamePasswordCredentials(
            id=credential_id,
            username=login or "",
            password=SecretStr(password or ""),
            description=f"netrc entry for {credential_id}",
        )
