# gitclient/credentials/lookup.py

"""
Credential lookup.

``CredentialLookup`` resolves a credential id through a chain of backends.
``CredentialStore`` is the per-client map from repository URL to the
credentials used for it, with a default entry for URLs nobody registered.
"""

import logging
import threading

from ..core.exceptions import ConfigurationError
from ..urls import GitURL
from .backends import CredentialBackend
from .models import Credentials


class CredentialLookup:
    """Ask each backend in turn and return the first credentials found."""

    def __init__(self, backends: list[CredentialBackend] | None = None) -> None:
        self.backends: list[CredentialBackend] = list(backends or [])
        self.logger = logging.getLogger(__name__)

    def add_backend(self, backend: CredentialBackend) -> None:
        self.backends.append(backend)

    def lookup(self, credential_id: str) -> Credentials | None:
        """Resolve ``credential_id``; None when no backend knows it."""
        for backend in self.backends:
            credentials = backend.get(credential_id)
            if credentials is not None:
                self.logger.debug(
                    f"Found credentials {credential_id} in {backend.__class__.__name__}"
                )
                return credentials
        self.logger.debug(f"No credentials found for {credential_id}")
        return None


def normalize_url_key(url: str) -> str:
    """Key used to store credentials: trailing ``/`` and ``.git`` removed."""
    key = url.strip()
    while key.endswith("/"):
        key = key[:-1]
    if key.endswith(".git"):
        key = key[:-4]
    while key.endswith("/"):
        key = key[:-1]
    return key


class CredentialStore:
    """Credentials a client uses, keyed by repository URL."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_url: dict[str, Credentials] = {}
        self._default: Credentials | None = None

    def add(self, url: str, credentials: Credentials) -> None:
        with self._lock:
            self._by_url[normalize_url_key(url)] = credentials

    def add_default(self, credentials: Credentials | None) -> None:
        with self._lock:
            self._default = credentials

    def clear(self) -> None:
        with self._lock:
            self._by_url.clear()
            self._default = None

    @property
    def default(self) -> Credentials | None:
        return self._default

    def get(self, url: str | None) -> Credentials | None:
        """
        Credentials for ``url``.

        Exact (normalized) URL first, then the default credentials, then any
        stored URL with the same scheme, host and port.
        """
        with self._lock:
            if url is None:
                return self._default
            exact = self._by_url.get(normalize_url_key(url))
            if exact is not None:
                return exact
            if self._default is not None:
                return self._default
            return self._match_host(url)

    def _match_host(self, url: str) -> Credentials | None:
        try:
            wanted = GitURL.parse(url)
        except ConfigurationError:
            return None
        if not wanted.host:
            return None
        for key, credentials in self._by_url.items():
            try:
                stored = GitURL.parse(key)
            except ConfigurationError:
                continue
            if (stored.scheme, stored.host, stored.port) == (
                wanted.scheme,
                wanted.host,
                wanted.port,
            ):
                return credentials
        return None

    def __len__(self) -> int:
        return len(self._by_url)
