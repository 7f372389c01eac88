# gitclient/credentials/__init__.py

"""
Credentials used by git clients and the backends that look them up.
"""

from .backends import CredentialBackend, EnvironmentBackend, InMemoryBackend, NetrcBackend
from .lookup import CredentialLookup, CredentialStore, normalize_url_key
from .models import Credentials, SSHUserPrivateKey, UsernamePasswordCredentials

__all__ = [
    "CredentialBackend",
    "CredentialLookup",
    "CredentialStore",
    "Credentials",
    "EnvironmentBackend",
    "InMemoryBackend",
    "NetrcBackend",
    "SSHUserPrivateKey",
    "UsernamePasswordCredentials",
    "normalize_url_key",
]
