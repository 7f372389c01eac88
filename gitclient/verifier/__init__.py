# gitclient/verifier/__init__.py

"""SSH host key verification strategies and their configuration."""

from .configuration import (
    HostKeyVerificationConfiguration,
    HostKeyVerificationSettings,
    get_host_key_configuration,
)
from .known_hosts import HostKeyStatus, KnownHostEntry, KnownHosts, check_hashed, hash_hostname
from .strategies import (
    STRATEGIES,
    AcceptFirstConnectionStrategy,
    KnownHostsFileVerificationStrategy,
    ManuallyProvidedKeyVerificationStrategy,
    NoHostKeyVerificationStrategy,
    SshHostKeyVerificationStrategy,
)

__all__ = [
    "STRATEGIES",
    "AcceptFirstConnectionStrategy",
    "HostKeyStatus",
    "HostKeyVerificationConfiguration",
    "HostKeyVerificationSettings",
    "KnownHostEntry",
    "KnownHosts",
    "KnownHostsFileVerificationStrategy",
    "ManuallyProvidedKeyVerificationStrategy",
    "NoHostKeyVerificationStrategy",
    "SshHostKeyVerificationStrategy",
    "check_hashed",
    "get_host_key_configuration",
    "hash_hostname",
]
