# gitclient/backends/embedded/__init__.py

from .client import EmbeddedGitClient, matches_ls_remote_pattern
from .credentials import EmbeddedCredentialsProvider, TransportCredentials
from .protocols import SUPPORTED_SCHEMES, check_protocol, is_supported_protocol, url_scheme
from .ssh import HostKeyVerifier, VerifyingSSHVendor, parse_keyscan_output

__all__ = [
    "SUPPORTED_SCHEMES",
    "EmbeddedCredentialsProvider",
    "EmbeddedGitClient",
    "HostKeyVerifier",
    "TransportCredentials",
    "VerifyingSSHVendor",
    "check_protocol",
    "is_supported_protocol",
    "matches_ls_remote_pattern",
    "parse_keyscan_output",
    "url_scheme",
]
