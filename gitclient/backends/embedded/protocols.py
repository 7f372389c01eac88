# gitclient/backends/embedded/protocols.py

"""
URL schemes the embedded backend can negotiate.

dulwich treats a location with an unknown scheme as an ssh or rsync style
path, so the scheme has to be checked before a transport is requested.
"""

import re

from ...core.exceptions import UnsupportedProtocolError

SUPPORTED_SCHEMES = frozenset({"file", "git", "ssh", "git+ssh", "http", "https"})

_SCHEME_PATTERN = re.compile(r"^(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*)://")


def url_scheme(url: str) -> str | None:
    """Lower-cased scheme of ``url``; None for scp-like locations and paths."""
    match = _SCHEME_PATTERN.match(url.strip()) if url else None
    return match.group("scheme").lower() if match else None


def is_supported_protocol(url: str) -> bool:
    scheme = url_scheme(url)
    return scheme is None or scheme in SUPPORTED_SCHEMES


def check_protocol(url: str) -> str:
    """
    Return ``url`` unchanged when its scheme is supported.

    Raises:
        UnsupportedProtocolError: For any other scheme, such as ``s3://``.
    """
    if not is_supported_protocol(url):
        raise UnsupportedProtocolError(url)
    return url
