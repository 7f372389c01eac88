# gitclient/urls.py

"""
Repository URL parsing.

Git accepts three spellings of a repository location: a URL with a
scheme (``https://host/repo.git``), the scp-like form
(``git@host:org/repo.git``) and a local path. ``GitURL`` parses all three
and keeps the parts needed for credential lookup, proxy decisions and
protocol checks.
"""

from dataclasses import dataclass, replace
import re
from urllib.parse import quote, unquote

from .core.exceptions import ConfigurationError

_SCHEME_PATTERN = re.compile(r"^(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*)://(?P<rest>.*)$", re.DOTALL)
_SCP_PATTERN = re.compile(r"^(?:(?P<user>[^@/\\:]+)@)?(?P<host>[^@/\\:\s]+):(?P<path>.*)$")
_WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:[\\/]")


@dataclass(frozen=True)
class GitURL:
    """A parsed repository location."""

    raw: str
    scheme: str | None = None
    user: str | None = None
    password: str | None = None
    host: str | None = None
    port: int | None = None
    path: str = ""

    @classmethod
    def parse(cls, text: str) -> "GitURL":
        """
        Parse a URL, scp-like location or local path.

        Raises:
            ConfigurationError: If the text is empty or the port is not numeric.
        """
        if text is None or not text.strip():
            raise ConfigurationError(f"Invalid repository {text!r}")
        text = text.strip()

        match = _SCHEME_PATTERN.match(text)
        if match:
            return cls._parse_scheme_url(text, match.group("scheme").lower(), match.group("rest"))

        if not _WINDOWS_DRIVE.match(text):
            scp = _SCP_PATTERN.match(text)
            if scp:
                return cls(
                    raw=text,
                    scheme=None,
                    user=scp.group("user"),
                    host=scp.group("host"),
                    path=scp.group("path"),
                )

        return cls(raw=text, path=text)

    @classmethod
    def _parse_scheme_url(cls, text: str, scheme: str, rest: str) -> "GitURL":
        slash = rest.find("/")
        netloc, path = (rest, "") if slash < 0 else (rest[:slash], rest[slash:])

        userinfo, at, hostport = netloc.rpartition("@")
        user = password = None
        if at:
            name, colon, secret = userinfo.partition(":")
            user = unquote(name) if name else None
            password = unquote(secret) if colon else None

        host, port = hostport, None
        if hostport.startswith("["):
            end = hostport.find("]")
            host = hostport[: end + 1]
            remainder = hostport[end + 1 :]
            if remainder.startswith(":") and remainder[1:]:
                port = cls._parse_port(text, remainder[1:])
        elif ":" in hostport:
            host, _, port_text = hostport.partition(":")
            if port_text:
                port = cls._parse_port(text, port_text)

        return cls(
            raw=text,
            scheme=scheme,
            user=user,
            password=password,
            host=host or None,
            port=port,
            path=path,
        )

    @staticmethod
    def _parse_port(text: str, port_text: str) -> int:
        if not port_text.isdigit():
            raise ConfigurationError(f"Invalid repository {text}")
        return int(port_text)

    @property
    def is_remote(self) -> bool:
        """True when the location names a host."""
        return bool(self.host) and self.scheme != "file"

    @property
    def is_scp_like(self) -> bool:
        return self.scheme is None and bool(self.host)

    @property
    def has_credentials(self) -> bool:
        return self.user is not None and self.password is not None

    def _format(self, include_password: bool) -> str:
        if self.scheme is None and not self.host:
            return self.path

        userinfo = ""
        if self.user is not None:
            encode = (lambda s: s) if self.scheme is None else (lambda s: quote(s, safe=""))
            userinfo = encode(self.user)
            if include_password and self.password is not None:
                userinfo += ":" + encode(self.password)
            userinfo += "@"

        if self.scheme is None:
            return f"{userinfo}{self.host}:{self.path}"

        hostport = self.host or ""
        if self.port is not None:
            hostport += f":{self.port}"
        return f"{self.scheme}://{userinfo}{hostport}{self.path}"

    def to_private_string(self) -> str:
        """Return the location including any embedded password."""
        return self._format(include_password=True)

    def without_credentials(self) -> "GitURL":
        """Return a copy with user and password removed."""
        stripped = replace(self, user=None, password=None)
        return replace(stripped, raw=str(stripped))

    def __str__(self) -> str:
        return self._format(include_password=False)


def looks_like_remote_name(text: str) -> bool:
    """
    True when ``text`` can only be a configured remote name.

    ``git remote add`` rejects ``:`` in names, and ``@``, ``/`` and ``\\``
    are too common in URLs to be treated as names.
    """
    if not text:
        return False
    return not any(c in text for c in ":@/\\")
