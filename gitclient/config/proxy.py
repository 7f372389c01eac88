# gitclient/config/proxy.py

"""
HTTP proxy configuration consumed by the git client.
"""

import os
import re
from urllib.parse import quote, urlparse

from pydantic import BaseModel, Field, SecretStr, field_validator

_NO_PROXY_SEPARATORS = re.compile(r"[ \t\n,|]+")


class ProxyConfiguration(BaseModel):
    """Proxy host, port, credentials and the hosts that bypass the proxy."""

    host: str = Field(..., description="Proxy host name")
    port: int = Field(..., ge=1, le=65535, description="Proxy port")
    username: str | None = Field(default=None, description="Proxy user name")
    password: SecretStr | None = Field(default=None, description="Proxy password")
    no_proxy_host: str = Field(
        default="",
        description="Host name globs, separated by whitespace, comma or '|', that bypass the proxy",
    )

    @field_validator("no_proxy_host", mode="before")
    @classmethod
    def normalize_no_proxy_host(cls, v: str | None) -> str:
        """An unset no-proxy list is stored as an empty string."""
        if v is None:
            return ""
        return v

    @property
    def no_proxy_host_patterns(self) -> list[re.Pattern[str]]:
        """Compiled patterns for ``no_proxy_host``; ``*`` matches any run of characters."""
        patterns = []
        for item in _NO_PROXY_SEPARATORS.split(self.no_proxy_host.strip()):
            if not item:
                continue
            regex = re.escape(item).replace(r"\*", ".*")
            patterns.append(re.compile(regex, re.IGNORECASE))
        return patterns

    def should_proxy(self, host: str | None) -> bool:
        """Return False when ``host`` matches one of the no-proxy patterns."""
        if not host:
            return True
        return not any(p.fullmatch(host) for p in self.no_proxy_host_patterns)

    def proxy_url(self) -> str:
        """Return ``http://[user[:password]@]host:port``."""
        userinfo = ""
        if self.username:
            userinfo = quote(self.username, safe="")
            if self.password is not None:
                userinfo += ":" + quote(self.password.get_secret_value(), safe="")
            userinfo += "@"
        return f"http://{userinfo}{self.host}:{self.port}"

    @classmethod
    def from_environment(cls, env: dict[str, str] | None = None) -> "ProxyConfiguration | None":
        """Build a configuration from ``https_proxy``/``http_proxy`` and ``no_proxy``."""
        env = os.environ if env is None else env
        raw = (
            env.get("https_proxy")
            or env.get("HTTPS_PROXY")
            or env.get("http_proxy")
            or env.get("HTTP_PROXY")
        )
        if not raw:
            return None

        parsed = urlparse(raw if "://" in raw else f"http://{raw}")
        if not parsed.hostname:
            return None
        return cls(
            host=parsed.hostname,
            port=parsed.port or 80,
            username=parsed.username,
            password=SecretStr(parsed.password) if parsed.password is not None else None,
            no_proxy_host=env.get("no_proxy") or env.get("NO_PROXY") or "",
        )
