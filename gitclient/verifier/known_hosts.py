# gitclient/verifier/known_hosts.py

"""
OpenSSH ``known_hosts`` parsing and matching.

Host fields may be plain names, ``[host]:port`` pairs, ``*``/``?``
patterns with optional ``!`` negation, or hashed names of the form
``|1|<base64 salt>|<base64 HMAC-SHA1 of the name>``.
"""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
import hashlib
import hmac
import logging
import os
from pathlib import Path
import re

HASH_MAGIC = "|1|"

logger = logging.getLogger(__name__)


class HostKeyStatus(str, Enum):
    """Result of checking a server key against known hosts."""

    OK = "ok"
    NEW = "new"
    CHANGED = "changed"


def host_key_name(host: str, port: int | None = None) -> str:
    """Name under which ssh records a host: ``host`` or ``[host]:port``."""
    if port is None or port <= 0 or port == 22:
        return host
    return f"[{host}]:{port}"


def hash_hostname(hostname: str, salt: bytes | None = None) -> str:
    """Hash a host name the way ``ssh-keygen -H`` does."""
    salt = salt if salt is not None else os.urandom(20)
    digest = hmac.new(salt, hostname.encode("latin-1"), hashlib.sha1).digest()
    return f"{HASH_MAGIC}{base64.b64encode(salt).decode()}|{base64.b64encode(digest).decode()}"


def check_hashed(entry: str, hostname: str) -> bool:
    """True when the hashed known_hosts ``entry`` is the hash of ``hostname``."""
    if not entry.startswith(HASH_MAGIC):
        return False
    salt_b64, sep, hash_b64 = entry[len(HASH_MAGIC) :].partition("|")
    if not sep:
        return False
    try:
        salt = base64.b64decode(salt_b64, validate=True)
        expected = base64.b64decode(hash_b64, validate=True)
    except (binascii.Error, ValueError):
        return False
    if len(salt) != hashlib.sha1().digest_size:
        return False
    digest = hmac.new(salt, hostname.encode("latin-1"), hashlib.sha1).digest()
    return hmac.compare_digest(digest, expected)


def _pattern_matches(pattern: str, hostname: str) -> bool:
    if pattern.startswith(HASH_MAGIC):
        return check_hashed(pattern, hostname)
    # Only * and ? are wildcards; brackets in [host]:port are literal.
    regex = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.fullmatch(regex, hostname, re.IGNORECASE) is not None


def host_field_matches(host_field: str, hostname: str) -> bool:
    """Match a comma separated host field; a matching ``!`` pattern vetoes."""
    matched = False
    for pattern in host_field.split(","):
        if not pattern:
            continue
        if pattern.startswith("!"):
            if _pattern_matches(pattern[1:], hostname):
                return False
        elif _pattern_matches(pattern, hostname):
            matched = True
    return matched


@dataclass(frozen=True)
class KnownHostEntry:
    """One line of a known_hosts file."""

    hosts: str
    key_type: str
    key: str
    marker: str | None = None

    def matches(self, hostname: str) -> bool:
        return host_field_matches(self.hosts, hostname)

    def to_line(self) -> str:
        prefix = f"{self.marker} " if self.marker else ""
        return f"{prefix}{self.hosts} {self.key_type} {self.key}"


class KnownHosts:
    """In-memory set of known host keys, optionally backed by a file."""

    def __init__(self, entries: list[KnownHostEntry] | None = None, path: str | Path | None = None) -> None:
        self.entries: list[KnownHostEntry] = list(entries or [])
        self.path = Path(path) if path else None

    @classmethod
    def parse(cls, text: str, path: str | Path | None = None) -> "KnownHosts":
        entries = []
        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.split()
            marker = None
            if fields[0].startswith("@"):
                marker, fields = fields[0], fields[1:]
            if len(fields) < 3:
                logger.debug(f"Skipping malformed known_hosts line {line_number}")
                continue
            entries.append(KnownHostEntry(fields[0], fields[1], fields[2], marker))
        return cls(entries, path)

    @classmethod
    def load(cls, path: str | Path) -> "KnownHosts":
        """Read ``path``; a missing file gives an empty set."""
        path = Path(path)
        if not path.exists():
            return cls(path=path)
        return cls.parse(path.read_text(encoding="utf-8"), path)

    def host_names(self) -> list[str]:
        """The raw host fields, as written in the file."""
        return [entry.hosts for entry in self.entries]

    def knows_host(self, host: str, port: int | None = None) -> bool:
        """True when any entry names ``host`` (or ``[host]:port``)."""
        names = {host, host_key_name(host, port), f"{host}:{port}" if port else host}
        return any(entry.matches(name) for entry in self.entries for name in names)

    def verify(self, host: str, port: int | None, key_type: str, key: str) -> HostKeyStatus:
        """
        Check a server key.

        Returns:
            ``OK`` when an entry for the host carries this key, ``CHANGED``
            when entries for the host exist but none carries it (or the key
            is revoked), ``NEW`` when the host is unknown.
        """
        names = {host, host_key_name(host, port)}
        entries = [e for e in self.entries if any(e.matches(name) for name in names)]
        if any(e.marker == "@revoked" and e.key == key for e in entries):
            return HostKeyStatus.CHANGED
        seen_host = False
        for entry in entries:
            if entry.marker:
                continue
            seen_host = True
            if entry.key_type == key_type and entry.key == key:
                return HostKeyStatus.OK
        return HostKeyStatus.CHANGED if seen_host else HostKeyStatus.NEW

    def add(self, host: str, port: int | None, key_type: str, key: str, hashed: bool = True) -> KnownHostEntry:
        """Record a key, appending it to the backing file when there is one."""
        name = host_key_name(host, port)
        entry = KnownHostEntry(hash_hostname(name) if hashed else name, key_type, key)
        self.entries.append(entry)
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(entry.to_line() + "\n")
            logger.info(f"Adding {name} to {self.path}")
        return entry
