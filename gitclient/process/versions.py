# gitclient/process/versions.py

"""Parsing of ``git --version`` output and minimum version checks."""

from dataclasses import dataclass
import re

_VERSION_PATTERN = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.(\d+))?")


@dataclass(frozen=True, order=True)
class GitVersion:
    """A git version as (major, minor, revision, bugfix)."""

    major: int = 0
    minor: int = 0
    revision: int = 0
    bugfix: int = 0

    @classmethod
    def parse(cls, version_output: str) -> "GitVersion":
        """
        Parse ``git version 2.30.1`` style output.

        Vendor suffixes such as ``.windows.1`` and ``.msysgit.0`` are dropped
        before parsing. Unparseable output yields version 0.0.0.0.
        """
        text = (version_output or "").strip()
        if text.startswith("git version"):
            text = text[len("git version") :].strip()
        text = text.replace("msysgit.", "").replace("windows.", "")
        match = _VERSION_PATTERN.search(text)
        if match is None:
            return cls()
        return cls(*(int(part) if part else 0 for part in match.groups()))

    def is_at_least(self, major: int, minor: int = 0, revision: int = 0, bugfix: int = 0) -> bool:
        """True when this version is the given version or newer."""
        return self >= GitVersion(major, minor, revision, bugfix)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}.{self.bugfix}"
