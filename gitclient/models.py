# gitclient/models.py

"""Data models returned by git clients."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Branch:
    """A local or remote-tracking branch and the commit it points to."""

    name: str
    sha: str


@dataclass(frozen=True)
class SubmoduleEntry:
    """A submodule declared in ``.gitmodules``."""

    name: str
    url: str
    path: str | None = None
    branch: str | None = None

