# gitclient/refs/refspec.py

"""Fetch and push refspecs (``[+]<src>[:<dst>]``)."""

from dataclasses import dataclass

from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class RefSpec:
    """A single refspec, optionally forced and optionally with a ``*`` wildcard."""

    source: str
    destination: str | None = None
    force: bool = False

    @classmethod
    def parse(cls, spec: str) -> "RefSpec":
        """
        Parse ``[+]<src>[:<dst>]``.

        Raises:
            ConfigurationError: If the spec is empty or the wildcards do not pair up.
        """
        if spec is None or not spec.strip():
            raise ConfigurationError(f"Invalid refspec {spec!r}")
        text = spec.strip()
        force = text.startswith("+")
        if force:
            text = text[1:]

        source, colon, destination = text.partition(":")
        refspec = cls(source=source, destination=destination if colon else None, force=force)
        if refspec.destination is not None and (
            refspec.is_wildcard != ("*" in refspec.destination)
        ):
            raise ConfigurationError(f"Invalid wildcards in refspec {spec}")
        if source.count("*") > 1:
            raise ConfigurationError(f"Invalid wildcards in refspec {spec}")
        return refspec

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.source

    def matches_source(self, ref: str) -> bool:
        """True when ``ref`` is selected by the source side."""
        if not self.is_wildcard:
            return ref == self.source
        prefix, _, suffix = self.source.partition("*")
        return (
            len(ref) >= len(prefix) + len(suffix)
            and ref.startswith(prefix)
            and ref.endswith(suffix)
        )

    def expand_from_source(self, ref: str) -> str | None:
        """Map a matching source ref to its destination, or None without one."""
        if self.destination is None or not self.matches_source(ref):
            return None
        if not self.is_wildcard:
            return self.destination
        prefix, _, suffix = self.source.partition("*")
        matched = ref[len(prefix) : len(ref) - len(suffix)]
        return self.destination.replace("*", matched, 1)

    def matches_destination(self, ref: str) -> bool:
        """True when ``ref`` is selected by the destination side."""
        if self.destination is None:
            return False
        return RefSpec(source=self.destination).matches_source(ref)

    def expand_from_destination(self, ref: str) -> str | None:
        """Map a destination ref back to the source ref it is fetched from."""
        if not self.matches_destination(ref):
            return None
        return RefSpec(source=self.destination, destination=self.source).expand_from_source(ref)

    def __str__(self) -> str:
        text = ("+" if self.force else "") + self.source
        if self.destination is not None:
            text += ":" + self.destination
        return text


def default_fetch_refspec(remote_name: str) -> RefSpec:
    """``+refs/heads/*:refs/remotes/<remote>/*``."""
    return RefSpec(
        source="refs/heads/*",
        destination=f"refs/remotes/{remote_name}/*",
        force=True,
    )
