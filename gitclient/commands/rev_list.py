# gitclient/commands/rev_list.py

"""``git rev-list`` command."""

from dataclasses import dataclass

from ..core.exceptions import ConfigurationError
from .base import CommandOptions, GitCommand


@dataclass
class RevListOptions(CommandOptions):
    all: bool = False
    first_parent: bool = False
    no_walk: bool = False
    reference: str | None = None
    out: list[str] | None = None


class RevListCommand(GitCommand[RevListOptions]):
    """
    Append the commit ids reachable from a reference (or from every
    reference) to a caller supplied list, newest first.
    """

    options_class = RevListOptions
    description = "rev-list"

    def all(self, all: bool = True) -> "RevListCommand":
        self.options.all = all
        return self

    def first_parent(self, first_parent: bool = True) -> "RevListCommand":
        self.options.first_parent = first_parent
        return self

    def no_walk(self, no_walk: bool = True) -> "RevListCommand":
        """List only the named commits, not their ancestors."""
        self.options.no_walk = no_walk
        return self

    def reference(self, reference: str) -> "RevListCommand":
        self.options.reference = reference
        return self

    def to(self, out: list[str]) -> "RevListCommand":
        self.options.out = out
        return self

    def validate(self) -> None:
        super().validate()
        if self.options.out is None:
            raise ConfigurationError("Rev list needs a result list; call to(list) first")
        reference = self.options.reference
        if not self.options.all and (reference is None or not reference.strip()):
            raise ConfigurationError("Rev list needs a reference or all()")
