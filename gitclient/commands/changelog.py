# gitclient/commands/changelog.py

"""Raw change log (``git log --raw``) command."""

from dataclasses import dataclass, field
from typing import TextIO

from ..core.exceptions import ConfigurationError
from .base import CommandOptions, GitCommand

RAW_FORMAT = (
    "commit %H%ntree %T%nparent %P%nauthor %aN <%aE> %ai%n"
    "committer %cN <%cE> %ci%n%n%w(0,4,4)%B"
)


@dataclass
class ChangelogOptions(CommandOptions):
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    max_count: int | None = None
    writer: TextIO | None = None


class ChangelogCommand(GitCommand[ChangelogOptions]):
    """
    Write the raw change log of the included revisions to a writer.

    Each entry has the ``git log --raw`` shape produced with ``RAW_FORMAT``:
    commit, tree, parent, author and committer header lines, the message
    indented by four spaces, then the raw diff lines.
    """

    options_class = ChangelogOptions
    description = "changelog"

    def includes(self, revision: str) -> "ChangelogCommand":
        self.options.includes.append(revision)
        return self

    def excludes(self, revision: str) -> "ChangelogCommand":
        self.options.excludes.append(revision)
        return self

    def max(self, max_count: int) -> "ChangelogCommand":
        self.options.max_count = max_count
        return self

    def to(self, writer: TextIO) -> "ChangelogCommand":
        self.options.writer = writer
        return self

    def validate(self) -> None:
        super().validate()
        if self.options.writer is None:
            raise ConfigurationError("Changelog needs a writer; call to(writer) first")
        max_count = self.options.max_count
        if max_count is not None and (isinstance(max_count, bool) or not isinstance(max_count, int) or max_count < 0):
            raise ConfigurationError(f"Invalid max count for changelog: {max_count!r}")
