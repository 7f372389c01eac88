# gitclient/commands/clean.py

"""``git clean`` command."""

from dataclasses import dataclass, field

from .base import CommandOptions, GitCommand


@dataclass
class CleanOptions(CommandOptions):
    exclude_patterns: list[str] = field(default_factory=list)
    submodules: bool = False


class CleanCommand(GitCommand[CleanOptions]):
    """
    Reset tracked files to ``HEAD`` and remove untracked files and
    directories, ignored ones included.

    Nested repositories are only removed with ``submodules()``; paths
    matching an exclude pattern are kept.
    """

    options_class = CleanOptions
    description = "clean"

    def exclude_patterns(self, patterns: list[str]) -> "CleanCommand":
        self.options.exclude_patterns = list(patterns)
        return self

    def submodules(self, submodules: bool = True) -> "CleanCommand":
        self.options.submodules = submodules
        return self
