# gitclient/commands/merge.py

"""``git merge`` command."""

from dataclasses import dataclass
from enum import Enum

from .base import CommandOptions, GitCommand, require


class MergeStrategy(str, Enum):
    """Merge strategies understood by ``git merge -s``."""

    DEFAULT = "default"
    RESOLVE = "resolve"
    RECURSIVE = "recursive"
    OCTOPUS = "octopus"
    OURS = "ours"
    SUBTREE = "subtree"
    RECURSIVE_THEIRS = "recursive_theirs"

    def cli_args(self) -> list[str]:
        if self is MergeStrategy.DEFAULT:
            return []
        if self is MergeStrategy.RECURSIVE_THEIRS:
            return ["-s", "recursive", "--strategy-option", "theirs"]
        return ["-s", self.value]


class FastForwardMode(str, Enum):
    """How a merge may fast-forward."""

    FF = "ff"
    FF_ONLY = "ff-only"
    NO_FF = "no-ff"

    def cli_arg(self) -> str:
        return f"--{self.value}"


@dataclass
class MergeOptions(CommandOptions):
    revision: str | None = None
    message: str | None = None
    strategy: MergeStrategy = MergeStrategy.DEFAULT
    fast_forward_mode: FastForwardMode = FastForwardMode.FF
    squash: bool = False
    commit: bool = True


class MergeCommand(GitCommand[MergeOptions]):
    """Merge a revision into the current branch."""

    options_class = MergeOptions
    description = "merge"

    def revision(self, revision: str) -> "MergeCommand":
        self.options.revision = revision
        return self

    def message(self, message: str) -> "MergeCommand":
        self.options.message = message
        return self

    def strategy(self, strategy: MergeStrategy | str) -> "MergeCommand":
        self.options.strategy = MergeStrategy(strategy)
        return self

    def fast_forward_mode(self, mode: FastForwardMode | str) -> "MergeCommand":
        self.options.fast_forward_mode = FastForwardMode(mode)
        return self

    def squash(self, squash: bool = True) -> "MergeCommand":
        self.options.squash = squash
        return self

    def commit(self, commit: bool) -> "MergeCommand":
        self.options.commit = commit
        return self

    def validate(self) -> None:
        super().validate()
        require(self.options.revision, "Merge needs a revision")
