# gitclient/commands/fetch.py

"""``git fetch`` command."""

from dataclasses import dataclass, field

from ..refs.refspec import RefSpec
from .base import CommandOptions, GitCommand, require, validate_depth


@dataclass
class FetchOptions(CommandOptions):
    url: str | None = None
    refspecs: list[RefSpec] = field(default_factory=list)
    prune: bool = False
    shallow: bool = False
    depth: int | None = None
    tags: bool = True

    @property
    def effective_depth(self) -> int:
        return self.depth if self.depth is not None else 1


class FetchCommand(GitCommand[FetchOptions]):
    """Fetch refs from a repository URL or a configured remote name."""

    options_class = FetchOptions
    description = "fetch"

    def from_(self, url: str, refspecs: list[RefSpec | str] | None = None) -> "FetchCommand":
        self.options.url = url
        self.options.refspecs = [RefSpec.parse(r) if isinstance(r, str) else r for r in refspecs or []]
        return self

    def prune(self, prune: bool = True) -> "FetchCommand":
        self.options.prune = prune
        return self

    def shallow(self, shallow: bool = True) -> "FetchCommand":
        self.options.shallow = shallow
        return self

    def depth(self, depth: int) -> "FetchCommand":
        self.options.depth = depth
        return self

    def tags(self, tags: bool) -> "FetchCommand":
        self.options.tags = tags
        return self

    def validate(self) -> None:
        super().validate()
        require(self.options.url, "Fetch needs a repository URL or remote name")
        validate_depth(self.options.depth, self.description)
