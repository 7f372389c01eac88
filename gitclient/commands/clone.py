# gitclient/commands/clone.py

"""``git clone`` command."""

from dataclasses import dataclass, field

from ..refs.refspec import RefSpec
from .base import CommandOptions, GitCommand, require, validate_depth


@dataclass
class CloneOptions(CommandOptions):
    url: str | None = None
    repository_name: str = "origin"
    shallow: bool = False
    depth: int | None = None
    shared: bool = False
    reference: str | None = None
    no_checkout: bool = False
    tags: bool = True
    refspecs: list[RefSpec] = field(default_factory=list)


class CloneCommand(GitCommand[CloneOptions]):
    """
    Clone a repository into the client's working directory.

    The working directory is emptied first. Without explicit refspecs all
    branches are fetched into ``refs/remotes/<repository_name>/*``.
    """

    options_class = CloneOptions
    description = "clone"

    def url(self, url: str) -> "CloneCommand":
        self.options.url = url
        return self

    def repository_name(self, name: str) -> "CloneCommand":
        self.options.repository_name = name
        return self

    def shallow(self, shallow: bool = True) -> "CloneCommand":
        self.options.shallow = shallow
        return self

    def depth(self, depth: int) -> "CloneCommand":
        self.options.depth = depth
        return self

    def shared(self, shared: bool = True) -> "CloneCommand":
        self.options.shared = shared
        return self

    def reference(self, reference: str | None) -> "CloneCommand":
        self.options.reference = reference
        return self

    def no_checkout(self) -> "CloneCommand":
        self.options.no_checkout = True
        return self

    def tags(self, tags: bool) -> "CloneCommand":
        self.options.tags = tags
        return self

    def refspecs(self, refspecs: list[RefSpec | str]) -> "CloneCommand":
        self.options.refspecs = [RefSpec.parse(r) if isinstance(r, str) else r for r in refspecs]
        return self

    def validate(self) -> None:
        super().validate()
        require(self.options.url, "Clone needs a repository URL")
        require(self.options.repository_name, "Clone needs a repository name")
        validate_depth(self.options.depth, self.description)
