# gitclient/commands/push.py

"""``git push`` command."""

from dataclasses import dataclass

from .base import CommandOptions, GitCommand, require


@dataclass
class PushOptions(CommandOptions):
    url: str | None = None
    ref: str | None = None
    force: bool = False
    tags: bool = False


class PushCommand(GitCommand[PushOptions]):
    """Push a refspec (and optionally all tags) to a URL or remote name."""

    options_class = PushOptions
    description = "push"

    def to(self, url: str) -> "PushCommand":
        self.options.url = url
        return self

    def ref(self, ref: str) -> "PushCommand":
        self.options.ref = ref
        return self

    def force(self, force: bool = True) -> "PushCommand":
        self.options.force = force
        return self

    def tags(self, tags: bool = True) -> "PushCommand":
        self.options.tags = tags
        return self

    def validate(self) -> None:
        super().validate()
        require(self.options.url, "Push needs a repository URL or remote name")
