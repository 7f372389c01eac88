# gitclient/commands/init.py

"""``git init`` command."""

from dataclasses import dataclass

from .base import CommandOptions, GitCommand


@dataclass
class InitOptions(CommandOptions):
    workspace: str | None = None
    bare: bool = False


class InitCommand(GitCommand[InitOptions]):
    """Create an empty repository in the client's (or the given) directory."""

    options_class = InitOptions
    description = "init"

    def workspace(self, workspace: str) -> "InitCommand":
        self.options.workspace = workspace
        return self

    def bare(self, bare: bool = True) -> "InitCommand":
        self.options.bare = bare
        return self
