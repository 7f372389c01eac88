# gitclient/commands/submodule.py

"""``git submodule update`` command."""

from dataclasses import dataclass, field

from ..core.exceptions import ConfigurationError
from .base import CommandOptions, GitCommand, validate_depth


@dataclass
class SubmoduleUpdateOptions(CommandOptions):
    recursive: bool = False
    remote_tracking: bool = False
    parent_credentials: bool = False
    ref: str | None = None
    submodule_branches: dict[str, str] = field(default_factory=dict)
    shallow: bool = False
    depth: int | None = None
    threads: int = 1

    @property
    def effective_depth(self) -> int:
        return self.depth if self.depth is not None else 1


class SubmoduleUpdateCommand(GitCommand[SubmoduleUpdateOptions]):
    """Initialize and update the submodules of the working directory."""

    options_class = SubmoduleUpdateOptions
    description = "submodule update"

    def recursive(self, recursive: bool = True) -> "SubmoduleUpdateCommand":
        self.options.recursive = recursive
        return self

    def remote_tracking(self, remote_tracking: bool = True) -> "SubmoduleUpdateCommand":
        self.options.remote_tracking = remote_tracking
        return self

    def parent_credentials(self, parent_credentials: bool = True) -> "SubmoduleUpdateCommand":
        self.options.parent_credentials = parent_credentials
        return self

    def ref(self, ref: str | None) -> "SubmoduleUpdateCommand":
        self.options.ref = ref
        return self

    def use_branch(self, submodule: str, branch: str) -> "SubmoduleUpdateCommand":
        """Track ``branch`` of ``submodule`` when updating with remote tracking."""
        self.options.submodule_branches[submodule] = branch
        return self

    def shallow(self, shallow: bool = True) -> "SubmoduleUpdateCommand":
        self.options.shallow = shallow
        return self

    def depth(self, depth: int) -> "SubmoduleUpdateCommand":
        self.options.depth = depth
        return self

    def threads(self, threads: int) -> "SubmoduleUpdateCommand":
        self.options.threads = threads
        return self

    def validate(self) -> None:
        super().validate()
        validate_depth(self.options.depth, self.description)
        threads = self.options.threads
        if isinstance(threads, bool) or not isinstance(threads, int) or threads < 1:
            raise ConfigurationError(f"Invalid thread count for {self.description}: {threads!r}")
