# gitclient/commands/checkout.py

"""``git checkout`` command."""

from dataclasses import dataclass, field

from ..core.exceptions import ConfigurationError
from .base import CommandOptions, GitCommand, require


@dataclass
class CheckoutOptions(CommandOptions):
    ref: str | None = None
    branch: str | None = None
    delete_branch_if_exist: bool = False
    sparse_checkout_paths: list[str] = field(default_factory=list)


class CheckoutCommand(GitCommand[CheckoutOptions]):
    """Check out a revision, optionally (re)creating a branch at it."""

    options_class = CheckoutOptions
    description = "checkout"

    def ref(self, ref: str) -> "CheckoutCommand":
        self.options.ref = ref
        return self

    def branch(self, branch: str | None) -> "CheckoutCommand":
        self.options.branch = branch
        return self

    def delete_branch_if_exist(self, delete: bool = True) -> "CheckoutCommand":
        self.options.delete_branch_if_exist = delete
        return self

    def sparse_checkout_paths(self, paths: list[str] | None) -> "CheckoutCommand":
        self.options.sparse_checkout_paths = list(paths or [])
        return self

    def validate(self) -> None:
        super().validate()
        require(self.options.ref, "Checkout needs a revision")
        if self.options.branch is not None and not self.options.branch.strip():
            raise ConfigurationError("Checkout branch name must not be blank")
