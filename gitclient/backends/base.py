# gitclient/backends/base.py

"""
Abstract base class of the git clients.

A client is bound to one working directory. It owns the credentials and
the proxy used by its network operations, creates the fluent command
objects and performs them. The command line client and the embedded
client implement the same interface; callers never need to know which
one they hold.
"""

from abc import ABC, abstractmethod
import logging
from pathlib import Path
import shutil
from typing import ClassVar

from ..commands import (
    ChangelogCommand,
    ChangelogOptions,
    CheckoutCommand,
    CheckoutOptions,
    CleanCommand,
    CleanOptions,
    CloneCommand,
    CloneOptions,
    FetchCommand,
    FetchOptions,
    InitCommand,
    InitOptions,
    MergeCommand,
    MergeOptions,
    PushCommand,
    PushOptions,
    RevListCommand,
    RevListOptions,
    SubmoduleUpdateCommand,
    SubmoduleUpdateOptions,
)
from ..commands.base import CommandOptions
from ..config.proxy import ProxyConfiguration
from ..config.settings import get_default_timeout
from ..core.exceptions import GitException, GitTimeoutError
from ..credentials.lookup import CredentialStore
from ..credentials.models import Credentials
from ..models import Branch
from ..refs.normalizer import normalize_branch_spec
from ..verifier.configuration import HostKeyVerificationConfiguration, get_host_key_configuration

ROOT_LOGGER_NAME = "gitclient"


class GitClient(ABC):
    """Interface shared by the command line and the embedded git clients."""

    backend_name: ClassVar[str] = ""

    def __init__(
        self,
        workspace: str | Path,
        logger: logging.Logger | None = None,
        env: dict[str, str] | None = None,
        proxy: ProxyConfiguration | None = None,
        host_key_configuration: HostKeyVerificationConfiguration | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            workspace: Working directory the client operates on.
            logger: Sink for command lines and progress; ``gitclient`` by default.
            env: Extra environment for the operations of this client.
            proxy: Proxy used for http and https remotes.
            host_key_configuration: Source of the active host key strategy.
        """
        self.workspace = Path(workspace).absolute()
        self.logger = logger or logging.getLogger(ROOT_LOGGER_NAME)
        self.env: dict[str, str] = dict(env or {})
        self.proxy = proxy
        self.credentials = CredentialStore()
        self.host_key_configuration = host_key_configuration or get_host_key_configuration()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(workspace={str(self.workspace)!r})"

    # Credentials and proxy
    def add_credentials(self, url: str, credentials: Credentials) -> None:
        """Use ``credentials`` for operations on ``url``."""
        self.credentials.add(url, credentials)

    def add_default_credentials(self, credentials: Credentials | None) -> None:
        """Use ``credentials`` for URLs without their own."""
        self.credentials.add_default(credentials)

    def set_credentials(self, credentials: Credentials | None) -> None:
        self.add_default_credentials(credentials)

    def clear_credentials(self) -> None:
        self.credentials.clear()

    def set_proxy(self, proxy: ProxyConfiguration | None) -> None:
        self.proxy = proxy

    def effective_timeout(self, options: CommandOptions) -> int:
        """Timeout of a command, the process-wide default when it sets none."""
        return options.timeout if options.timeout is not None else get_default_timeout()

    # Command factories
    def init_(self) -> InitCommand:
        return InitCommand(self._init)

    def clone_(self) -> CloneCommand:
        return CloneCommand(self._clone)

    def fetch_(self) -> FetchCommand:
        return FetchCommand(self._fetch)

    def checkout(self) -> CheckoutCommand:
        return CheckoutCommand(self._checkout)

    def merge(self) -> MergeCommand:
        return MergeCommand(self._merge)

    def push(self) -> PushCommand:
        return PushCommand(self._push)

    def submodule_update(self) -> SubmoduleUpdateCommand:
        return SubmoduleUpdateCommand(self._submodule_update)

    def changelog(self) -> ChangelogCommand:
        return ChangelogCommand(self._changelog)

    def rev_list_(self) -> RevListCommand:
        return RevListCommand(self._rev_list)

    def clean_(self) -> CleanCommand:
        return CleanCommand(self._clean)

    def init(self) -> None:
        """Create an empty repository in the working directory."""
        self.init_().workspace(str(self.workspace)).execute()

    def rev_list_all(self) -> list[str]:
        """Every commit reachable from any reference, newest first."""
        commits: list[str] = []
        self.rev_list_().all().to(commits).execute()
        return commits

    def rev_list(self, reference: str) -> list[str]:
        """Commits reachable from ``reference``, newest first."""
        commits: list[str] = []
        self.rev_list_().reference(reference).to(commits).execute()
        return commits

    def is_commit_in_repo(self, commit: str | None) -> bool:
        """True when ``commit`` names a commit object in the local repository."""
        if not commit or not self.has_git_repo():
            return False
        commits: list[str] = []
        try:
            self.rev_list_().reference(commit).no_walk().to(commits).execute()
        except GitTimeoutError:
            raise
        except GitException as e:
            self.logger.debug(f"Commit {commit} not found: {e}")
            return False
        return bool(commits)

    def clean(self, clean_submodule: bool = False) -> None:
        """Reset to ``HEAD`` and remove untracked and ignored files."""
        self.clean_().submodules(clean_submodule).execute()

    # Command implementations
    @abstractmethod
    def _init(self, options: InitOptions) -> None:
        pass

    @abstractmethod
    def _clone(self, options: CloneOptions) -> None:
        pass

    @abstractmethod
    def _fetch(self, options: FetchOptions) -> None:
        pass

    @abstractmethod
    def _checkout(self, options: CheckoutOptions) -> None:
        pass

    @abstractmethod
    def _merge(self, options: MergeOptions) -> None:
        pass

    @abstractmethod
    def _push(self, options: PushOptions) -> None:
        pass

    @abstractmethod
    def _submodule_update(self, options: SubmoduleUpdateOptions) -> None:
        pass

    @abstractmethod
    def _changelog(self, options: ChangelogOptions) -> None:
        pass

    @abstractmethod
    def _rev_list(self, options: RevListOptions) -> None:
        pass

    @abstractmethod
    def _clean(self, options: CleanOptions) -> None:
        pass

    # Repository state
    @abstractmethod
    def has_git_repo(self) -> bool:
        """True when the working directory holds a repository."""
        pass

    @abstractmethod
    def get_remote_names(self) -> list[str]:
        """Names of the configured remotes."""
        pass

    @abstractmethod
    def get_remote_url(self, name: str) -> str | None:
        """URL of remote ``name``, None when not configured."""
        pass

    @abstractmethod
    def set_remote_url(self, name: str, url: str) -> None:
        pass

    @abstractmethod
    def add_remote_url(self, name: str, url: str) -> None:
        """Add ``url`` as an additional URL of remote ``name``."""
        pass

    @abstractmethod
    def get_remote_references(
        self,
        url: str,
        pattern: str | None = None,
        heads_only: bool = False,
        tags_only: bool = False,
    ) -> dict[str, str]:
        """
        List the references of a remote repository.

        Args:
            url: Repository URL or remote name.
            pattern: Reference pattern such as ``refs/heads/*``.
            heads_only: Only ``refs/heads/``.
            tags_only: Only ``refs/tags/``.

        Returns:
            Mapping of reference name to commit id; annotated tags map to
            the commit they point to.
        """
        pass

    @abstractmethod
    def get_remote_symbolic_references(self, url: str, pattern: str | None = None) -> dict[str, str]:
        """Mapping of symbolic reference name (``HEAD``) to its target."""
        pass

    @abstractmethod
    def get_head_rev(self, url: str, branch_spec: str | None = None) -> str | None:
        """
        Commit id of a remote branch or tag.

        Without ``branch_spec`` the remote ``HEAD`` is looked up. Tags are
        peeled to the commit they point to; None when nothing matches.
        """
        pass

    @abstractmethod
    def prune(self, remote_name: str) -> None:
        """Remove remote-tracking branches that no longer exist on the remote."""
        pass

    @abstractmethod
    def rev_parse(self, revision: str) -> str:
        """Commit id of ``revision``."""
        pass

    # Tags and branches
    @abstractmethod
    def tag(self, name: str, message: str) -> None:
        pass

    @abstractmethod
    def tag_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def get_tag_names(self, pattern: str | None = None) -> set[str]:
        pass

    @abstractmethod
    def delete_tag(self, name: str) -> None:
        pass

    @abstractmethod
    def branch(self, name: str) -> None:
        """Create branch ``name`` at ``HEAD``."""
        pass

    @abstractmethod
    def delete_branch(self, name: str) -> None:
        pass

    @abstractmethod
    def get_branches(self) -> set[Branch]:
        """Local and remote-tracking branches."""
        pass

    @abstractmethod
    def get_remote_branches(self) -> set[Branch]:
        pass

    # Submodules
    @abstractmethod
    def add_submodule(self, url: str, subdir: str) -> None:
        pass

    @abstractmethod
    def submodule_init(self) -> None:
        pass

    @abstractmethod
    def submodule_sync(self) -> None:
        pass

    @abstractmethod
    def get_submodule_url(self, name: str) -> str | None:
        pass

    @abstractmethod
    def set_submodule_url(self, name: str, url: str) -> None:
        pass

    def has_git_modules(self) -> bool:
        """True when the working directory has a ``.gitmodules`` file."""
        return (self.workspace / ".gitmodules").exists()

    def clean_workspace(self) -> None:
        """Delete everything inside the working directory."""
        if not self.workspace.exists():
            return
        try:
            for child in self.workspace.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        except OSError as e:
            self.logger.error("Failed to clean the workspace")
            raise GitException("Failed to delete workspace", original_error=e) from e

    # Shared helpers
    def get_default_remote(self, preferred: str = "origin") -> str | None:
        """``preferred`` when configured, else the first remote, else None."""
        names = self.get_remote_names()
        if preferred in names:
            return preferred
        return names[0] if names else None

    def normalize_branch_spec(self, branch_spec: str) -> list[str]:
        """Candidate references for ``branch_spec`` given this repository's remotes."""
        return normalize_branch_spec(branch_spec, self.get_remote_names())
