# gitclient/backends/cli/client.py

"""
Git client driving the command line ``git`` executable.

Every operation becomes one or more ``git`` child processes run through
``ProcessLauncher``. Network operations run inside a ``ScopedTempFiles``
scope holding the credential helpers for that single invocation.
"""

import functools
import os
from pathlib import Path
import re

from ...commands import (
    RAW_FORMAT,
    ChangelogOptions,
    CheckoutOptions,
    CleanOptions,
    CloneOptions,
    FetchOptions,
    InitOptions,
    MergeOptions,
    PushOptions,
    RevListOptions,
    SubmoduleUpdateOptions,
)
from ...config.settings import GitClientSettings, get_settings
from ...core.exceptions import (
    GitException,
    GitLockFailedError,
    GitTimeoutError,
    ProcessFailedError,
    VersionTooOldError,
)
from ...credentials.models import Credentials
from ...models import Branch
from ...process.executor import GitCommandsExecutor
from ...process.launcher import ProcessLauncher, ProcessResult
from ...process.tempfiles import ScopedTempFiles
from ...process.versions import GitVersion
from ...refs.normalizer import TAGS_PREFIX, extract_branch_name
from ...refs.refspec import default_fetch_refspec
from ...urls import GitURL, looks_like_remote_name
from ...utils import first_line, redact_url_credentials
from ..base import GitClient
from .credentials import CredentialEnvironmentBuilder
from .submodules import SUBMODULE_URL_CONFIG_KEY, parse_submodule_urls

SPARSE_CHECKOUT_FILE = Path(".git") / "info" / "sparse-checkout"
SHA1_PATTERN = re.compile(r"[0-9a-f]{40}")


def _rethrow(message: str, error: ProcessFailedError) -> ProcessFailedError:
    """Same failure with ``message`` in front of the git output."""
    return ProcessFailedError(
        f"{message}\n{error.message}",
        args=error.command_args,
        exit_code=error.exit_code,
        stdout=error.stdout,
        stderr=error.stderr,
        original_error=error,
    )


class CliGitClient(GitClient):
    """Git client implemented with the command line git executable."""

    backend_name = "git"

    def __init__(
        self,
        workspace,
        logger=None,
        env=None,
        proxy=None,
        host_key_configuration=None,
        git_executable: str | None = None,
        launcher: ProcessLauncher | None = None,
        settings: GitClientSettings | None = None,
    ) -> None:
        super().__init__(workspace, logger, env, proxy, host_key_configuration)
        self.settings = settings or get_settings()
        self.git_executable = git_executable or self.settings.git_executable
        self.launcher = launcher or ProcessLauncher(self.logger)
        self._version: GitVersion | None = None

    @property
    def is_windows(self) -> bool:
        return os.name == "nt"

    # Process helpers
    def _base_env(self) -> dict[str, str]:
        env = dict(self.env)
        if "GIT_ASKPASS" not in env and "GIT_ASKPASS" not in os.environ:
            env["GIT_ASKPASS"] = "echo"
        return env

    def _cwd(self, cwd: Path | None = None) -> str | None:
        directory = cwd or self.workspace
        return str(directory) if directory.is_dir() else None

    def _launch(
        self,
        args: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        new_session: bool = False,
    ) -> ProcessResult:
        run_env = self._base_env()
        run_env.update(env or {})
        return self.launcher.launch(
            [self.git_executable, *args],
            cwd=self._cwd(cwd),
            env=run_env,
            timeout=timeout,
            new_session=new_session,
        )

    def run_git(self, *args: str, cwd: Path | None = None, timeout: int | None = None) -> str:
        """Run ``git <args>`` and return its standard output."""
        return self._launch(list(args), cwd=cwd, timeout=timeout).stdout

    def _run_with_credentials(
        self,
        args: list[str],
        url: str | None,
        credentials: Credentials | None,
        timeout: int | None = None,
        cwd: Path | None = None,
    ) -> str:
        parsed = GitURL.parse(url) if url else None
        with ScopedTempFiles(
            self.workspace,
            self.settings.project_name,
            self.settings.system_temp_directory(),
            self.logger,
        ) as temp_files:
            builder = CredentialEnvironmentBuilder(
                version=self.version,
                strategy=self.host_key_configuration.get_strategy(),
                logger=self.logger,
                windows=self.is_windows,
                prompt_for_authentication=self.settings.prompt_for_authentication,
                proxy=self.proxy,
                base_env={**os.environ, **self.env},
            )
            credential_env = builder.build(temp_files, credentials, parsed)
            new_session = (
                self.settings.use_setsid and credential_env.uses_ssh_wrapper and not self.is_windows
            )
            result = self._launch(
                args,
                cwd=cwd,
                env=credential_env.env,
                timeout=timeout,
                new_session=new_session,
            )
            return result.stdout

    def _config_get(self, *args: str) -> str | None:
        """``git config`` lookup; None when the key is not set."""
        try:
            output = self.run_git("config", *args)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            if e.exit_code == 1:
                return None
            raise
        line = first_line(output)
        return line.strip() if line is not None else None

    def _credential_url(self, url: str) -> str:
        """Resolve a bare remote name to its URL for credential lookup."""
        if looks_like_remote_name(url):
            resolved = self.get_remote_url(url)
            if resolved:
                return resolved
        return url

    # Version gating
    @property
    def version(self) -> GitVersion:
        """Version of the git executable, queried once."""
        if self._version is None:
            output = self.launcher.launch(
                [self.git_executable, "--version"], env=self._base_env()
            ).stdout
            self._version = GitVersion.parse(output)
            self.logger.debug(f"Detected git version {self._version}")
        return self._version

    def is_at_least_version(self, major: int, minor: int = 0, revision: int = 0, bugfix: int = 0) -> bool:
        return self.version.is_at_least(major, minor, revision, bugfix)

    def _is_shallow_repository(self) -> bool:
        return (self.workspace / ".git" / "shallow").exists()

    # Commands
    def _init(self, options: InitOptions) -> None:
        target = Path(options.workspace) if options.workspace else self.workspace
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise GitException(f"Could not create directory {target}", original_error=e) from e
        args = ["init", str(target)]
        if options.bare:
            args.append("--bare")
        self._launch(args, cwd=target, timeout=options.timeout)

    def _write_alternates(self, reference: str) -> None:
        reference_path = Path(reference)
        if not reference_path.exists():
            self.logger.error(f"Reference path does not exist: {reference}")
            return
        if not reference_path.is_dir():
            self.logger.error(f"Reference path is not a directory: {reference}")
            return
        objects = reference_path / ".git" / "objects"
        if not objects.is_dir():
            objects = reference_path / "objects"
        if not objects.is_dir():
            self.logger.error(
                f"Reference path does not contain an objects directory (no git repo?): {objects}"
            )
            return
        alternates = self.workspace / ".git" / "objects" / "info" / "alternates"
        try:
            alternates.parent.mkdir(parents=True, exist_ok=True)
            alternates.write_text(str(objects.absolute()).replace("\\", "/"), encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Failed to setup reference: {e}")
            return
        self.logger.info(f"Using reference repository: {reference}")

    def _clone(self, options: CloneOptions) -> None:
        url = options.url
        GitURL.parse(url)
        self.logger.info(f"Cloning repository {redact_url_credentials(url)}")
        self.clean_workspace()
        self._init(InitOptions(workspace=str(self.workspace)))

        reference = options.reference
        if options.shared:
            if not reference:
                reference = url
            else:
                self.logger.warning("Both shared and reference is used, shared is ignored.")
        if reference:
            self._write_alternates(reference)

        refspecs = options.refspecs or [default_fetch_refspec(options.repository_name)]
        self._fetch(
            FetchOptions(
                timeout=options.timeout,
                url=url,
                refspecs=refspecs,
                shallow=options.shallow,
                depth=options.depth,
                tags=options.tags,
            )
        )
        self.set_remote_url(options.repository_name, url)
        for refspec in refspecs:
            self.run_git("config", "--add", f"remote.{options.repository_name}.fetch", str(refspec))

    def _fetch(self, options: FetchOptions) -> None:
        url = options.url
        self.logger.info(f"Fetching upstream changes from {redact_url_credentials(url)}")
        args = ["fetch", "--tags" if options.tags else "--no-tags"]
        if self.is_at_least_version(1, 7, 1, 0):
            args.append("--progress")

        credential_url = self._credential_url(url)
        credentials = self.credentials.get(credential_url)

        args.append(url)
        args.extend(str(refspec) for refspec in options.refspecs)
        if options.prune:
            args.append("--prune")
        if options.shallow:
            args.append(f"--depth={options.effective_depth}")
        self._run_with_credentials(args, credential_url, credentials, timeout=options.timeout)

    def _sparse_checkout(self, paths: list[str], timeout: int | None) -> None:
        try:
            enabled = "true" in self.run_git("config", "core.sparsecheckout")
        except GitTimeoutError:
            raise
        except ProcessFailedError:
            enabled = False

        if not paths and not enabled:
            return
        if not paths:
            paths = ["/*"]
        elif not enabled:
            self.run_git("config", "core.sparsecheckout", "true")

        sparse_file = self.workspace / SPARSE_CHECKOUT_FILE
        try:
            sparse_file.parent.mkdir(parents=True, exist_ok=True)
            sparse_file.write_text("".join(f"{path}\n" for path in paths), encoding="utf-8")
        except OSError as e:
            raise GitException(f"Could not write sparse checkout file {sparse_file}", original_error=e) from e

        try:
            self.run_git("read-tree", "-mu", "HEAD", timeout=timeout)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            # 128 when a sparse path never existed on the checked out branch
            if e.exit_code == 128:
                self.logger.info(e.message)
            else:
                raise

    def _checkout(self, options: CheckoutOptions) -> None:
        ref, branch = options.ref, options.branch
        try:
            self._sparse_checkout(options.sparse_checkout_paths, options.timeout)
            if branch is not None and options.delete_branch_if_exist:
                self.run_git("checkout", "-f", ref, timeout=options.timeout)
                if any(b.name == branch for b in self.get_branches()):
                    self.delete_branch(branch)
            args = ["checkout"]
            args.extend(["-b", branch] if branch is not None else ["-f"])
            args.append(ref)
            self.run_git(*args, timeout=options.timeout)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            if "index.lock" in e.message:
                raise GitLockFailedError(
                    "Could not lock repository. Please try again", original_error=e
                ) from e
            if branch is not None:
                raise _rethrow(f"Could not checkout {branch} with start point {ref}", e) from e
            raise _rethrow(f"Could not checkout {ref}", e) from e

    def _merge(self, options: MergeOptions) -> None:
        args = ["merge"]
        if options.squash:
            args.append("--squash")
        if not options.commit:
            args.append("--no-commit")
        if options.message:
            args.extend(["-m", options.message])
        args.extend(options.strategy.cli_args())
        args.append(options.fast_forward_mode.cli_arg())
        args.append(options.revision)
        try:
            self.run_git(*args, timeout=options.timeout)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            raise _rethrow(f"Could not merge {options.revision}", e) from e

    def _push(self, options: PushOptions) -> None:
        url = options.url
        if not self.is_at_least_version(1, 9, 0, 0) and self._is_shallow_repository():
            raise VersionTooOldError(
                "Can't push from shallow repository using git client older than 1.9.0",
                required="1.9.0",
                actual=str(self.version),
            )
        credential_url = self._credential_url(url)
        args = ["push", url]
        if options.ref:
            args.append(options.ref)
        if options.force:
            args.append("-f")
        if options.tags:
            args.append("--tags")
        self._run_with_credentials(
            args, credential_url, self.credentials.get(credential_url), timeout=options.timeout
        )

    def _submodule_update(self, options: SubmoduleUpdateOptions) -> None:
        # Copies the URLs from .gitmodules into the repository configuration.
        self.submodule_init()

        args = ["submodule", "update"]
        if options.recursive:
            args.extend(["--init", "--recursive"])
        if options.remote_tracking:
            if self.is_at_least_version(1, 8, 2, 0):
                args.append("--remote")
                for name, branch in options.submodule_branches.items():
                    self.run_git("config", "-f", ".gitmodules", f"submodule.{name}.branch", branch)
            else:
                self.logger.warning(
                    "Git client older than 1.8.2 doesn't support remote tracking submodules. This flag is ignored."
                )
        if options.ref:
            reference = Path(options.ref)
            if not reference.exists():
                self.logger.error(f"Reference path does not exist: {options.ref}")
            elif not reference.is_dir():
                self.logger.error(f"Reference path is not a directory: {options.ref}")
            else:
                args.extend(["--reference", options.ref])
        if options.shallow:
            if self.is_at_least_version(1, 8, 4, 0):
                args.append(f"--depth={options.effective_depth}")
            else:
                self.logger.warning(
                    "Git client older than 1.8.4 doesn't support shallow submodule updates. This flag is ignored."
                )

        try:
            config = self.run_git("config", "-f", ".gitmodules", "--get-regexp", SUBMODULE_URL_CONFIG_KEY)
        except GitTimeoutError:
            raise
        except ProcessFailedError:
            self.logger.error("No submodules found.")
            return

        parent_url = None
        if options.parent_credentials:
            default_remote = self.get_default_remote()
            parent_url = self.get_remote_url(default_remote) if default_remote else None

        tasks = []
        for entry in parse_submodule_urls(config):
            url = self.get_submodule_url(entry.name) or entry.url
            credentials = self.credentials.get(parent_url if parent_url else url)
            path = self._config_get("-f", ".gitmodules", "--get", f"submodule.{entry.name}.path") or entry.name
            tasks.append(
                functools.partial(
                    self._run_with_credentials,
                    [*args, path],
                    url,
                    credentials,
                    timeout=options.timeout,
                )
            )
        GitCommandsExecutor(options.threads, self.logger).invoke_all(tasks)

    def _changelog(self, options: ChangelogOptions) -> None:
        args = ["log", "--raw", "--no-merges", "--no-abbrev", "-M", f"--format={RAW_FORMAT}"]
        if options.max_count is not None:
            args.extend(["-n", str(options.max_count)])
        args.extend(options.includes)
        args.extend(f"^{revision}" for revision in options.excludes)
        output = self.run_git(*args, timeout=options.timeout)
        options.writer.write(output)
        options.writer.flush()

    def _rev_list(self, options: RevListOptions) -> None:
        args = ["rev-list"]
        if options.first_parent:
            args.append("--first-parent")
        if options.all:
            args.append("--all")
        if options.no_walk and self.is_at_least_version(1, 5, 3, 0):
            args.append("--no-walk")
        if options.reference:
            args.append(options.reference)
        output = self.run_git(*args, timeout=options.timeout)
        for line in output.splitlines():
            commit = line.strip()
            if not commit:
                continue
            if not SHA1_PATTERN.fullmatch(commit):
                raise GitException(f"Error parsing rev list: {commit}")
            options.out.append(commit)

    def _clean(self, options: CleanOptions) -> None:
        self.run_git("reset", "--hard", timeout=options.timeout)
        args = ["clean", "-ffdx" if options.submodules else "-fdx"]
        for pattern in options.exclude_patterns:
            args.extend(["-e", pattern])
        self.run_git(*args, timeout=options.timeout)

    # Repository state
    def has_git_repo(self) -> bool:
        if not (self.workspace / ".git").exists():
            return False
        try:
            self.run_git("rev-parse", "--is-inside-work-tree")
        except GitTimeoutError:
            raise
        except ProcessFailedError:
            self.logger.error("Workspace has a .git repository, but it appears to be corrupt.")
            return False
        return True

    def get_remote_names(self) -> list[str]:
        if not self.has_git_repo():
            return []
        return [line.strip() for line in self.run_git("remote").splitlines() if line.strip()]

    def get_remote_url(self, name: str) -> str | None:
        return self._config_get("--get", f"remote.{name}.url")

    def set_remote_url(self, name: str, url: str) -> None:
        self.run_git("config", f"remote.{name}.url", url)

    def add_remote_url(self, name: str, url: str) -> None:
        self.run_git("config", "--add", f"remote.{name}.url", url)

    def _ls_remote(self, args: list[str], url: str) -> str:
        credential_url = self._credential_url(url)
        return self._run_with_credentials(
            ["ls-remote", *args], credential_url, self.credentials.get(credential_url)
        )

    def get_remote_references(self, url, pattern=None, heads_only=False, tags_only=False) -> dict[str, str]:
        args = []
        if heads_only:
            args.append("-h")
        if tags_only:
            args.append("-t")
        args.append(url)
        if pattern:
            args.append(pattern)

        references: dict[str, str] = {}
        for line in self._ls_remote(args, url).splitlines():
            sha, tab, name = line.partition("\t")
            if not tab:
                self.logger.warning(f"Unexpected ls-remote output line '{line}'")
                continue
            if name.endswith("^{}"):
                references[name[:-3]] = sha
            else:
                references.setdefault(name, sha)
        return references

    def get_remote_symbolic_references(self, url, pattern=None) -> dict[str, str]:
        if not self.is_at_least_version(2, 8, 0, 0):
            # --symref needs git 2.8.0
            return {}
        args = ["--symref", url]
        if pattern:
            args.append(pattern)
        references: dict[str, str] = {}
        for line in self._ls_remote(args, url).splitlines():
            if not line.startswith("ref:"):
                continue
            parts = line[len("ref:") :].split()
            if len(parts) == 2:
                target, name = parts
                references[name] = target
        return references

    def get_head_rev(self, url, branch_spec=None) -> str | None:
        if branch_spec is None:
            args = [url, "HEAD"]
            wanted = ["HEAD"]
        else:
            branch_name = extract_branch_name(branch_spec)
            if branch_name.startswith(TAGS_PREFIX):
                # Annotated tags are peeled to the commit they point to.
                wanted = [branch_name + "^{}", branch_name]
                args = [url, *wanted]
            else:
                wanted = [branch_name]
                args = ["-h", url, branch_name]

        found: dict[str, str] = {}
        for line in self._ls_remote(args, url).splitlines():
            sha, tab, name = line.partition("\t")
            if tab:
                found.setdefault(name, sha)
        for name in wanted:
            if name in found:
                return found[name]
        return next(iter(found.values()), None)

    def prune(self, remote_name: str) -> None:
        url = self.get_remote_url(remote_name)
        if not url:
            return
        self._run_with_credentials(["remote", "prune", remote_name], url, self.credentials.get(url))

    def rev_parse(self, revision: str) -> str:
        output = self.run_git("rev-parse", f"{revision}^{{commit}}").strip()
        if not output:
            raise GitException(f"rev-parse no content returned for {revision}")
        return output

    # Tags and branches
    def tag(self, name: str, message: str) -> None:
        name = name.replace(" ", "_")
        try:
            self.run_git("tag", "-a", "-f", "-m", message, name)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            raise _rethrow(f"Could not apply tag {name}", e) from e

    def tag_exists(self, name: str) -> bool:
        return self.run_git("tag", "-l", name).strip() == name

    def get_tag_names(self, pattern=None) -> set[str]:
        args = ["tag", "-l"]
        if pattern:
            args.append(pattern)
        return {line.strip() for line in self.run_git(*args).splitlines() if line.strip()}

    def delete_tag(self, name: str) -> None:
        name = name.replace(" ", "_")
        try:
            self.run_git("tag", "-d", name)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            raise _rethrow(f"Could not delete tag {name}", e) from e

    def branch(self, name: str) -> None:
        try:
            self.run_git("branch", name)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            raise _rethrow(f"Could not create branch {name}", e) from e

    def delete_branch(self, name: str) -> None:
        try:
            self.run_git("branch", "-D", name)
        except GitTimeoutError:
            raise
        except ProcessFailedError as e:
            raise _rethrow(f"Could not delete branch {name}", e) from e

    def get_branches(self) -> set[Branch]:
        return parse_branches(self.run_git("branch", "-a", "-v", "--no-abbrev"))

    def get_remote_branches(self) -> set[Branch]:
        output = self.run_git("for-each-ref", "--format=%(objectname) %(refname)", "refs/remotes/")
        branches = set()
        for line in output.splitlines():
            sha, _, ref = line.strip().partition(" ")
            if ref.startswith("refs/remotes/"):
                branches.add(Branch(ref[len("refs/remotes/") :], sha))
        self.logger.info(f"Seen {len(branches)} remote branch{'' if len(branches) == 1 else 'es'}")
        return branches

    # Submodules
    def add_submodule(self, url: str, subdir: str) -> None:
        self.run_git("submodule", "add", url, subdir)

    def submodule_init(self) -> None:
        self.run_git("submodule", "init")

    def submodule_sync(self) -> None:
        self.run_git("submodule", "sync")

    def get_submodule_url(self, name: str) -> str | None:
        return self._config_get("--get", f"submodule.{name}.url")

    def set_submodule_url(self, name: str, url: str) -> None:
        self.run_git("config", f"submodule.{name}.url", url)


def parse_branches(output: str) -> set[Branch]:
    """Parse ``git branch -a -v --no-abbrev`` output."""
    branches = set()
    for line in output.splitlines():
        if len(line) < 3:
            continue
        entry = line[2:]
        # detached HEAD
        if entry.startswith("("):
            continue
        parts = entry.split()
        if len(parts) < 2 or parts[1] == "->":
            continue
        name = parts[0]
        if name.startswith("remotes/"):
            name = name[len("remotes/") :]
        branches.add(Branch(name, parts[1]))
    return branches
