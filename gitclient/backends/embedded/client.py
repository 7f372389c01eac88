# gitclient/backends/embedded/client.py

"""
Git client running in process on top of dulwich.

The embedded client implements the same commands as the command line
client without a ``git`` executable. It differs in three ways:

- URLs with a scheme dulwich cannot negotiate are refused with
  ``UnsupportedProtocolError`` before any transport is created;
- options it cannot honour (see ``commands.support``) make the command
  fail with ``UnsupportedCommandError`` instead of being dropped;
- timeouts are accepted and logged but not enforced.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from fnmatch import fnmatchcase
import os
from pathlib import Path

from dulwich import porcelain
from dulwich.client import HTTPUnauthorized, LocalGitClient, SSHGitClient, get_transport_and_path
from dulwich.config import ConfigDict, ConfigFile, parse_submodules
from dulwich.diff_tree import RenameDetector, tree_changes
from dulwich.errors import GitProtocolError, NotGitRepository
from dulwich.file import FileLocked
from dulwich.graph import can_fast_forward
from dulwich.index import index_entry_from_path
from dulwich.object_store import tree_lookup_path
from dulwich.objects import Commit
from dulwich.objectspec import parse_commit
from dulwich.protocol import ZERO_SHA
from dulwich.repo import Repo

from ...commands import (
    ChangelogOptions,
    CheckoutOptions,
    CleanOptions,
    CloneOptions,
    FastForwardMode,
    FetchOptions,
    InitOptions,
    MergeOptions,
    PushOptions,
    RevListOptions,
    SubmoduleUpdateOptions,
    unsupported_options,
)
from ...commands.base import CommandOptions
from ...config.settings import GitClientSettings, get_settings
from ...core.exceptions import GitException, GitLockFailedError, UnsupportedCommandError
from ...models import Branch, SubmoduleEntry
from ...process.launcher import describe_command
from ...process.tempfiles import ScopedTempFiles
from ...refs.normalizer import HEADS_PREFIX, PEELED_SUFFIX, REMOTES_PREFIX, TAGS_PREFIX, extract_branch_name
from ...refs.refspec import RefSpec, default_fetch_refspec
from ...urls import GitURL, looks_like_remote_name
from ...utils import redact_url_credentials
from ..base import GitClient
from .credentials import EmbeddedCredentialsProvider
from .protocols import check_protocol, url_scheme
from .ssh import HostKeyVerifier, VerifyingSSHVendor

DULWICH_ERRORS = (
    porcelain.Error,
    GitProtocolError,
    HTTPUnauthorized,
    NotGitRepository,
    KeyError,
    ValueError,
    OSError,
)

CHANGE_TYPE_LETTERS = {
    "add": "A",
    "delete": "D",
    "modify": "M",
    "rename": "R100",
    "copy": "C100",
}


def matches_ls_remote_pattern(name: str, pattern: str) -> bool:
    """``git ls-remote`` pattern match: the pattern names the tail of the ref."""
    return fnmatchcase(name, pattern) or fnmatchcase(name, "*/" + pattern)


def matches_clean_exclude(path: str, patterns: list[str]) -> bool:
    """
    ``git clean -e`` match of a path relative to the working directory.

    A pattern without a slash matches the last path component; one with a
    slash matches the whole relative path.
    """
    name = path.rsplit("/", 1)[-1]
    for pattern in patterns:
        pattern = pattern.rstrip("/")
        if "/" in pattern:
            if fnmatchcase(path, pattern.lstrip("/")):
                return True
        elif fnmatchcase(name, pattern):
            return True
    return False


def _format_identity_time(timestamp: int, offset: int) -> str:
    moment = datetime.fromtimestamp(timestamp, timezone(timedelta(seconds=offset)))
    return moment.strftime("%Y-%m-%d %H:%M:%S %z")


class EmbeddedGitClient(GitClient):
    """Git client implemented with dulwich."""

    backend_name = "embedded"

    def __init__(
        self,
        workspace,
        logger=None,
        env=None,
        proxy=None,
        host_key_configuration=None,
        settings: GitClientSettings | None = None,
    ) -> None:
        super().__init__(workspace, logger, env, proxy, host_key_configuration)
        self.settings = settings or get_settings()
        self.credential_provider = EmbeddedCredentialsProvider(self.credentials, self.logger)

    # Helpers
    def _log_command(self, args: list[str], options: CommandOptions) -> None:
        timeout = self.effective_timeout(options)
        self.logger.info(f" > git {describe_command(args)} # timeout={timeout}")
        self.logger.warning(f"Timeout of {timeout} seconds is not enforced by the embedded git client")

    def _check_supported(self, options: CommandOptions, description: str) -> None:
        unsupported = unsupported_options(options)
        if unsupported:
            raise UnsupportedCommandError(
                f"The embedded git client does not support {', '.join(unsupported)} for {description}",
                details={"options": unsupported},
            )

    @contextmanager
    def _dulwich_errors(self, message: str):
        try:
            yield
        except GitException:
            raise
        except DULWICH_ERRORS as e:
            raise GitException(f"{message}: {e}", original_error=e) from e

    def _open_repo(self) -> Repo:
        try:
            return Repo(str(self.workspace))
        except NotGitRepository as e:
            raise GitException(f"No git repository in {self.workspace}", original_error=e) from e

    def _write_config(self, section: tuple[bytes, ...], name: bytes, value: str, add: bool = False) -> None:
        with self._open_repo() as repo:
            config = repo.get_config()
            if add:
                config.add(section, name, value.encode())
            else:
                config.set(section, name, value.encode())
            config.write_to_path()

    def _read_config(self, section: tuple[bytes, ...], name: bytes) -> str | None:
        with self._open_repo() as repo:
            try:
                return repo.get_config().get(section, name).decode()
            except KeyError:
                return None

    def _resolve_url(self, url: str) -> str:
        """URL of the remote when ``url`` is a configured remote name."""
        if looks_like_remote_name(url) and self.has_git_repo():
            resolved = self._read_config((b"remote", url.encode()), b"url")
            if resolved:
                return resolved
        return url

    def _configured_refspecs(self, remote_name: str) -> list[RefSpec]:
        if not looks_like_remote_name(remote_name):
            return []
        with self._open_repo() as repo:
            try:
                values = list(repo.get_config().get_multivar((b"remote", remote_name.encode()), b"fetch"))
            except KeyError:
                return []
        return [RefSpec.parse(value.decode()) for value in values]

    @contextmanager
    def _transport(self, url: str, operation: str | None = None):
        """dulwich client and path for ``url``, with credentials and host key options applied."""
        check_protocol(url)
        with ScopedTempFiles(
            self.workspace,
            self.settings.project_name,
            self.settings.system_temp_directory(),
            self.logger,
        ) as temp_files:
            transport = self.credential_provider.resolve(url, temp_files)
            parsed = GitURL.parse(transport.location)

            config = None
            if url_scheme(transport.location) in ("http", "https") and self.proxy is not None:
                if self.proxy.should_proxy(parsed.host):
                    config = ConfigDict()
                    config.set((b"http",), b"proxy", self.proxy.proxy_url().encode())
                else:
                    self.logger.debug(f"Not using proxy for {parsed.host}")

            client, path = get_transport_and_path(
                transport.location,
                config=config,
                operation=operation,
                username=transport.username,
                password=transport.password,
                key_filename=transport.key_filename,
            )
            if isinstance(client, SSHGitClient):
                strategy = self.host_key_configuration.get_strategy()
                options = strategy.ssh_options(parsed.host, parsed.port, temp_files, self.logger)
                client.ssh_vendor = VerifyingSSHVendor(
                    options,
                    transport.key_filename,
                    transport.askpass,
                    host_key_check=HostKeyVerifier(strategy, self.logger),
                )
                if transport.username and not client.username:
                    client.username = transport.username
            yield client, path

    def _resolve_commit(self, repo: Repo, revision: str):
        try:
            return parse_commit(repo, revision)
        except (KeyError, ValueError) as e:
            raise GitException(f"Could not resolve revision {revision}", original_error=e) from e

    # Commands
    def _init(self, options: InitOptions) -> None:
        target = Path(options.workspace) if options.workspace else self.workspace
        self._log_command(["init", str(target)] + (["--bare"] if options.bare else []), options)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise GitException(f"Could not create directory {target}", original_error=e) from e

        existing = (target / "HEAD") if options.bare else (target / ".git")
        if existing.exists():
            self.logger.info(f"Reinitialized existing Git repository in {target}")
            return
        with self._dulwich_errors(f"Could not init {target}"):
            repo = Repo.init_bare(str(target)) if options.bare else Repo.init(str(target))
            repo.close()

    def _clone(self, options: CloneOptions) -> None:
        self._check_supported(options, "clone")
        url = check_protocol(options.url)
        self._log_command(["clone", url], options)
        self.logger.info(f"Cloning repository {redact_url_credentials(url)}")
        self.clean_workspace()
        self._init(InitOptions(timeout=options.timeout, workspace=str(self.workspace)))

        refspecs = options.refspecs or [default_fetch_refspec(options.repository_name)]
        self._fetch_refs(url, refspecs, tags=options.tags, prune=False)

        section = (b"remote", options.repository_name.encode())
        self._write_config(section, b"url", url)
        for refspec in refspecs:
            self._write_config(section, b"fetch", str(refspec), add=True)

    def _fetch(self, options: FetchOptions) -> None:
        self._check_supported(options, "fetch")
        check_protocol(options.url)
        url = check_protocol(self._resolve_url(options.url))
        self._log_command(["fetch", options.url, *(str(r) for r in options.refspecs)], options)
        self.logger.info(f"Fetching upstream changes from {redact_url_credentials(url)}")
        refspecs = options.refspecs or self._configured_refspecs(options.url)
        self._fetch_refs(url, refspecs, tags=options.tags, prune=options.prune)

    def _fetch_refs(self, url: str, refspecs: list[RefSpec], tags: bool, prune: bool) -> None:
        def wanted(name: str) -> bool:
            if name.endswith(PEELED_SUFFIX):
                return False
            if tags and name.startswith(TAGS_PREFIX):
                return True
            return any(refspec.matches_source(name) for refspec in refspecs)

        with self._dulwich_errors(f"Could not fetch from {redact_url_credentials(url)}"), self._open_repo() as repo:

            def determine_wants(refs, depth=None):
                wants = []
                for name, sha in refs.items():
                    if sha is None or sha == ZERO_SHA or not wanted(name.decode()):
                        continue
                    if sha not in wants and sha not in repo.object_store:
                        wants.append(sha)
                return wants

            with self._transport(url, "pull") as (client, path):
                result = client.fetch(path, repo, determine_wants=determine_wants)

            remote_refs = {
                name.decode(): sha
                for name, sha in result.refs.items()
                if sha is not None and not name.endswith(PEELED_SUFFIX.encode())
            }
            for name, sha in remote_refs.items():
                for refspec in refspecs:
                    destination = refspec.expand_from_source(name)
                    if destination:
                        repo.refs[destination.encode()] = sha
                if tags and name.startswith(TAGS_PREFIX):
                    repo.refs[name.encode()] = sha
            if prune:
                self._prune_refs(repo, remote_refs, refspecs)

    def _prune_refs(self, repo: Repo, remote_refs: dict[str, bytes], refspecs: list[RefSpec]) -> None:
        symrefs = set(repo.refs.get_symrefs())
        for local in sorted(repo.refs.keys()):
            if local in symrefs:
                continue
            name = local.decode()
            for refspec in refspecs:
                source = refspec.expand_from_destination(name)
                if source is not None and source not in remote_refs:
                    self.logger.info(f" x [deleted] (none) -> {name}")
                    del repo.refs[local]
                    break

    def _checkout(self, options: CheckoutOptions) -> None:
        self._check_supported(options, "checkout")
        ref, branch = options.ref, options.branch
        args = ["checkout", "-b", branch, ref] if branch is not None else ["checkout", "-f", ref]
        self._log_command(args, options)
        message = f"Could not checkout {branch} with start point {ref}" if branch is not None else f"Could not checkout {ref}"

        if (self.workspace / ".git" / "index.lock").exists():
            raise GitLockFailedError("Could not lock repository. Please try again")
        try:
            with self._dulwich_errors(message), self._open_repo() as repo:
                commit = self._resolve_commit(repo, ref)
                if branch is None:
                    porcelain.checkout(repo, target=commit.id.decode(), force=True)
                    return
                branch_ref = (HEADS_PREFIX + branch).encode()
                if branch_ref in repo.refs and not options.delete_branch_if_exist:
                    raise GitException(f"{message}: a branch named '{branch}' already exists")
                porcelain.checkout(repo, target=commit.id.decode(), force=True)
                repo.refs[branch_ref] = commit.id
                porcelain.checkout(repo, target=branch, force=True)
        except FileLocked as e:
            raise GitLockFailedError("Could not lock repository. Please try again", original_error=e) from e

    def _merge(self, options: MergeOptions) -> None:
        self._check_supported(options, "merge")
        args = ["merge"]
        if not options.commit:
            args.append("--no-commit")
        if options.message:
            args.extend(["-m", options.message])
        args.extend([options.fast_forward_mode.cli_arg(), options.revision])
        self._log_command(args, options)

        message = f"Could not merge {options.revision}"
        with self._dulwich_errors(message), self._open_repo() as repo:
            self._resolve_commit(repo, options.revision)
            _, conflicts = porcelain.merge(
                repo,
                options.revision,
                no_commit=not options.commit,
                no_ff=options.fast_forward_mode is FastForwardMode.NO_FF,
                message=options.message,
            )
        if conflicts:
            paths = [os.fsdecode(path) for path in conflicts]
            raise GitException(f"{message}: conflicts in {', '.join(paths)}", details={"conflicts": paths})

    def _push_updates(self, repo: Repo, options: PushOptions) -> dict[bytes, bytes]:
        """Remote ref to new commit id for each ref pushed."""
        updates: dict[bytes, bytes] = {}
        if options.ref or not options.tags:
            source, _, destination = (options.ref or "HEAD").partition(":")
            if source == "HEAD":
                names, _ = repo.refs.follow(b"HEAD")
                current = names[-1].decode()
                if not current.startswith(HEADS_PREFIX):
                    raise GitException("You are not currently on a branch")
                source = current
            if source.encode() in repo.refs:
                sha = repo.refs[source.encode()]
            else:
                sha = self._resolve_commit(repo, source).id
            if not destination:
                destination = source if source.startswith("refs/") else HEADS_PREFIX + source
            elif not destination.startswith("refs/"):
                destination = HEADS_PREFIX + destination
            updates[destination.encode()] = sha
        if options.tags:
            for name, sha in repo.refs.as_dict(TAGS_PREFIX.encode()).items():
                updates[TAGS_PREFIX.encode() + name] = sha
        return updates

    def _push(self, options: PushOptions) -> None:
        self._check_supported(options, "push")
        check_protocol(options.url)
        url = check_protocol(self._resolve_url(options.url))
        args = ["push", options.url]
        if options.ref:
            args.append(options.ref)
        if options.force:
            args.append("-f")
        if options.tags:
            args.append("--tags")
        self._log_command(args, options)

        message = f"Could not push to {redact_url_credentials(url)}"
        rejected: list[str] = []
        with self._dulwich_errors(message), self._open_repo() as repo:
            updates = self._push_updates(repo, options)

            def update_refs(remote_refs):
                # Only the refs to change; local targets set every ref returned.
                new_refs = {}
                for name, sha in updates.items():
                    old = remote_refs.get(name)
                    if old and old != ZERO_SHA and old != sha and not options.force:
                        if name.startswith(TAGS_PREFIX.encode()) or old not in repo.object_store:
                            rejected.append(name.decode())
                            continue
                        if not can_fast_forward(repo, old, sha):
                            rejected.append(name.decode())
                            continue
                    new_refs[name] = sha
                return new_refs

            with self._transport(url, "push") as (client, path):
                result = client.send_pack(path, update_refs, generate_pack_data=repo.generate_pack_data)

        if rejected:
            raise GitException(f"{message}: rejected {', '.join(rejected)}", details={"rejected": rejected})
        failed = {name.decode(): status for name, status in (result.ref_status or {}).items() if status}
        if failed:
            raise GitException(f"{message}: {failed}", details={"ref_status": failed})

    def _gitmodules(self) -> list[SubmoduleEntry]:
        gitmodules = self.workspace / ".gitmodules"
        if not gitmodules.exists():
            return []
        config = ConfigFile.from_path(str(gitmodules))
        return [
            SubmoduleEntry(name=name.decode(), url=url.decode(), path=path.decode())
            for path, url, name in parse_submodules(config)
        ]

    def _child_client(self, path: str) -> "EmbeddedGitClient":
        child = EmbeddedGitClient(
            self.workspace / path,
            self.logger,
            self.env,
            self.proxy,
            self.host_key_configuration,
            self.settings,
        )
        child.credentials = self.credentials
        child.credential_provider = self.credential_provider
        return child

    def _submodule_update(self, options: SubmoduleUpdateOptions) -> None:
        self._check_supported(options, "submodule update")
        args = ["submodule", "update"]
        if options.recursive:
            args.extend(["--init", "--recursive"])
        self._log_command(args, options)

        self.submodule_init()
        entries = self._gitmodules()
        if not entries:
            self.logger.error("No submodules found.")
            return

        with self._dulwich_errors("Could not update submodules"), self._open_repo() as repo:
            tree = repo[repo.head()].tree
            recorded = {}
            for entry in entries:
                try:
                    _, sha = tree_lookup_path(repo.__getitem__, tree, entry.path.encode())
                except KeyError:
                    self.logger.warning(f"Submodule {entry.path} is not recorded in HEAD")
                    continue
                recorded[entry.name] = sha.decode()

        for entry in entries:
            if entry.name not in recorded:
                continue
            url = self.get_submodule_url(entry.name) or entry.url
            child = self._child_client(entry.path)
            if not child.has_git_repo():
                child.init_().workspace(str(child.workspace)).timeout(options.timeout).execute()
                child.set_remote_url("origin", url)
            child.fetch_().from_(url, [default_fetch_refspec("origin")]).timeout(options.timeout).execute()
            child.checkout().ref(recorded[entry.name]).timeout(options.timeout).execute()
            if options.recursive and child.has_git_modules():
                child.submodule_update().recursive(True).timeout(options.timeout).execute()

    def _changelog(self, options: ChangelogOptions) -> None:
        args = ["log", "--raw", "--no-merges", "--no-abbrev", "-M"]
        if options.max_count is not None:
            args.extend(["-n", str(options.max_count)])
        args.extend(options.includes)
        args.extend(f"^{revision}" for revision in options.excludes)
        self._log_command(args, options)

        with self._dulwich_errors("Error performing git log"), self._open_repo() as repo:
            include = [self._resolve_commit(repo, rev).id for rev in (options.includes or ["HEAD"])]
            exclude = [self._resolve_commit(repo, rev).id for rev in options.excludes]
            written = 0
            for entry in repo.get_walker(include=include, exclude=exclude):
                commit = entry.commit
                if len(commit.parents) > 1:
                    continue
                if options.max_count is not None and written >= options.max_count:
                    break
                options.writer.write(self._format_raw_commit(repo, commit))
                written += 1
        options.writer.flush()

    def _rev_list(self, options: RevListOptions) -> None:
        self._check_supported(options, "rev-list")
        args = ["rev-list"]
        if options.all:
            args.append("--all")
        if options.no_walk:
            args.append("--no-walk")
        if options.reference:
            args.append(options.reference)
        self._log_command(args, options)

        with self._dulwich_errors("Error performing git rev-list"), self._open_repo() as repo:
            include = self._ref_commits(repo) if options.all else []
            if options.reference:
                include.append(self._resolve_commit(repo, options.reference).id)
            if not include:
                return
            if options.no_walk:
                named = {sha: repo[sha] for sha in include}.values()
                commits = sorted(named, key=lambda commit: commit.commit_time, reverse=True)
                options.out.extend(commit.id.decode() for commit in commits)
            else:
                options.out.extend(entry.commit.id.decode() for entry in repo.get_walker(include=include))

    def _ref_commits(self, repo: Repo) -> list[bytes]:
        """Commits named by ``HEAD`` and every reference, tags peeled."""
        commits: list[bytes] = []
        for name in sorted(repo.refs.allkeys()):
            if name != b"HEAD" and not name.startswith(b"refs/"):
                continue
            try:
                target = repo[repo.get_peeled(name)]
            except KeyError:
                self.logger.debug(f"Skipping unresolved reference {name.decode()}")
                continue
            if isinstance(target, Commit) and target.id not in commits:
                commits.append(target.id)
        return commits

    def _clean(self, options: CleanOptions) -> None:
        args = ["clean", "-ffdx" if options.submodules else "-fdx"]
        for pattern in options.exclude_patterns:
            args.extend(["-e", pattern])
        self._log_command(args, options)

        with self._dulwich_errors("Error performing git clean"):
            with self._open_repo() as repo:
                porcelain.reset(repo, "hard")
                tracked = {path.decode() for path in repo.open_index()}
            tracked_dirs = set()
            for path in tracked:
                parts = path.split("/")
                tracked_dirs.update("/".join(parts[:i]) for i in range(1, len(parts)))
            self._sweep(self.workspace, "", tracked, tracked_dirs, options)

    def _sweep(
        self,
        directory: Path,
        prefix: str,
        tracked: set[str],
        tracked_dirs: set[str],
        options: CleanOptions,
    ) -> bool:
        """Remove the untracked entries below ``directory``; True when nothing is left."""
        empty = True
        for child in sorted(directory.iterdir()):
            relative = prefix + child.name
            if relative == ".git" or relative in tracked or matches_clean_exclude(relative, options.exclude_patterns):
                empty = False
                continue
            if child.is_dir() and not child.is_symlink():
                nested_repo = relative not in tracked_dirs and (child / ".git").exists()
                if nested_repo and not options.submodules:
                    self.logger.info(f"Skipping repository {relative}/")
                    empty = False
                elif self._sweep(child, relative + "/", tracked, tracked_dirs, options) and relative not in tracked_dirs:
                    self.logger.info(f"Removing {relative}/")
                    child.rmdir()
                else:
                    empty = False
            else:
                self.logger.info(f"Removing {relative}")
                child.unlink()
        return empty

    def _format_raw_commit(self, repo: Repo, commit) -> str:
        lines = [
            f"commit {commit.id.decode()}",
            f"tree {commit.tree.decode()}",
            f"parent {' '.join(p.decode() for p in commit.parents)}",
            f"author {commit.author.decode()} {_format_identity_time(commit.author_time, commit.author_timezone)}",
            f"committer {commit.committer.decode()} {_format_identity_time(commit.commit_time, commit.commit_timezone)}",
            "",
        ]
        lines.extend("    " + line for line in commit.message.decode(errors="replace").rstrip("\n").split("\n"))
        lines.append("")

        parent_tree = repo[commit.parents[0]].tree if commit.parents else None
        changes = tree_changes(
            repo.object_store,
            parent_tree,
            commit.tree,
            rename_detector=RenameDetector(repo.object_store),
        )
        for change in changes:
            letter = CHANGE_TYPE_LETTERS.get(change.type)
            if letter is None:
                continue
            old, new = change.old, change.new
            old_mode = f"{old.mode:06o}" if old is not None and old.mode else "000000"
            new_mode = f"{new.mode:06o}" if new is not None and new.mode else "000000"
            old_sha = old.sha.decode() if old is not None and old.sha else "0" * 40
            new_sha = new.sha.decode() if new is not None and new.sha else "0" * 40
            paths = [entry.path.decode() for entry in (old, new) if entry is not None and entry.path]
            if letter[0] not in "RC":
                paths = paths[-1:]
            lines.append(f":{old_mode} {new_mode} {old_sha} {new_sha} {letter}\t" + "\t".join(paths))
        lines.append("")
        return "\n".join(lines) + "\n"

    # Repository state
    def has_git_repo(self) -> bool:
        if not (self.workspace / ".git").exists():
            return False
        try:
            Repo(str(self.workspace)).close()
        except NotGitRepository:
            self.logger.error("Workspace has a .git repository, but it appears to be corrupt.")
            return False
        return True

    def get_remote_names(self) -> list[str]:
        if not self.has_git_repo():
            return []
        with self._open_repo() as repo:
            sections = repo.get_config().sections()
            names = [section[1].decode() for section in sections if len(section) > 1 and section[0] == b"remote"]
        return list(dict.fromkeys(names))

    def get_remote_url(self, name: str) -> str | None:
        url = self._read_config((b"remote", name.encode()), b"url")
        return check_protocol(url) if url else None

    def set_remote_url(self, name: str, url: str) -> None:
        check_protocol(url)
        self._write_config((b"remote", name.encode()), b"url", url)

    def add_remote_url(self, name: str, url: str) -> None:
        check_protocol(url)
        self._write_config((b"remote", name.encode()), b"url", url, add=True)

    def _ls_remote(self, url: str):
        url = check_protocol(self._resolve_url(check_protocol(url)))
        with self._dulwich_errors(f"Could not list references of {redact_url_credentials(url)}"):
            with self._transport(url) as (client, path):
                result = client.get_refs(path)
                refs = {name.decode(): sha.decode() for name, sha in result.refs.items() if sha is not None}
                symrefs = {name.decode(): target.decode() for name, target in (result.symrefs or {}).items()}
                peeled = {name[: -len(PEELED_SUFFIX)]: sha for name, sha in refs.items() if name.endswith(PEELED_SUFFIX)}
                if isinstance(client, LocalGitClient):
                    peeled.update(self._peel_local(path, refs))
        return refs, symrefs, peeled

    @staticmethod
    def _peel_local(path, refs: dict[str, str]) -> dict[str, str]:
        """Commit ids of the annotated tags of a local repository."""
        peeled = {}
        with Repo(os.fsdecode(path)) as remote:
            for name, sha in refs.items():
                if name.startswith(TAGS_PREFIX) and not name.endswith(PEELED_SUFFIX):
                    target = remote.get_peeled(name.encode()).decode()
                    if target != sha:
                        peeled[name] = target
        return peeled

    def get_remote_references(self, url, pattern=None, heads_only=False, tags_only=False) -> dict[str, str]:
        refs, _, peeled = self._ls_remote(url)
        prefixes = [prefix for prefix, wanted in ((HEADS_PREFIX, heads_only), (TAGS_PREFIX, tags_only)) if wanted]
        references = {}
        for name, sha in refs.items():
            if name.endswith(PEELED_SUFFIX):
                continue
            if prefixes and not any(name.startswith(prefix) for prefix in prefixes):
                continue
            if pattern and not matches_ls_remote_pattern(name, pattern):
                continue
            references[name] = peeled.get(name, sha)
        return references

    def get_remote_symbolic_references(self, url, pattern=None) -> dict[str, str]:
        _, symrefs, _ = self._ls_remote(url)
        return {
            name: target
            for name, target in symrefs.items()
            if not pattern or matches_ls_remote_pattern(name, pattern)
        }

    def get_head_rev(self, url, branch_spec=None) -> str | None:
        references = self.get_remote_references(url)
        if branch_spec is None:
            return references.get("HEAD")
        branch_name = extract_branch_name(branch_spec)
        if "*" in branch_name:
            for name in sorted(references):
                if matches_ls_remote_pattern(name, branch_name):
                    return references[name]
            return None
        return references.get(branch_name)

    def prune(self, remote_name: str) -> None:
        url = self.get_remote_url(remote_name)
        if not url:
            return
        refspecs = self._configured_refspecs(remote_name) or [default_fetch_refspec(remote_name)]
        refs, _, _ = self._ls_remote(url)
        remote_refs = {name: sha.encode() for name, sha in refs.items()}
        with self._open_repo() as repo:
            self._prune_refs(repo, remote_refs, refspecs)

    def rev_parse(self, revision: str) -> str:
        with self._open_repo() as repo:
            try:
                return parse_commit(repo, revision).id.decode()
            except (KeyError, ValueError) as e:
                raise GitException(f"rev-parse no content returned for {revision}", original_error=e) from e

    # Tags and branches
    def tag(self, name: str, message: str) -> None:
        name = name.replace(" ", "_")
        with self._dulwich_errors(f"Could not apply tag {name}"), self._open_repo() as repo:
            tag_ref = (TAGS_PREFIX + name).encode()
            if tag_ref in repo.refs:
                del repo.refs[tag_ref]
            porcelain.tag_create(repo, name, message=message, annotated=True)

    def tag_exists(self, name: str) -> bool:
        with self._open_repo() as repo:
            return (TAGS_PREFIX + name).encode() in repo.refs

    def get_tag_names(self, pattern=None) -> set[str]:
        with self._open_repo() as repo:
            names = {name.decode() for name in repo.refs.as_dict(TAGS_PREFIX.encode())}
        return {name for name in names if not pattern or fnmatchcase(name, pattern)}

    def delete_tag(self, name: str) -> None:
        name = name.replace(" ", "_")
        with self._open_repo() as repo:
            tag_ref = (TAGS_PREFIX + name).encode()
            if tag_ref not in repo.refs:
                raise GitException(f"Could not delete tag {name}: tag not found")
            del repo.refs[tag_ref]

    def branch(self, name: str) -> None:
        with self._dulwich_errors(f"Could not create branch {name}"), self._open_repo() as repo:
            branch_ref = (HEADS_PREFIX + name).encode()
            if branch_ref in repo.refs:
                raise GitException(f"Could not create branch {name}: a branch named '{name}' already exists")
            repo.refs[branch_ref] = repo.head()

    def delete_branch(self, name: str) -> None:
        with self._open_repo() as repo:
            branch_ref = (HEADS_PREFIX + name).encode()
            if branch_ref not in repo.refs:
                raise GitException(f"Could not delete branch {name}: branch not found")
            del repo.refs[branch_ref]

    def _branches_under(self, repo: Repo, prefix: str) -> set[Branch]:
        symrefs = set(repo.refs.get_symrefs())
        return {
            Branch(name.decode(), sha.decode())
            for name, sha in repo.refs.as_dict(prefix.encode()).items()
            if prefix.encode() + name not in symrefs
        }

    def get_branches(self) -> set[Branch]:
        with self._open_repo() as repo:
            return self._branches_under(repo, HEADS_PREFIX) | self._branches_under(repo, REMOTES_PREFIX)

    def get_remote_branches(self) -> set[Branch]:
        with self._open_repo() as repo:
            branches = self._branches_under(repo, REMOTES_PREFIX)
        self.logger.info(f"Seen {len(branches)} remote branch{'' if len(branches) == 1 else 'es'}")
        return branches

    # Submodules
    def add_submodule(self, url: str, subdir: str) -> None:
        check_protocol(url)
        child = self._child_client(subdir)
        child.clone_().url(url).execute()
        head = child.get_remote_symbolic_references(url).get("HEAD")
        if head and head.startswith(HEADS_PREFIX):
            branch = head[len(HEADS_PREFIX) :]
            child.checkout().ref(f"origin/{branch}").branch(branch).execute()
        else:
            child.checkout().ref(child.get_head_rev(url)).execute()

        gitmodules = self.workspace / ".gitmodules"
        config = ConfigFile.from_path(str(gitmodules)) if gitmodules.exists() else ConfigFile()
        config.set((b"submodule", subdir.encode()), b"path", subdir.encode())
        config.set((b"submodule", subdir.encode()), b"url", url.encode())
        config.write_to_path(str(gitmodules))

        with self._dulwich_errors(f"Could not add submodule {subdir}"), self._open_repo() as repo:
            index = repo.open_index()
            index[subdir.encode()] = index_entry_from_path(os.fsencode(child.workspace))
            index.write()
            porcelain.add(repo, paths=[str(gitmodules)])
        self._write_config((b"submodule", subdir.encode()), b"url", url)

    def submodule_init(self) -> None:
        entries = self._gitmodules()
        with self._open_repo() as repo:
            config = repo.get_config()
            for entry in entries:
                section = (b"submodule", entry.name.encode())
                try:
                    config.get(section, b"url")
                except KeyError:
                    config.set(section, b"url", entry.url.encode())
                    self.logger.info(f"Submodule '{entry.name}' ({entry.url}) registered for path '{entry.path}'")
            config.write_to_path()

    def submodule_sync(self) -> None:
        entries = self._gitmodules()
        with self._open_repo() as repo:
            config = repo.get_config()
            for entry in entries:
                self.logger.info(f"Synchronizing submodule url for '{entry.path}'")
                config.set((b"submodule", entry.name.encode()), b"url", entry.url.encode())
            config.write_to_path()
        for entry in entries:
            child = self._child_client(entry.path)
            if child.has_git_repo() and "origin" in child.get_remote_names():
                child.set_remote_url("origin", entry.url)

    def get_submodule_url(self, name: str) -> str | None:
        return self._read_config((b"submodule", name.encode()), b"url")

    def set_submodule_url(self, name: str, url: str) -> None:
        check_protocol(url)
        self._write_config((b"submodule", name.encode()), b"url", url)
