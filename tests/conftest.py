"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from pathlib import Path
import shutil

from dulwich import porcelain
from dulwich.repo import Repo
import pytest

from gitclient.backends.cli import CliGitClient
from gitclient.backends.embedded import EmbeddedGitClient
from gitclient.config.settings import GitClientSettings, set_settings
from gitclient.core.exceptions import ProcessFailedError
from gitclient.process.launcher import ProcessLauncher, ProcessRequest, ProcessResult, describe_command
from gitclient.verifier.configuration import HostKeyVerificationConfiguration

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not installed")

AUTHOR = b"Test User <test@example.com>"


class RecordingLauncher(ProcessLauncher):
    """Launcher that records requests and answers from canned responses."""

    def __init__(self, version: str = "git version 2.43.0", logger: logging.Logger | None = None) -> None:
        super().__init__(logger)
        self.version = version
        self.requests: list[ProcessRequest] = []
        self.responses: list[tuple[tuple[str, ...], ProcessResult]] = []
        self.errors: list[tuple[tuple[str, ...], Exception]] = []

    def respond(self, *prefix: str, stdout: str = "", exit_code: int = 0, stderr: str = "") -> None:
        """Answer git invocations whose arguments start with ``prefix``."""
        self.responses.insert(0, (prefix, ProcessResult(list(prefix), exit_code, stdout, stderr)))

    def fail_with(self, error: Exception, *prefix: str) -> None:
        """Raise ``error`` for git invocations whose arguments start with ``prefix``."""
        self.errors.insert(0, (prefix, error))

    def run(self, request: ProcessRequest, check: bool = True) -> ProcessResult:
        command = describe_command(request.args)
        self.logger.info(f" > {command} # timeout={request.timeout}")
        self.requests.append(request)
        git_args = tuple(request.args[1:])
        if git_args == ("--version",):
            return ProcessResult(request.args, 0, self.version + "\n", "")
        for prefix, error in self.errors:
            if git_args[: len(prefix)] == prefix:
                raise error

        result = ProcessResult(request.args, 0, "", "")
        for prefix, canned in self.responses:
            if git_args[: len(prefix)] == prefix:
                result = ProcessResult(request.args, canned.exit_code, canned.stdout, canned.stderr)
                break
        if check and result.exit_code != 0:
            raise ProcessFailedError(
                f'Command "{command}" returned status code {result.exit_code}:\n'
                f"stdout: {result.stdout}\nstderr: {result.stderr}",
                args=request.args,
                exit_code=result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    @property
    def git_calls(self) -> list[list[str]]:
        """Arguments after the executable, without version queries."""
        return [list(r.args[1:]) for r in self.requests if list(r.args[1:]) != ["--version"]]

    def request_for(self, *prefix: str) -> ProcessRequest:
        for request in self.requests:
            if tuple(request.args[1 : 1 + len(prefix)]) == prefix:
                return request
        raise AssertionError(f"No git {' '.join(prefix)} invocation recorded")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Process-wide settings that never touch the user's home directory."""
    monkeypatch.delenv("GIT_ASKPASS", raising=False)
    monkeypatch.delenv("GIT_SSH", raising=False)
    monkeypatch.delenv("GIT_SSH_COMMAND", raising=False)
    settings = GitClientSettings(known_hosts_file=str(tmp_path / "ssh" / "known_hosts"))
    set_settings(settings)
    yield settings
    set_settings(None)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def logger() -> logging.Logger:
    test_logger = logging.getLogger("gitclient.tests")
    test_logger.setLevel(logging.DEBUG)
    return test_logger


@pytest.fixture
def host_keys() -> HostKeyVerificationConfiguration:
    return HostKeyVerificationConfiguration()


@pytest.fixture
def launcher(logger: logging.Logger) -> RecordingLauncher:
    return RecordingLauncher(logger=logger)


@pytest.fixture
def cli_client(workspace, logger, launcher, host_keys) -> CliGitClient:
    return CliGitClient(workspace, logger=logger, launcher=launcher, host_key_configuration=host_keys)


@pytest.fixture
def embedded_client(workspace, logger, host_keys) -> EmbeddedGitClient:
    return EmbeddedGitClient(workspace, logger=logger, host_key_configuration=host_keys)


def commit_file(repo_path: Path, name: str, content: str, message: str) -> bytes:
    """Write a file into a repository, commit it and return the commit id."""
    (repo_path / name).write_text(content, encoding="utf-8")
    with Repo(str(repo_path)) as repo:
        porcelain.add(repo, paths=[str(repo_path / name)])
        return porcelain.commit(
            repo,
            message=message.encode(),
            author=AUTHOR,
            committer=AUTHOR,
        )


@pytest.fixture
def upstream(tmp_path: Path) -> Path:
    """Repository with two commits on master, a feature branch and two tags."""
    path = tmp_path / "upstream"
    path.mkdir()
    with Repo.init(str(path)) as repo:
        repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/master")
    commit_file(path, "README.md", "hello\n", "Initial commit")
    second = commit_file(path, "README.md", "hello world\n", "Second commit")
    with Repo(str(path)) as repo:
        repo.refs[b"refs/heads/feature"] = second
        porcelain.tag_create(repo, b"v1.0", author=AUTHOR, message=b"Release 1.0", annotated=True)
        porcelain.tag_create(repo, b"light", annotated=False)
    return path


@pytest.fixture
def upstream_url(upstream: Path) -> str:
    return upstream.as_uri()
