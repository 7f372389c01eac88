"""Tests for the command line git authentication environment."""

import logging
from pathlib import Path

from pydantic import SecretStr
import pytest

from gitclient.backends.cli.credentials import CredentialEnvironmentBuilder, is_ssh_url
from gitclient.config.proxy import ProxyConfiguration
from gitclient.credentials.models import SSHUserPrivateKey, UsernamePasswordCredentials
from gitclient.process.tempfiles import ScopedTempFiles
from gitclient.process.versions import GitVersion
from gitclient.urls import GitURL
from gitclient.verifier.strategies import KnownHostsFileVerificationStrategy, NoHostKeyVerificationStrategy

log = logging.getLogger("gitclient.tests.credentials")
PASSWORD = UsernamePasswordCredentials(username="bot", password=SecretStr("token"))
SSH_KEY = SSHUserPrivateKey(username="git", private_keys=["-----BEGIN KEY-----"], passphrase=SecretStr("phrase"))


def builder(version="2.43.0", windows=False, proxy=None, base_env=None, strategy=None):
    return CredentialEnvironmentBuilder(
        version=GitVersion.parse(version),
        strategy=strategy or NoHostKeyVerificationStrategy(),
        logger=log,
        windows=windows,
        proxy=proxy,
        base_env=base_env or {},
    )


@pytest.mark.parametrize(
    "url,expected",
    [
        ("ssh://git@host/repo.git", True),
        ("git+ssh://host/repo.git", True),
        ("git@github.com:org/repo.git", True),
        ("https://host/repo.git", False),
        ("/srv/repo.git", False),
        ("file:///srv/repo.git", False),
    ],
)
def test_is_ssh_url(url, expected):
    assert is_ssh_url(GitURL.parse(url)) is expected


class TestUsernamePassword:
    def test_askpass_script(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder().build(scope, PASSWORD, GitURL.parse("https://example.com/repo.git"))
            script = Path(result.env["GIT_ASKPASS"])

            assert script.suffix == ".sh"
            assert "bot" in script.read_text(encoding="utf-8")
            assert result.env["SSH_ASKPASS"] == str(script)
            assert result.env["GIT_TERMINAL_PROMPT"] == "false"
            assert not result.uses_ssh_wrapper

        assert not script.exists()

    def test_windows_batch_file(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder(windows=True).build(scope, PASSWORD, GitURL.parse("https://example.com/repo.git"))

            assert result.env["GIT_ASKPASS"].endswith(".bat")
            assert result.env["GCM_INTERACTIVE"] == "false"

    def test_old_git_has_no_terminal_prompt_variable(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder(version="2.2.0").build(scope, None, GitURL.parse("https://example.com/repo.git"))

        assert "GIT_TERMINAL_PROMPT" not in result.env


class TestSshKey:
    def test_wrapper(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder().build(scope, SSH_KEY, GitURL.parse("ssh://github.com/org/repo.git"))
            wrapper = Path(result.env["GIT_SSH"]).read_text(encoding="utf-8")
            key_files = [p for p in scope.files if p.suffix == ".key"]

            assert result.uses_ssh_wrapper
            assert result.env["GIT_SSH_VARIANT"] == "ssh"
            assert result.env["DISPLAY"] == ":"
            assert key_files[0].read_text(encoding="utf-8") == "-----BEGIN KEY-----\n"
            assert f"-i {key_files[0]}" in wrapper
            assert "-l git" in wrapper
            assert "StrictHostKeyChecking=no" in wrapper
            passphrase = Path(result.env["SSH_ASKPASS"]).read_text(encoding="utf-8")
            assert "phrase" in passphrase

    def test_url_user_wins(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder(base_env={"DISPLAY": ":0"}).build(
                scope, SSH_KEY, GitURL.parse("deploy@github.com:org/repo.git")
            )
            wrapper = Path(result.env["GIT_SSH"]).read_text(encoding="utf-8")

            assert "-l deploy" in wrapper
            assert "DISPLAY" not in result.env

    def test_strategy_options_without_credentials(self, workspace, tmp_path):
        strategy = KnownHostsFileVerificationStrategy(tmp_path / "known_hosts")

        with ScopedTempFiles(workspace) as scope:
            result = builder(strategy=strategy).build(scope, None, GitURL.parse("ssh://host/repo.git"))

        assert result.env["GIT_SSH_COMMAND"] == (
            f"ssh -o StrictHostKeyChecking=yes -o UserKnownHostsFile={tmp_path / 'known_hosts'}"
        )

    def test_user_ssh_command_is_kept(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder(base_env={"GIT_SSH_COMMAND": "ssh -v"}).build(
                scope, None, GitURL.parse("ssh://host/repo.git")
            )

        assert "GIT_SSH_COMMAND" not in result.env


class TestProxy:
    PROXY = ProxyConfiguration(host="proxy", port=3128, no_proxy_host="*.internal")

    def test_proxied_host(self, workspace):
        with ScopedTempFiles(workspace) as scope:
            result = builder(proxy=self.PROXY).build(scope, None, GitURL.parse("https://example.com/repo.git"))

        assert result.env["http_proxy"] == "http://proxy:3128"
        assert result.env["https_proxy"] == "http://proxy:3128"

    @pytest.mark.parametrize("url", ["https://git.internal/repo.git", "ssh://example.com/repo.git"])
    def test_not_proxied(self, workspace, url):
        with ScopedTempFiles(workspace) as scope:
            result = builder(proxy=self.PROXY).build(scope, None, GitURL.parse(url))

        assert "http_proxy" not in result.env
