# gitclient/backends/cli/credentials.py

"""
Environment that lets command line git authenticate without a terminal.

Credentials are materialized as helper scripts and key files inside a
``ScopedTempFiles`` scope that belongs to one git invocation:

- username/password: a ``GIT_ASKPASS`` helper answering the Username and
  Password prompts;
- SSH private key: the key file, a ``SSH_ASKPASS`` helper printing the
  passphrase, and a ``GIT_SSH`` wrapper running ssh with the key and the
  options of the active host key verification strategy.

Without SSH credentials an ssh remote still gets the strategy's options,
through ``GIT_SSH_COMMAND``. http and https remotes get the proxy
variables unless the host is excluded from proxying.
"""

from dataclasses import dataclass, field
import logging
import shlex

from ...config.proxy import ProxyConfiguration
from ...credentials.models import Credentials, SSHUserPrivateKey, UsernamePasswordCredentials
from ...process.askpass import (
    unix_askpass_script,
    unix_passphrase_script,
    unix_ssh_wrapper,
    windows_askpass_script,
    windows_passphrase_script,
    windows_ssh_wrapper,
)
from ...process.tempfiles import ScopedTempFiles
from ...process.versions import GitVersion
from ...urls import GitURL
from ...verifier.strategies import SshHostKeyVerificationStrategy

SSH_SCHEMES = ("ssh", "git+ssh", "ssh+git")
PROXIED_SCHEMES = ("http", "https")


def is_ssh_url(url: GitURL | None) -> bool:
    if url is None:
        return False
    return url.scheme in SSH_SCHEMES or url.is_scp_like


@dataclass
class CredentialEnvironment:
    """Variables for one git invocation."""

    env: dict[str, str] = field(default_factory=dict)
    uses_ssh_wrapper: bool = False


class CredentialEnvironmentBuilder:
    """Builds the authentication environment of command line git invocations."""

    def __init__(
        self,
        version: GitVersion,
        strategy: SshHostKeyVerificationStrategy,
        logger: logging.Logger,
        windows: bool = False,
        prompt_for_authentication: bool = False,
        proxy: ProxyConfiguration | None = None,
        base_env: dict[str, str] | None = None,
    ) -> None:
        self.version = version
        self.strategy = strategy
        self.logger = logger
        self.windows = windows
        self.prompt_for_authentication = prompt_for_authentication
        self.proxy = proxy
        self.base_env = dict(base_env or {})

    @property
    def script_suffix(self) -> str:
        return ".bat" if self.windows else ".sh"

    def build(
        self,
        temp_files: ScopedTempFiles,
        credentials: Credentials | None,
        url: GitURL | None,
    ) -> CredentialEnvironment:
        """
        Materialize ``credentials`` for an operation on ``url``.

        Every file created lives in ``temp_files`` and disappears when
        that scope closes.
        """
        result = CredentialEnvironment()
        env = result.env

        if not self.prompt_for_authentication and self.version.is_at_least(2, 3, 0, 0):
            env["GIT_TERMINAL_PROMPT"] = "false"
            if self.windows:
                env["GCM_INTERACTIVE"] = "false"

        ssh_options: list[str] = []
        if is_ssh_url(url):
            ssh_options = self.strategy.ssh_options(url.host, url.port, temp_files, self.logger)

        if isinstance(credentials, SSHUserPrivateKey):
            self._add_ssh_key(temp_files, credentials, url, ssh_options, env)
            result.uses_ssh_wrapper = True
        elif is_ssh_url(url) and "GIT_SSH_COMMAND" not in self.base_env and "GIT_SSH" not in self.base_env:
            env["GIT_SSH_COMMAND"] = " ".join(["ssh", *(shlex.quote(option) for option in ssh_options)])

        if isinstance(credentials, UsernamePasswordCredentials):
            self._add_username_password(temp_files, credentials, env)

        if url is not None and url.scheme in PROXIED_SCHEMES and self.proxy is not None:
            if self.proxy.should_proxy(url.host):
                proxy_url = self.proxy.proxy_url()
                env["http_proxy"] = proxy_url
                env["https_proxy"] = proxy_url
            else:
                self.logger.debug(f"Not using proxy for {url.host}")

        return result

    def _add_ssh_key(
        self,
        temp_files: ScopedTempFiles,
        credentials: SSHUserPrivateKey,
        url: GitURL | None,
        ssh_options: list[str],
        env: dict[str, str],
    ) -> None:
        self.logger.info(f"using GIT_SSH to set credentials {credentials.display_name()}")
        key = credentials.private_keys[0]
        if not key.endswith("\n"):
            key += "\n"
        key_file = temp_files.create("ssh", ".key", key, read_only=True)

        passphrase = credentials.get_passphrase()
        if self.windows:
            askpass = temp_files.create(
                "pass", self.script_suffix, windows_passphrase_script(passphrase), executable=True
            )
        else:
            askpass = temp_files.create(
                "pass", self.script_suffix, unix_passphrase_script(passphrase), executable=True
            )

        # A user in the URL wins over the one stored with the key.
        user = (url.user if url is not None and url.user else None) or credentials.username
        if self.windows:
            wrapper = windows_ssh_wrapper(str(key_file), user, ssh_options)
        else:
            wrapper = unix_ssh_wrapper(str(key_file), user, ssh_options)
        ssh = temp_files.create("ssh", self.script_suffix, wrapper, executable=True)

        env["GIT_SSH"] = str(ssh)
        env["GIT_SSH_VARIANT"] = "ssh"
        env["SSH_ASKPASS"] = str(askpass)
        if "DISPLAY" not in self.base_env:
            env["DISPLAY"] = ":"

    def _add_username_password(
        self,
        temp_files: ScopedTempFiles,
        credentials: UsernamePasswordCredentials,
        env: dict[str, str],
    ) -> None:
        self.logger.info(f"using GIT_ASKPASS to set credentials {credentials.display_name()}")
        if self.windows:
            script = windows_askpass_script(credentials.username, credentials.get_password())
        else:
            script = unix_askpass_script(credentials.username, credentials.get_password())
        askpass = temp_files.create("pass", self.script_suffix, script, executable=True)
        env["GIT_ASKPASS"] = str(askpass)
        env["SSH_ASKPASS"] = str(askpass)
