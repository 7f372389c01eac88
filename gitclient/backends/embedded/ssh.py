# gitclient/backends/embedded/ssh.py

"""
SSH transport for the embedded backend.

dulwich runs the ``ssh`` executable for ssh remotes. The vendor below adds
the options of the active host key verification strategy and, for
private key credentials, the key file and the passphrase helper. Before
ssh is started, ``HostKeyVerifier`` reads the server keys with
``ssh-keyscan`` and hands them to the strategy, so a strategy that records
keys (accept first connection) does so before the handshake.
"""

import logging
import shlex
from typing import Callable

from dulwich.client import SubprocessSSHVendor

from ...core.exceptions import GitException, GitTimeoutError, ProcessFailedError
from ...process.launcher import ProcessLauncher
from ...verifier.known_hosts import host_key_name
from ...verifier.strategies import SshHostKeyVerificationStrategy

KEYSCAN_TIMEOUT_SECONDS = 30


def parse_keyscan_output(output: str) -> list[tuple[str, str]]:
    """``(key_type, key)`` pairs from ``ssh-keyscan`` output."""
    keys = []
    for line in output.splitlines():
        if not line.strip() or line.startswith("#"):
            continue
        fields = line.split()
        if len(fields) >= 3:
            keys.append((fields[1], fields[2]))
    return keys


class HostKeyVerifier:
    """Host key callback of the embedded ssh transport."""

    def __init__(
        self,
        strategy: SshHostKeyVerificationStrategy,
        logger: logging.Logger,
        launcher: ProcessLauncher | None = None,
        keyscan_executable: str = "ssh-keyscan",
    ) -> None:
        self.strategy = strategy
        self.logger = logger
        self.launcher = launcher or ProcessLauncher(logger)
        self.keyscan_executable = keyscan_executable

    def scan(self, host: str, port: int | None) -> list[tuple[str, str]]:
        args = [self.keyscan_executable]
        if port:
            args.extend(["-p", str(port)])
        args.append(host)
        try:
            result = self.launcher.launch(args, timeout=KEYSCAN_TIMEOUT_SECONDS, check=False)
        except (GitTimeoutError, ProcessFailedError) as e:
            raise GitException(
                f"Could not read the host key of {host_key_name(host, port)}",
                error_code="HOST_KEY_UNAVAILABLE",
                original_error=e,
            ) from e
        return parse_keyscan_output(result.stdout)

    def __call__(self, host: str, port: int | None) -> None:
        """
        Check the keys ``host`` presents.

        Raises:
            GitException: If the server offers no key, or the strategy
                accepts none of them.
        """
        if not self.strategy.checks_server_key:
            return
        name = host_key_name(host, port)
        keys = self.scan(host, port)
        if not keys:
            raise GitException(
                f"Could not read the host key of {name}",
                error_code="HOST_KEY_UNAVAILABLE",
                details={"host": name},
            )
        for key_type, key in keys:
            if self.strategy.verify_host_key(host, port, key_type, key, self.logger):
                return
        raise GitException(
            f"Host key for host {name} was not accepted.",
            error_code="HOST_KEY_REJECTED",
            details={"host": name},
        )


class VerifyingSSHVendor(SubprocessSSHVendor):
    """``SubprocessSSHVendor`` running ssh with fixed extra options."""

    def __init__(
        self,
        ssh_options: list[str],
        key_filename: str | None = None,
        askpass: str | None = None,
        ssh_executable: str = "ssh",
        host_key_check: Callable[[str, int | None], None] | None = None,
    ) -> None:
        super().__init__()
        self.ssh_options = list(ssh_options)
        self.key_filename = key_filename
        self.askpass = askpass
        self.ssh_executable = ssh_executable
        self.host_key_check = host_key_check

    def ssh_command(self) -> str:
        """Command line prefix handed to dulwich in place of plain ``ssh``."""
        parts = []
        if self.askpass:
            # ssh only asks SSH_ASKPASS for the passphrase when DISPLAY is set
            parts.extend(["env", f"SSH_ASKPASS={self.askpass}", "SSH_ASKPASS_REQUIRE=force", "DISPLAY=:"])
        parts.append(self.ssh_executable)
        parts.extend(self.ssh_options)
        return " ".join(shlex.quote(part) for part in parts)

    def run_command(
        self,
        host,
        command,
        username=None,
        port=None,
        password=None,
        key_filename=None,
        ssh_command=None,
        protocol_version=None,
    ):
        if self.host_key_check is not None:
            self.host_key_check(host, port)
        return super().run_command(
            host,
            command,
            username=username,
            port=port,
            password=password,
            key_filename=self.key_filename or key_filename,
            ssh_command=self.ssh_command(),
            protocol_version=protocol_version,
        )
