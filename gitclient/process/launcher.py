# gitclient/process/launcher.py

"""
Child process execution with a bounded wait.

``ProcessLauncher.launch`` runs one command, captures stdout and stderr
separately and waits at most ``timeout`` seconds. A process that outlives
its timeout is killed together with everything it started and is
reported as ``GitTimeoutError``; a non-zero exit status is reported as
``ProcessFailedError``. Nothing is retried.
"""

from dataclasses import dataclass, field
import logging
import os
import signal
import subprocess
import sys

from ..config.settings import get_default_timeout
from ..core.exceptions import GitTimeoutError, ProcessFailedError
from ..utils import redact_url_credentials

# Upper bound on collecting output once a timed out process tree is killed.
DRAIN_TIMEOUT_SECONDS = 5


@dataclass
class ProcessResult:
    """Outcome of one finished child process."""

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass
class ProcessRequest:
    """Everything needed to start one child process."""

    args: list[str]
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout: int | None = None
    stdin: str | None = None
    new_session: bool = False


def describe_command(args: list[str]) -> str:
    """Printable command line with credentials in URLs redacted."""
    return redact_url_credentials(" ".join(str(arg) for arg in args))


def _process_group_options(new_session: bool) -> dict:
    """Popen options that give the child its own process group."""
    if os.name != "posix":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    if new_session or sys.version_info < (3, 11):
        return {"start_new_session": True}
    return {"process_group": 0}


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class ProcessLauncher:
    """Runs commands as child processes and logs every invocation."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def launch(
        self,
        args: list[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        stdin: str | None = None,
        check: bool = True,
        new_session: bool = False,
    ) -> ProcessResult:
        """
        Run ``args`` and wait for it to finish.

        Args:
            args: Executable followed by its arguments.
            cwd: Working directory of the child.
            env: Variables overlaid on the current environment.
            timeout: Seconds to wait; the process-wide default when None.
            stdin: Text written to the child's standard input.
            check: Raise ``ProcessFailedError`` on a non-zero exit status.
            new_session: Detach the child from the controlling terminal.

        Returns:
            The captured result.

        Raises:
            GitTimeoutError: If the child ran longer than ``timeout``.
            ProcessFailedError: If the child could not start, or exited
                non-zero while ``check`` is set.
        """
        request = ProcessRequest(
            args=[str(arg) for arg in args],
            cwd=cwd,
            env=dict(env or {}),
            timeout=timeout if timeout is not None else get_default_timeout(),
            stdin=stdin,
            new_session=new_session,
        )
        return self.run(request, check=check)

    def run(self, request: ProcessRequest, check: bool = True) -> ProcessResult:
        """Run a prepared request; see ``launch``."""
        command = describe_command(request.args)
        self.logger.info(f" > {command} # timeout={request.timeout}")

        full_env = os.environ.copy()
        full_env.update(request.env)

        try:
            proc = subprocess.Popen(
                request.args,
                cwd=request.cwd,
                env=full_env,
                stdin=subprocess.PIPE if request.stdin is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **_process_group_options(request.new_session),
            )
        except OSError as e:
            raise ProcessFailedError(
                f"Error performing command: {command}",
                args=request.args,
                original_error=e,
            ) from e

        input_data = request.stdin.encode("utf-8") if request.stdin is not None else None
        try:
            out, err = proc.communicate(input=input_data, timeout=request.timeout)
        except subprocess.TimeoutExpired as e:
            self._kill_tree(proc)
            out, err = self._drain(proc)
            self.logger.warning(f"Killed {command} after {request.timeout} seconds")
            raise GitTimeoutError(
                f'Command "{command}" timed out after {request.timeout} seconds',
                args=request.args,
                timeout=request.timeout,
                stdout=_decode(out),
                stderr=_decode(err),
            ) from e

        result = ProcessResult(
            args=request.args,
            exit_code=proc.returncode,
            stdout=_decode(out),
            stderr=_decode(err),
        )
        if check and not result.succeeded:
            raise ProcessFailedError(
                f'Command "{command}" returned status code {result.exit_code}:\n'
                f"stdout: {redact_url_credentials(result.stdout)}\n"
                f"stderr: {redact_url_credentials(result.stderr)}",
                args=request.args,
                exit_code=result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    def _kill_tree(self, proc: subprocess.Popen) -> None:
        """Kill ``proc`` and every process in its group."""
        if os.name == "posix":
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except OSError as e:
                self.logger.debug(f"Cannot kill process group {proc.pid}: {e}")
        else:
            subprocess.run(
                ["taskkill", "/T", "/F", "/PID", str(proc.pid)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        proc.kill()

    def _drain(self, proc: subprocess.Popen) -> tuple[bytes | None, bytes | None]:
        """Collect what a killed process wrote without waiting on stray pipe holders."""
        try:
            return proc.communicate(timeout=DRAIN_TIMEOUT_SECONDS)
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Output of process {proc.pid} still open after kill, discarding it")
            for stream in (proc.stdout, proc.stderr):
                if stream is not None:
                    stream.close()
            proc.wait()
            return None, None
