# gitclient/process/tempfiles.py

"""
Scoped temporary files for credential material.

Helper scripts, key files and known_hosts files handed to git live only
for the duration of one command. ``ScopedTempFiles`` creates them next to
the workspace (``<workspace>@tmp``) when that path is safe to pass through
git, ssh and the shell, and in the system temporary directory otherwise.
Every file it created is deleted when the ``with`` block exits, whether
the block succeeded or raised.
"""

import logging
import os
from pathlib import Path
import stat
import tempfile
import time

from ..core.exceptions import CredentialMaterializationError

DELETE_RETRY_DELAY_SECONDS = 0.1

# ssh expands % tokens on every platform.
_UNSAFE_EVERYWHERE = "%"
# Break GIT_SSH and SSH_ASKPASS argument passing on Windows.
_UNSAFE_ON_WINDOWS = " ()|?*"
# Backquote triggers shell command substitution on Unix.
_UNSAFE_ON_UNIX = "`"


def is_windows() -> bool:
    return os.name == "nt"


def is_safe_temp_path(path: str, windows: bool | None = None) -> bool:
    """
    True when ``path`` may hold credential helper files.

    Args:
        path: Absolute directory path.
        windows: Platform to check for; the current platform when None.
    """
    windows = is_windows() if windows is None else windows
    unsafe = _UNSAFE_EVERYWHERE + (_UNSAFE_ON_WINDOWS if windows else _UNSAFE_ON_UNIX)
    return not any(ch in path for ch in unsafe)


def workspace_temp_directory(workspace: str | os.PathLike) -> Path:
    """``<workspace>@tmp``, the sibling directory used for workspace temp files."""
    return Path(str(Path(workspace).absolute()) + "@tmp")


class ScopedTempFiles:
    """
    Creates temporary files and deletes all of them on exit.

    Example:
        with ScopedTempFiles(workspace, "gitclient") as scope:
            script = scope.create("askpass", ".sh", content, executable=True)
            ...
    """

    def __init__(
        self,
        workspace: str | os.PathLike | None,
        project_name: str = "gitclient",
        system_temp_directory: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.workspace = Path(workspace) if workspace is not None else None
        self.project_name = project_name
        self.system_temp_directory = system_temp_directory or tempfile.gettempdir()
        self.logger = logger or logging.getLogger(__name__)
        self.files: list[Path] = []

    def __enter__(self) -> "ScopedTempFiles":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.cleanup()
        except CredentialMaterializationError as e:
            if exc is None:
                raise
            self.logger.error(f"{e.message} while handling {exc_type.__name__}")

    def directory(self) -> str:
        """Directory the next temp file goes to."""
        if self.workspace is None:
            return self.system_temp_directory
        workspace_tmp = workspace_temp_directory(self.workspace)
        if not is_safe_temp_path(str(workspace_tmp)):
            return self.system_temp_directory
        try:
            workspace_tmp.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.debug(f"Cannot create {workspace_tmp}: {e}")
            return self.system_temp_directory
        return str(workspace_tmp)

    def create(
        self,
        purpose: str,
        suffix: str = "",
        content: str = "",
        executable: bool = False,
        read_only: bool = False,
    ) -> Path:
        """
        Create a file readable only by the current user and track it for deletion.

        Args:
            purpose: Name part after the project prefix (``ssh``, ``askpass``).
            suffix: File name suffix.
            content: Text written to the file.
            executable: Make the file executable by its owner.
            read_only: Drop write permission once written.

        Raises:
            CredentialMaterializationError: If the file cannot be created,
                written or permissioned.
        """
        prefix = f"{self.project_name}-{purpose}"
        try:
            fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=self.directory())
        except OSError as e:
            raise CredentialMaterializationError(
                f"Could not create temporary file for {purpose}", original_error=e
            ) from e

        path = Path(name)
        self.files.append(path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            mode = stat.S_IRUSR
            if not read_only:
                mode |= stat.S_IWUSR
            if executable:
                mode |= stat.S_IXUSR
            os.chmod(path, mode)
        except OSError as e:
            raise CredentialMaterializationError(
                f"Could not write temporary file {path}", original_error=e
            ) from e
        return path

    def cleanup(self) -> None:
        """
        Delete every tracked file.

        A failed delete is retried once after a short delay.

        Raises:
            CredentialMaterializationError: If a file still exists after the retry.
        """
        failed: list[Path] = []
        while self.files:
            path = self.files.pop()
            if not self._delete(path):
                failed.append(path)
        if failed:
            names = ", ".join(str(p) for p in failed)
            raise CredentialMaterializationError(
                f"Could not delete temporary files: {names}",
                details={"files": [str(p) for p in failed]},
            )

    def _delete(self, path: Path) -> bool:
        for attempt in range(2):
            try:
                if path.exists():
                    # Read-only files cannot be removed on Windows.
                    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)
                path.unlink(missing_ok=True)
                return True
            except OSError as e:
                if attempt == 0:
                    self.logger.debug(f"Retrying delete of {path}: {e}")
                    time.sleep(DELETE_RETRY_DELAY_SECONDS)
                else:
                    self.logger.warning(f"temp file {path} not deleted: {e}")
        return not path.exists()
