# gitclient/config/settings.py

"""
Client-wide settings and the process-wide default timeout.

``GitClientSettings`` is read from ``GITCLIENT_*`` environment variables
(or a ``.env`` file). The default command timeout is process-wide state:
it is read by every command execution and changed only through
``set_default_timeout``.
"""

import logging
import os
from pathlib import Path
import tempfile
import threading

from pydantic import Field, field_validator

from ..core.exceptions import ConfigurationError
from .base import BaseConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 600


class GitClientSettings(BaseConfig):
    """Settings shared by every client created in this process."""

    git_executable: str = Field(
        default="git", description="Name or path of the command line git executable"
    )
    default_timeout: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        description="Timeout in seconds for git commands that do not set one",
    )
    prompt_for_authentication: bool = Field(
        default=False,
        description="Let command line git prompt on the terminal for credentials",
    )
    use_setsid: bool = Field(
        default=False,
        description="Detach git from the controlling terminal when ssh keys are used",
    )
    temp_directory: str | None = Field(
        default=None, description="Override of the system temporary directory"
    )
    project_name: str = Field(
        default="gitclient", description="Prefix of temporary credential file names"
    )
    known_hosts_file: str = Field(
        default_factory=lambda: str(Path.home() / ".ssh" / "known_hosts"),
        description="known_hosts file used by host key verification",
    )
    host_key_config_file: str | None = Field(
        default=None,
        description="YAML file persisting the active host key verification strategy",
    )

    @field_validator("default_timeout")
    @classmethod
    def validate_default_timeout(cls, v: int) -> int:
        """Validate the default timeout."""
        if v <= 0:
            raise ValueError("default_timeout must be a positive number of seconds")
        return v

    def system_temp_directory(self) -> str:
        """Return the directory used when the workspace is unsafe for temp files."""
        if self.temp_directory:
            return os.path.abspath(self.temp_directory)
        return tempfile.gettempdir()


_settings: GitClientSettings | None = None
_settings_lock = threading.Lock()
_default_timeout: int | None = None


def get_settings() -> GitClientSettings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = GitClientSettings()
        return _settings


def set_settings(settings: GitClientSettings | None) -> None:
    """Replace the process-wide settings; ``None`` reloads from the environment."""
    global _settings, _default_timeout
    with _settings_lock:
        _settings = settings
        _default_timeout = None


def get_default_timeout() -> int:
    """Get the timeout applied to commands that do not set one."""
    global _default_timeout
    timeout = _default_timeout
    if timeout is not None:
        return timeout
    settings = get_settings()
    with _settings_lock:
        if _default_timeout is None:
            _default_timeout = settings.default_timeout
        return _default_timeout


def set_default_timeout(timeout: int) -> None:
    """
    Set the process-wide default timeout.

    Raises:
        ConfigurationError: If the timeout is not a positive integer.
    """
    global _default_timeout
    if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout <= 0:
        raise ConfigurationError(f"Invalid default timeout: {timeout!r}")
    with _settings_lock:
        _default_timeout = timeout
    logger.debug(f"Default git timeout set to {timeout}")
