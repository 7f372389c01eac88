# gitclient/config/errors.py

"""
Error types for configuration management.
"""

from ..core.exceptions import ConfigurationError


class ConfigError(ConfigurationError):
    """Base configuration error."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(
            message,
            details={"config_file": config_file},
            original_error=original_error,
        )
        self.config_file = config_file

    def __str__(self) -> str:
        base_msg = self.message
        if self.config_file:
            base_msg = f"{base_msg} (file: {self.config_file})"
        if self.original_error:
            base_msg = f"{base_msg} - Original error: {self.original_error}"
        return base_msg


class ConfigFileError(ConfigError):
    """Configuration file related errors."""

    pass
