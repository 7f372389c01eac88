# gitclient/config/base.py

"""
Base configuration classes with environment support and schema versioning.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings and schema versioning."""

    model_config = SettingsConfigDict(
        env_prefix="GITCLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    schema_version: str = Field(
        default="1.0.0", description="Configuration schema version"
    )
    log_level: str = "INFO"

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        """Validate configuration schema version."""
        supported_versions = ["1.0.0"]
        if v not in supported_versions:
            raise ValueError(
                f"Unsupported schema version {v}. Supported: {supported_versions}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()
