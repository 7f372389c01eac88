# gitclient/config/loader.py

"""
YAML configuration loader and writer.
"""

import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
import yaml

from .errors import ConfigFileError

T = TypeVar("T", bound=BaseModel)


class ConfigLoader:
    """Loads pydantic models from YAML files and writes them back."""

    def __init__(self, config_dir: str | Path | None = None) -> None:
        self.config_dir = Path(config_dir) if config_dir is not None else None
        self.logger = logging.getLogger(__name__)

    def _resolve(self, filename: str | Path) -> Path:
        path = Path(filename)
        if self.config_dir is not None and not path.is_absolute():
            path = self.config_dir / path
        return path

    def load_yaml(self, filename: str | Path) -> dict[str, Any]:
        """Load a YAML mapping; a missing or empty file yields an empty dict."""
        config_path = self._resolve(filename)
        if not config_path.exists():
            return {}

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(
                f"Failed to load YAML file {filename}: {e}", str(config_path), e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileError(
                f"Top-level YAML structure must be a mapping (dict), "
                f"got {type(data).__name__}",
                str(config_path),
            )
        return data

    def load(self, filename: str | Path, config_class: type[T]) -> T:
        """
        Load a configuration model from a YAML file.

        Args:
            filename: YAML file, relative to ``config_dir`` when one is set
            config_class: Pydantic model class to validate the data with

        Returns:
            Loaded configuration instance; defaults when the file is missing
        """
        data = self.load_yaml(filename)
        try:
            return config_class(**data)
        except ValidationError as e:
            raise ConfigFileError(
                f"Invalid configuration in {filename}", str(self._resolve(filename)), e
            ) from e

    def save(self, filename: str | Path, config: BaseModel) -> Path:
        """Write a configuration model to a YAML file, creating parent directories."""
        config_path = self._resolve(filename)
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(config.model_dump(mode="json"), f, sort_keys=True)
        except OSError as e:
            raise ConfigFileError(
                f"Failed to write YAML file {filename}: {e}", str(config_path), e
            ) from e

        self.logger.debug(f"Saved configuration to {config_path}")
        return config_path
