"""Configuration Manager for the patient dataset source.

This module loads the settings that tell the Record Source where the
dataset lives and how to read it.

Architecture:
    - Infrastructure layer isolated from the domain
    - Supports environment variables (with optional .env file) and JSON files
    - Type-safe configuration using Pydantic models
    - Fail-fast validation
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = os.path.join("lib", "MOCK_DATA.json")


class DataSourceConfig(BaseModel):
    """Dataset source configuration.

    Parameters:
        data_file: Path to the JSON dataset, relative paths resolve against the working directory
        encoding: Text encoding of the dataset file
        cache_enabled: Reuse the parsed snapshot until the file changes
    """

    data_file: str = Field(default=DEFAULT_DATA_FILE, description="Path to the JSON dataset")
    encoding: str = Field(default="utf-8", description="Dataset file encoding")
    cache_enabled: bool = Field(default=True, description="Cache the parsed dataset between requests")

    @field_validator("data_file")
    @classmethod
    def validate_data_file(cls, v: str) -> str:
        """Reject an empty data file path."""
        if not v or not v.strip():
            raise ValueError("data_file must not be empty")
        return v.strip()

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate that the encoding is known to Python."""
        import codecs

        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    @property
    def data_path(self) -> Path:
        """The dataset path as a Path object."""
        return Path(self.data_file)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class ConfigManager:
    """Configuration manager for the dataset source and related settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        source_config = config.get_data_source_config()

        # Load from file
        config = ConfigManager.from_file("config.json")
        source_config = config.get_data_source_config()
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary
        """
        self._config_data = config_data
        self._data_source_config: Optional[DataSourceConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - PD_DATA_FILE: Path to the JSON dataset
            - PD_DATA_ENCODING: Dataset file encoding
            - PD_CACHE_ENABLED: "true" to cache the parsed dataset

        A ``.env`` file in the working directory is loaded first if present.
        Variables already set in the environment take precedence over it.

        Returns:
            ConfigManager instance
        """
        env_path = Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        config_data = {
            "data_source": {
                "data_file": os.getenv("PD_DATA_FILE", DEFAULT_DATA_FILE),
                "encoding": os.getenv("PD_DATA_ENCODING", "utf-8"),
                "cache_enabled": _env_flag("PD_CACHE_ENABLED", "true"),
            }
        }

        return cls(config_data)

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {str(e)}")

        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a JSON object")

        return cls(config_data)

    def get_data_source_config(self) -> DataSourceConfig:
        """Get dataset source configuration.

        Returns:
            DataSourceConfig instance
        """
        if self._data_source_config is None:
            source_config_data = self._config_data.get("data_source", {})
            self._data_source_config = DataSourceConfig(**source_config_data)

        return self._data_source_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "data_source.data_file")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config_data

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


# ============================================================================
# Convenience Functions
# ============================================================================

def get_data_source_config() -> DataSourceConfig:
    """Convenience function to get dataset source configuration from environment.

    Returns:
        DataSourceConfig instance
    """
    config_manager = ConfigManager.from_environment()
    return config_manager.get_data_source_config()
