"""Application Settings and Configuration.

This module provides application-wide settings that combine the dataset
configuration from the configuration manager with API and logging defaults
read from the environment.
"""

import os
from typing import Optional

from patient_directory import __version__
from patient_directory.infrastructure.config_manager import (
    DataSourceConfig,
    get_data_source_config,
)

# Application metadata
APP_NAME = "Patient Directory"
APP_VERSION = __version__

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000


class Settings:
    """Application settings loaded from configuration manager and environment."""

    def __init__(self):
        """Initialize settings from environment."""
        self._data_source_config: Optional[DataSourceConfig] = None

        self.app_name = os.getenv("PD_APP_NAME", APP_NAME)
        self.app_version = APP_VERSION

        # API server
        self.api_host = os.getenv("PD_API_HOST", DEFAULT_API_HOST)
        self.api_port = int(os.getenv("PD_API_PORT", str(DEFAULT_API_PORT)))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.json_logs = os.getenv("JSON_LOGS", "false").lower() == "true"

    @property
    def data_source_config(self) -> DataSourceConfig:
        """Get dataset source configuration, loaded lazily on first access."""
        if self._data_source_config is None:
            self._data_source_config = get_data_source_config()
        return self._data_source_config


# Global settings instance
settings = Settings()
