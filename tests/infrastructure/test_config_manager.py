"""Tests for the configuration manager.

These tests verify that:
1. Dataset configuration is read from environment variables and .env files
2. JSON configuration files are loaded and validated
3. Invalid settings are rejected by the Pydantic model
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from patient_directory.infrastructure.config_manager import (
    DEFAULT_DATA_FILE,
    ConfigManager,
    DataSourceConfig,
    get_data_source_config,
)

ENV_VARS = ("PD_DATA_FILE", "PD_DATA_ENCODING", "PD_CACHE_ENABLED")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Clear dataset variables and run from an empty directory.

    Each variable is set before being deleted so that monkeypatch restores
    the original state, including values a .env file might have added.
    """
    for name in ENV_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestDataSourceConfig:
    """Test the DataSourceConfig model."""

    def test_defaults(self):
        config = DataSourceConfig()

        assert config.data_file == DEFAULT_DATA_FILE
        assert config.encoding == "utf-8"
        assert config.cache_enabled is True

    def test_data_path(self):
        config = DataSourceConfig(data_file="data/patients.json")
        assert config.data_path.name == "patients.json"

    def test_data_file_is_stripped(self):
        assert DataSourceConfig(data_file="  data.json ").data_file == "data.json"

    def test_empty_data_file_rejected(self):
        with pytest.raises(PydanticValidationError):
            DataSourceConfig(data_file="   ")

    def test_unknown_encoding_rejected(self):
        with pytest.raises(PydanticValidationError):
            DataSourceConfig(encoding="not-a-codec")


class TestConfigManagerFromEnvironment:
    """Test loading configuration from the environment."""

    def test_defaults_without_environment(self, clean_env):
        config = ConfigManager.from_environment().get_data_source_config()

        assert config.data_file == DEFAULT_DATA_FILE
        assert config.encoding == "utf-8"
        assert config.cache_enabled is True

    def test_environment_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("PD_DATA_FILE", "/srv/data/patients.json")
        monkeypatch.setenv("PD_DATA_ENCODING", "latin-1")
        monkeypatch.setenv("PD_CACHE_ENABLED", "false")

        config = ConfigManager.from_environment().get_data_source_config()

        assert config.data_file == "/srv/data/patients.json"
        assert config.encoding == "latin-1"
        assert config.cache_enabled is False

    def test_dotenv_file_is_loaded(self, clean_env):
        (clean_env / ".env").write_text("PD_DATA_FILE=from_dotenv.json\n")

        config = ConfigManager.from_environment().get_data_source_config()

        assert config.data_file == "from_dotenv.json"

    def test_environment_wins_over_dotenv(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("PD_DATA_FILE=from_dotenv.json\n")
        monkeypatch.setenv("PD_DATA_FILE", "from_env.json")

        config = ConfigManager.from_environment().get_data_source_config()

        assert config.data_file == "from_env.json"

    def test_convenience_function(self, clean_env, monkeypatch):
        monkeypatch.setenv("PD_DATA_FILE", "convenience.json")

        assert get_data_source_config().data_file == "convenience.json"


class TestConfigManagerFromFile:
    """Test loading configuration from a JSON file."""

    def test_valid_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"data_source": {"data_file": "custom.json", "cache_enabled": False}}))

        config = ConfigManager.from_file(str(path)).get_data_source_config()

        assert config.data_file == "custom.json"
        assert config.cache_enabled is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager.from_file(str(tmp_path / "absent.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            ConfigManager.from_file(str(path))

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError):
            ConfigManager.from_file(str(path))

    def test_missing_section_uses_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")

        config = ConfigManager.from_file(str(path)).get_data_source_config()

        assert config.data_file == DEFAULT_DATA_FILE


class TestConfigManagerGet:
    """Test dotted key lookup."""

    def test_dotted_lookup(self):
        manager = ConfigManager({"data_source": {"data_file": "x.json"}})

        assert manager.get("data_source.data_file") == "x.json"

    def test_missing_key_returns_default(self):
        manager = ConfigManager({"data_source": {}})

        assert manager.get("data_source.encoding", "utf-8") == "utf-8"
        assert manager.get("data_source.data_file.deeper", "fallback") == "fallback"

    def test_config_is_cached(self):
        manager = ConfigManager({})

        assert manager.get_data_source_config() is manager.get_data_source_config()
