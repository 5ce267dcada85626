"""Tests for configuration loading, layering and validation."""
import json
import os
import shutil
import tempfile
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from cloudsql_provider.config import ConfigurationManager, load_config_file
from cloudsql_provider.config.schemas import (
    AppConfig,
    LoggingConfig,
    ProviderConfig,
    RetryConfig,
    validate_config,
)
from cloudsql_provider.domain.core.exceptions import ConfigurationError


@pytest.mark.unit
class TestConfigurationManager:
    """Test configuration sources and their precedence."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "cloudsqlprov_config.json")

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def create_config_file(self, config_data, path=None):
        """Create a temporary configuration file."""
        path = path or self.config_path
        with open(path, 'w') as f:
            json.dump(config_data, f, indent=2)
        return path

    def test_defaults(self):
        config = ConfigurationManager().app_config

        assert config.provider.project is None
        assert config.provider.api_version == "v1beta4"
        assert config.retry.timeout_seconds == 1200
        assert config.logging.level == "INFO"
        assert config.logging.destination == "console"

    def test_file_values_override_defaults(self):
        config_path = self.create_config_file({
            "provider": {"project": "file-project"},
            "retry": {"timeout_seconds": 60, "max_attempts": 4},
        })

        config = ConfigurationManager(config_path).app_config

        assert config.provider.project == "file-project"
        assert config.provider.api_version == "v1beta4"
        assert config.retry.timeout_seconds == 60
        assert config.retry.max_attempts == 4

    def test_yaml_file(self):
        yaml_path = os.path.join(self.temp_dir, "cloudsqlprov_config.yml")
        with open(yaml_path, 'w') as f:
            f.write("provider:\n  project: yaml-project\nlogging:\n  level: debug\n")

        config = ConfigurationManager(yaml_path).app_config

        assert config.provider.project == "yaml-project"
        assert config.logging.level == "DEBUG"

    def test_file_found_in_confdir(self):
        self.create_config_file({"provider": {"project": "confdir-project"}})

        with patch.dict(os.environ, {"CLOUDSQL_PROVIDER_CONFDIR": self.temp_dir}):
            config = ConfigurationManager().app_config

        assert config.provider.project == "confdir-project"

    def test_environment_overrides_file(self):
        config_path = self.create_config_file({"provider": {"project": "file-project"}})

        with patch.dict(os.environ, {"GOOGLE_CLOUD_PROJECT": "env-project",
                                     "CLOUDSQL_PROVIDER_READ_TIMEOUT": "30"}):
            config = ConfigurationManager(config_path).app_config

        assert config.provider.project == "env-project"
        assert config.retry.timeout_seconds == 30

    def test_first_project_variable_wins(self):
        with patch.dict(os.environ, {"GOOGLE_PROJECT": "first-project",
                                     "CLOUDSDK_CORE_PROJECT": "third-project"}):
            config = ConfigurationManager().app_config

        assert config.provider.project == "first-project"

    def test_explicit_overrides_win(self):
        with patch.dict(os.environ, {"CLOUDSQL_PROVIDER_LOG_LEVEL": "WARNING"}):
            manager = ConfigurationManager(overrides={"logging": {"level": "ERROR"}})
            assert manager.app_config.logging.level == "ERROR"

    def test_log_level_from_environment(self):
        with patch.dict(os.environ, {"CLOUDSQL_PROVIDER_LOG_LEVEL": "WARNING"}):
            assert ConfigurationManager().app_config.logging.level == "WARNING"

    def test_missing_explicit_file(self):
        manager = ConfigurationManager(os.path.join(self.temp_dir, "missing.json"))

        with pytest.raises(ConfigurationError) as exc_info:
            manager.get_config()
        assert "not found" in str(exc_info.value)

    @pytest.mark.parametrize("section,values,field", [
        ("provider", {"project": "Bad_Project"}, "provider.project"),
        ("provider", {"api_version": "v2"}, "provider.api_version"),
        ("retry", {"initial_interval": 60, "max_interval": 30}, "retry"),
        ("logging", {"destination": "syslog"}, "logging.destination"),
    ])
    def test_invalid_values(self, section, values, field):
        config_path = self.create_config_file({section: values})

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationManager(config_path).get_config()

        assert "Configuration validation failed" in str(exc_info.value)
        assert field in str(exc_info.value)

    def test_get_typed(self):
        manager = ConfigurationManager(overrides={"provider": {"project": "typed-project"}})

        assert manager.get_typed(ProviderConfig).project == "typed-project"
        assert isinstance(manager.get_typed(RetryConfig), RetryConfig)
        assert isinstance(manager.get_typed(LoggingConfig), LoggingConfig)
        with pytest.raises(ValueError):
            manager.get_typed(dict)

    def test_reload_picks_up_changes(self):
        config_path = self.create_config_file({"provider": {"project": "first-project"}})
        manager = ConfigurationManager(config_path)
        assert manager.app_config.provider.project == "first-project"

        self.create_config_file({"provider": {"project": "second-project"}})
        assert manager.app_config.provider.project == "first-project"

        manager.reload()
        assert manager.app_config.provider.project == "second-project"

    def test_get_config_returns_plain_dict(self):
        config = ConfigurationManager().get_config()

        assert config["provider"]["api_version"] == "v1beta4"
        assert config["retry"]["max_attempts"] is None


@pytest.mark.unit
class TestLoadConfigFile:
    """Test reading configuration files."""

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            load_config_file(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config_file(str(path))
        assert "mapping" in str(exc_info.value)

    def test_empty_yaml_is_empty_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config_file(str(path)) == {}


@pytest.mark.unit
class TestValidateConfig:
    """Test schema validation of merged configuration data."""

    def test_valid_sections(self):
        config = validate_config({"provider": {"project": "my-project-123"},
                                  "retry": {"timeout_seconds": 45}})

        assert isinstance(config, AppConfig)
        assert config.provider.project == "my-project-123"
        assert config.retry.timeout_seconds == 45

    def test_invalid_section(self):
        with pytest.raises(PydanticValidationError):
            validate_config({"provider": {"num_retries": 11}})
