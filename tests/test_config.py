"""
Tests for configuration loading and validation.

Ensures that config.yaml is validated, environment variables override the
file, and the connection settings handed to the supervisor are complete.
"""

import pytest
import yaml

from resume_optimizer.config import DEFAULT_FALLBACK_URI, Config, get_config, reset_config


def _write_config(tmp_path, data):
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(data, f)
    return config_path


def test_missing_config_file_uses_defaults(make_config):
    """Test that a missing config.yaml is not an error."""
    config = make_config()

    assert config.port == 5000
    assert config.ai_provider == "gemini"
    assert config.ai_timeout == 60.0
    assert config.mongo_uri is None
    assert config.mongo_fallback_uri == DEFAULT_FALLBACK_URI


def test_environment_overrides_yaml(tmp_path):
    """Test that env vars win over config.yaml values."""
    config_path = _write_config(
        tmp_path,
        {"database": {"uri": "mongodb://yaml-host/jobs"}, "server": {"port": 8000}},
    )

    config = Config(
        config_path=config_path,
        environ={"MONGO_URI": "mongodb://env-host/jobs", "PORT": "9000"},
    )

    assert config.mongo_uri == "mongodb://env-host/jobs"
    assert config.port == 9000


def test_yaml_used_when_env_missing(tmp_path):
    """Test that config.yaml values apply when no env var is set."""
    config_path = _write_config(
        tmp_path, {"database": {"uri": "mongodb://yaml-host/jobs"}, "ai": {"provider": "claude"}}
    )

    config = Config(config_path=config_path, environ={})

    assert config.mongo_uri == "mongodb://yaml-host/jobs"
    assert config.ai_provider == "claude"


def test_negative_retries_rejected(tmp_path):
    """Test that database.max_retries must not be negative."""
    config_path = _write_config(tmp_path, {"database": {"max_retries": -1}})

    with pytest.raises(ValueError, match="max_retries must be >= 0"):
        Config(config_path=config_path, environ={})


def test_negative_interval_rejected(tmp_path):
    """Test that database.retry_interval must not be negative."""
    config_path = _write_config(tmp_path, {"database": {"retry_interval": -0.5}})

    with pytest.raises(ValueError, match="retry_interval must be >= 0"):
        Config(config_path=config_path, environ={})


def test_unknown_ai_provider_rejected(tmp_path):
    """Test that only supported providers are accepted."""
    with pytest.raises(ValueError, match="Unknown AI provider"):
        Config(config_path=tmp_path / "config.yaml", environ={"AI_PROVIDER": "openai"})


def test_section_must_be_mapping(tmp_path):
    """Test that a scalar section is rejected."""
    config_path = _write_config(tmp_path, {"database": "mongodb://localhost"})

    with pytest.raises(ValueError, match="'database' must be a mapping"):
        Config(config_path=config_path, environ={})


def test_node_env_is_honored_when_flask_env_missing(tmp_path):
    """Test the NODE_ENV fallback for the deployment environment."""
    config = Config(config_path=tmp_path / "config.yaml", environ={"NODE_ENV": "production"})

    assert config.environment == "production"
    assert not config.is_development


def test_flask_env_wins_over_node_env(tmp_path):
    config = Config(
        config_path=tmp_path / "config.yaml",
        environ={"FLASK_ENV": "development", "NODE_ENV": "production"},
    )

    assert config.is_development


def test_connection_settings_defaults(make_config):
    """Test the retry bounds and client options passed to the supervisor."""
    settings = make_config(MONGO_URI="mongodb+srv://u:p@cluster.example.net/jobs").to_connection_settings()

    assert settings.primary_uri == "mongodb+srv://u:p@cluster.example.net/jobs"
    assert settings.fallback_uri == DEFAULT_FALLBACK_URI
    assert settings.max_retries == 5
    assert settings.retry_interval == 2.0
    assert settings.reconnect_delay == 2.0
    assert settings.client_options["serverSelectionTimeoutMS"] == 10000
    assert settings.client_options["socketTimeoutMS"] == 45000


def test_connection_settings_merge_client_options(tmp_path):
    """Test that YAML client_options extend the defaults instead of replacing them."""
    config_path = _write_config(
        tmp_path,
        {"database": {"max_retries": 2, "client_options": {"socketTimeoutMS": 1000, "appname": "jobs"}}},
    )

    settings = Config(config_path=config_path, environ={}).to_connection_settings()

    assert settings.max_retries == 2
    assert settings.client_options["socketTimeoutMS"] == 1000
    assert settings.client_options["appname"] == "jobs"
    assert settings.client_options["connectTimeoutMS"] == 10000


def test_to_dict_has_no_secrets(make_config):
    config = make_config(GEMINI_API_KEY="secret-key", AI_TIMEOUT_SECONDS="15")

    assert config.to_dict() == {
        "ai": {"provider": "gemini", "model": None, "timeout_seconds": 15.0}
    }


def test_get_config_is_cached(tmp_path):
    config_path = _write_config(tmp_path, {"server": {"port": 7000}})

    first = get_config(config_path)
    assert get_config() is first

    reset_config()
    assert get_config() is not first
