from __future__ import annotations

from pathlib import Path

import pytest

from audio_relay.common.config import (
    DEFAULT_ALLOWED_ORIGINS,
    ConfigError,
    RelayConfig,
    load_config,
)


def test_defaults_from_empty_env() -> None:
    config = load_config({})
    assert config == RelayConfig()
    assert config.port == 3001
    assert config.has_api_token is False
    assert config.debug_enabled is False
    assert config.allowed_origins == DEFAULT_ALLOWED_ORIGINS


def test_env_values_are_read() -> None:
    config = load_config(
        {
            "REPLICATE_API_KEY": "r8_abc",
            "PORT": "8080",
            "APP_ENV": "production",
            "RELAY_DEBUG": "Yes",
            "UPSTREAM_TIMEOUT": "30",
        }
    )
    assert config.api_token == "r8_abc"
    assert config.port == 8080
    assert config.environment == "production"
    assert config.debug_enabled is True
    assert config.request_timeout == 30.0


def test_bad_port_is_config_error() -> None:
    with pytest.raises(ConfigError, match="PORT"):
        load_config({"PORT": "eighty"})


def test_config_is_immutable() -> None:
    config = RelayConfig()
    with pytest.raises(AttributeError):
        config.port = 1  # type: ignore[misc]


def test_yaml_overlay(tmp_path: Path) -> None:
    path = tmp_path / "relay.yaml"
    path.write_text(
        "allowed_origins:\n  - https://app.example.com\n"
        "hosting_suffix: .netlify.app\n"
        "unknown_key: ignored\n",
        encoding="utf-8",
    )

    config = load_config({"RELAY_CONFIG": str(path), "PORT": "4000"})

    assert config.allowed_origins == ("https://app.example.com",)
    assert config.hosting_suffix == ".netlify.app"
    assert config.port == 4000


def test_yaml_overlay_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "relay.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config({"RELAY_CONFIG": str(path)})
