"""Process configuration, read once at startup."""
from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

import yaml

DEFAULT_UPSTREAM_BASE_URL = "https://api.replicate.com"
DEFAULT_PORT = 3001
DEFAULT_HOSTING_SUFFIX = ".vercel.app"
DEFAULT_ALLOWED_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:5177",
    "https://musigenerator.vercel.app",
    "https://musigenerator-git-main-berezantevmihail-4730s-projects.vercel.app",
    "https://test2-neon-psi.vercel.app",
    "https://test2-ad1w.vercel.app",
)

_TRUTHY = {"1", "true", "yes", "on"}
_OVERLAY_KEYS = ("allowed_origins", "hosting_suffix", "upstream_base_url", "request_timeout")


class ConfigError(ValueError):
    """Raised when the environment or the YAML overlay is malformed."""


@dataclass(frozen=True)
class RelayConfig:
    api_token: str = ""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    environment: str = "development"
    debug_enabled: bool = False
    upstream_base_url: str = DEFAULT_UPSTREAM_BASE_URL
    request_timeout: float = 120.0
    log_level: str = "INFO"
    hosting_suffix: str = DEFAULT_HOSTING_SUFFIX
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)

    @property
    def has_api_token(self) -> bool:
        return bool(self.api_token)


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_overlay(path: str) -> dict[str, Any]:
    """
    Load the optional YAML overlay.

    Args:
        path: Path to a YAML mapping. Only the known keys are kept.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    overlay: dict[str, Any] = {}
    for key in _OVERLAY_KEYS:
        if key not in data:
            continue
        value = data[key]
        if key == "allowed_origins":
            if not isinstance(value, list):
                raise ConfigError("allowed_origins must be a list of origins")
            value = tuple(str(v) for v in value)
        elif key == "request_timeout":
            value = float(value)
        else:
            value = str(value)
        overlay[key] = value
    return overlay


def load_config(env: Mapping[str, str] | None = None) -> RelayConfig:
    """
    Build a RelayConfig from environment variables.

    Args:
        env: Mapping to read from; defaults to os.environ.
    """
    env = os.environ if env is None else env
    config = RelayConfig(
        api_token=env.get("REPLICATE_API_KEY", ""),
        host=env.get("HOST", "0.0.0.0"),
        port=_int_env(env, "PORT", DEFAULT_PORT),
        environment=env.get("APP_ENV", "development"),
        debug_enabled=env.get("RELAY_DEBUG", "").strip().lower() in _TRUTHY,
        upstream_base_url=env.get("UPSTREAM_BASE_URL", DEFAULT_UPSTREAM_BASE_URL),
        request_timeout=_float_env(env, "UPSTREAM_TIMEOUT", 120.0),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )
    overlay_path = env.get("RELAY_CONFIG")
    if overlay_path:
        config = replace(config, **load_overlay(overlay_path))
    return config
