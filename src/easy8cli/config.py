from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml

from .credentials import find_api_key
from .errors import ConfigError
from .logging import get_logger

DEFAULT_BASE_URL = "https://demo.easysoftware.com"
DEFAULT_TIMEOUT = 30.0
CONFIG_ENV = "EASY8_CONFIG"

_DEFAULT_ENV_VARS = {
    "project_id": "EASY8_DEFAULT_PROJECT_ID",
    "tracker_id": "EASY8_DEFAULT_TRACKER_ID",
    "status_id": "EASY8_DEFAULT_STATUS_ID",
    "priority_id": "EASY8_DEFAULT_PRIORITY_ID",
    "author_id": "EASY8_DEFAULT_AUTHOR_ID",
    "assigned_to_id": "EASY8_DEFAULT_ASSIGNED_TO_ID",
}


@dataclass
class Defaults:
    """Default IDs used by ``issue create`` when a flag is not given."""

    project_id: int = 0
    tracker_id: int = 0
    status_id: int = 0
    priority_id: int = 0
    author_id: int = 0
    assigned_to_id: int = 0


@dataclass
class Easy8Config:
    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    timeout: float = DEFAULT_TIMEOUT
    defaults: Defaults = field(default_factory=Defaults)
    source_file: Path | None = None


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "easy8" / "config.json"


def _read_file(p: Path) -> dict[str, Any]:
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file {p}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)  # JSON is a subset of YAML
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid configuration file {p}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file {p} must contain a mapping")
    return cast(dict[str, Any], raw)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _merge_file(cfg: Easy8Config, raw: dict[str, Any]) -> None:
    if raw.get("base_url"):
        cfg.base_url = str(raw["base_url"])
    if raw.get("api_key"):
        cfg.api_key = str(raw["api_key"])
    if raw.get("timeout"):
        try:
            cfg.timeout = float(raw["timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid timeout in configuration: {raw['timeout']!r}") from exc
    defaults = raw.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError(f"Invalid defaults in configuration: {defaults!r}")
    for name in _DEFAULT_ENV_VARS:
        value = _as_int(defaults.get(name))
        if value != 0:
            setattr(cfg.defaults, name, value)


def _apply_env(cfg: Easy8Config) -> None:
    if base := os.environ.get("EASY8_BASE_URL"):
        cfg.base_url = base
    if key := os.environ.get("EASY8_API_KEY"):
        cfg.api_key = key
    if timeout := os.environ.get("EASY8_TIMEOUT"):
        try:
            cfg.timeout = float(timeout)
        except ValueError:
            get_logger().debug(f"ignoring invalid EASY8_TIMEOUT: {timeout!r}", operation="config")
    for name, env_name in _DEFAULT_ENV_VARS.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        try:
            setattr(cfg.defaults, name, int(value))
        except ValueError:
            get_logger().debug(f"ignoring invalid {env_name}: {value!r}", operation="config")


def load_config(path: str | Path | None = None) -> Easy8Config:
    """Build the effective configuration.

    Precedence, lowest first: built-in defaults, the config file, environment
    variables. A missing file is fine unless ``path`` was given explicitly.
    """
    cfg = Easy8Config()
    p = Path(path).expanduser() if path is not None else default_config_path()
    if p.exists():
        _merge_file(cfg, _read_file(p))
        cfg.source_file = p
    elif path is not None:
        raise ConfigError(f"Configuration file not found: {p}")
    _apply_env(cfg)
    if not cfg.api_key:
        cfg.api_key = find_api_key() or ""
    cfg.base_url = cfg.base_url.rstrip("/")
    return cfg


__all__ = ["Defaults", "Easy8Config", "load_config", "default_config_path", "ConfigError"]
