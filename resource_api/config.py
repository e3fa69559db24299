from __future__ import annotations

# resource_api/config.py
import os
from typing import Any

import yaml

# DB path resolution order:
# 1) env RESOURCE_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: <project root>/data/resources.db
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_DEFAULT_DB = os.path.join(_PROJECT_ROOT, "data", "resources.db")

_ENVIRONMENTS = ("development", "production", "test")


class ConfigError(RuntimeError):
    """Raised when the service cannot start with the resolved configuration."""


def _read_config_yaml() -> dict[str, Any]:
    cfg_path = os.environ.get("RESOURCE_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"config file must hold a mapping: {cfg_path}")
    return cfg


def get_app_env() -> str:
    env = (os.environ.get("APP_ENV") or "").strip().lower()
    if not env:
        env = str(_read_config_yaml().get("app_env") or "production").strip().lower()
    return env if env in _ENVIRONMENTS else "production"


def is_development() -> bool:
    return get_app_env() == "development"


def _is_test() -> bool:
    return get_app_env() == "test" or os.environ.get("PYTEST_CURRENT_TEST") is not None


def get_db_path() -> str:
    """
    Resolve the SQLite file location. The containing directory is not created:
    a missing directory means a misconfigured deployment and is fatal.
    """
    env_path = os.environ.get("RESOURCE_DB_PATH")
    cfg = _read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")

    if env_path:
        path = env_path
    elif _is_test() and isinstance(cfg_test, str) and cfg_test.strip():
        path = cfg_test.strip()
    elif isinstance(cfg_db, str) and cfg_db.strip():
        path = cfg_db.strip()
    else:
        path = _DEFAULT_DB

    if path == ":memory:":
        return path
    dirn = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(dirn):
        raise ConfigError(f"database directory does not exist: {dirn}")
    return path


def get_cors_origins() -> list[str]:
    origins = _read_config_yaml().get("cors_origins")
    if isinstance(origins, list) and origins:
        return [str(o) for o in origins]
    return ["*"]


def get_log_level() -> str:
    level = os.environ.get("LOG_LEVEL") or _read_config_yaml().get("log_level") or "INFO"
    return str(level).upper()
