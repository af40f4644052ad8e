"""
Environment variable loading helpers.

- Loads .env from the project root when available.
- Typed readers for the raw variables; validation errors surface as
  ConfigurationError so startup fails before any socket is bound.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from node_health_agent.core.exceptions import ConfigurationError

# Project root: config is node_health_agent/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_agent_env() -> None:
    """Load .env from project root. Existing variables win. Safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def env_list(name: str) -> list[str]:
    """Comma-separated list; blanks dropped."""
    return [item.strip() for item in env_str(name).split(",") if item.strip()]


def env_int(name: str, default: int) -> int:
    raw = env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def env_float(name: str, default: float) -> float:
    raw = env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def env_port(name: str, default: int) -> int:
    port = env_int(name, default)
    if not (0 < port < 65536):
        raise ConfigurationError(f"{name} must be between 1 and 65535, got {port}")
    return port


def env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    value = env_str(name, default).lower()
    if value not in choices:
        raise ConfigurationError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value
