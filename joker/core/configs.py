"""Configuration management for the joker client.

Loads user settings from ~/.config/joker/config.cfg (or $JOKER_HOME/config.cfg)
and falls back to a legacy .env file in the same directory.
Provides ClientSettings (registry location, socket timeouts, log level).
"""

import configparser
import math
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

CONFIG_DIR_ENV = "JOKER_HOME"
REGISTRY_FILENAME = "daemons.json"


def get_config_dir() -> Path:
    """Config directory, honouring $JOKER_HOME."""
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "joker"


def get_config_path() -> Path:
    return get_config_dir() / "config.cfg"


@dataclass
class ClientSettings:
    registry_path: Path
    connect_timeout: Optional[float] = None
    write_timeout: Optional[float] = None
    log_level: str = "WARNING"


def load_raw_config(path: Optional[Path] = None) -> Dict[str, str]:
    """
    Load configuration values from config.cfg, or from .env if there is none.
    Values are returned with lowercase keys for convenience.
    """
    path = path or get_config_path()
    data: Dict[str, str] = {}

    if path.exists():
        cfg = configparser.ConfigParser()
        cfg.read(path)
        if "DEFAULT" in cfg:
            data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})
        return data

    env_path = path.parent / ".env"
    if env_path.exists():
        data.update(
            {k.lower(): v for k, v in dotenv_values(env_path).items() if v is not None}
        )

    return data


def _get_timeout(raw: Dict[str, str], key: str, env_name: str) -> Optional[float]:
    value = os.environ.get(env_name)
    if value is None or str(value).strip() == "":
        value = raw.get(key, "")

    value = str(value).strip().lower()
    if value in {"", "none", "0"}:
        return None

    timeout = float(value)
    if not math.isfinite(timeout) or timeout < 0:
        raise ValueError(f"Timeout '{key}' must be a finite, non-negative number (got {value}).")
    return timeout or None


def get_client_settings(raw: Optional[Dict[str, str]] = None) -> ClientSettings:
    """
    Build ClientSettings from raw configuration values and the environment.
    Raises ValueError if a timeout is not a number.
    """
    raw = load_raw_config() if raw is None else raw

    registry_path = os.environ.get("JOKER_REGISTRY_PATH") or raw.get("registry_path", "")
    if registry_path.strip():
        resolved = Path(registry_path.strip()).expanduser()
    else:
        resolved = get_config_dir() / REGISTRY_FILENAME

    log_level = os.environ.get("JOKER_LOG_LEVEL") or raw.get("log_level") or "WARNING"

    return ClientSettings(
        registry_path=resolved,
        connect_timeout=_get_timeout(raw, "connect_timeout", "JOKER_CONNECT_TIMEOUT_S"),
        write_timeout=_get_timeout(raw, "write_timeout", "JOKER_WRITE_TIMEOUT_S"),
        log_level=log_level.strip().upper(),
    )
