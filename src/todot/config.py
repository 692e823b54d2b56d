# src/todot/config.py

"""Centralized settings loaded from environment variables (+ optional .env and config.toml).

Design goals:
- One Settings object for the whole app, passed explicitly to whoever needs it.
- Environment wins over the TOML config file; the file wins over defaults.
- A broken config file never stops the app: the problem is recorded in
  Settings.config_error and the app falls back to local file storage.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .core.errors import ConfigError

ENV_PREFIX = "TODOT"
APP_DIR_NAME = "todot"
DB_FILE = "db.json"
CONFIG_FILE = "config.toml"

logger = logging.getLogger(__name__)

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _xdg_dir(var: str, fallback: str) -> Path:
    raw = os.getenv(var)
    if raw and Path(raw).is_absolute():
        return Path(raw)
    return Path.home() / fallback


def default_data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", ".local/share") / APP_DIR_NAME


def default_config_path() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_DIR_NAME / CONFIG_FILE


def load_config_file(path: str | Path) -> dict[str, Any]:
    """
    Read the TOML config file.

    Missing file -> {} (local mode). Unreadable or malformed -> ConfigError.
    """
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e


def parse_address(address: str) -> tuple[str, int]:
    """Split "host:port" (IPv6 as "[::1]:port"). Raises ConfigError on bad input."""
    host, sep, port_s = address.strip().rpartition(":")
    if not sep or not host:
        raise ConfigError(f"server address must look like host:port, got {address!r}")
    host = host.strip("[]")
    try:
        port = int(port_s)
    except ValueError as e:
        raise ConfigError(f"invalid port in server address {address!r}") from e
    if not 0 < port < 65536:
        raise ConfigError(f"port out of range in server address {address!r}")
    return host, port


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path

    # ---- Local data paths ----
    data_dir: Path
    db_path: Path
    config_path: Path

    # ---- Remote sync ----
    server_address: str | None
    connect_timeout: float
    peer_bind: str

    # ---- UI ----
    poll_interval_ms: int

    # Set when config.toml could not be used; shown to the user at startup.
    config_error: str | None = None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), APP_DIR_NAME) or APP_DIR_NAME
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), default_data_dir())
        db_path = _env_path(_k("DB_PATH"), data_dir / DB_FILE)
        config_path = _env_path(_k("CONFIG_PATH"), default_config_path())
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        config_error: str | None = None
        try:
            file_cfg = load_config_file(config_path)
        except ConfigError as e:
            logger.warning("Ignoring config file: %s", e)
            config_error = str(e)
            file_cfg = {}

        server_address: str | None = None
        raw_address = file_cfg.get("server_address")
        if raw_address is not None and not isinstance(raw_address, str):
            config_error = f"server_address in {config_path} must be a string"
        elif raw_address:
            server_address = raw_address.strip() or None

        env_address = os.getenv(_k("SERVER_ADDRESS"))
        if env_address is not None:
            server_address = env_address.strip() or None

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            data_dir=data_dir,
            db_path=db_path,
            config_path=config_path,
            server_address=server_address,
            connect_timeout=_env_float(_k("CONNECT_TIMEOUT"), 5.0),
            peer_bind=_env(_k("PEER_BIND"), "127.0.0.1:7878"),
            poll_interval_ms=max(10, _env_int(_k("POLL_INTERVAL_MS"), 250)),
            config_error=config_error,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load settings once per process."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
