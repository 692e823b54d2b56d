# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todot.config import Settings, load_config_file, parse_address
from todot.core.errors import ConfigError


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in (
        "TODOT_SERVER_ADDRESS",
        "TODOT_DB_PATH",
        "TODOT_LOG_DIR",
        "TODOT_POLL_INTERVAL_MS",
        "TODOT_CONNECT_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TODOT_DATA_DIR", str(tmp_path / "data"))
    config_path = tmp_path / "config.toml"
    monkeypatch.setenv("TODOT_CONFIG_PATH", str(config_path))
    return config_path


def test_defaults_without_config_file(clean_env: Path, tmp_path: Path) -> None:
    s = Settings.from_env()
    assert s.server_address is None
    assert s.db_path == tmp_path / "data" / "db.json"
    assert s.log_dir == tmp_path / "data"
    assert s.poll_interval_ms == 250
    assert s.config_error is None


def test_server_address_from_toml(clean_env: Path) -> None:
    clean_env.write_text('server_address = "sync.example:7878"\n', "utf-8")
    s = Settings.from_env()
    assert s.server_address == "sync.example:7878"


def test_env_overrides_toml(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    clean_env.write_text('server_address = "sync.example:7878"\n', "utf-8")
    monkeypatch.setenv("TODOT_SERVER_ADDRESS", "")
    assert Settings.from_env().server_address is None


def test_malformed_toml_falls_back_to_local(clean_env: Path) -> None:
    clean_env.write_text("server_address = \n", "utf-8")
    s = Settings.from_env()
    assert s.server_address is None
    assert s.config_error is not None


def test_non_string_server_address_is_reported(clean_env: Path) -> None:
    clean_env.write_text("server_address = 7878\n", "utf-8")
    s = Settings.from_env()
    assert s.server_address is None
    assert "must be a string" in (s.config_error or "")


def test_bad_numbers_fall_back_to_defaults(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODOT_POLL_INTERVAL_MS", "soon")
    monkeypatch.setenv("TODOT_CONNECT_TIMEOUT", "forever")
    s = Settings.from_env()
    assert s.poll_interval_ms == 250
    assert s.connect_timeout == 5.0


def test_load_config_file_missing_is_empty(tmp_path: Path) -> None:
    assert load_config_file(tmp_path / "absent.toml") == {}


def test_load_config_file_malformed_raises(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[[[", "utf-8")
    with pytest.raises(ConfigError):
        load_config_file(path)


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("localhost:7878", ("localhost", 7878)),
        ("10.0.0.2:80", ("10.0.0.2", 80)),
        ("[::1]:9000", ("::1", 9000)),
    ],
)
def test_parse_address(address: str, expected: tuple[str, int]) -> None:
    assert parse_address(address) == expected


@pytest.mark.parametrize("address", ["localhost", ":7878", "host:port", "host:0", "host:70000"])
def test_parse_address_rejects_garbage(address: str) -> None:
    with pytest.raises(ConfigError):
        parse_address(address)
