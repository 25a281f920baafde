from __future__ import annotations

import logging
from pathlib import Path

import pytest

from umbra_web.config.ini_config import IniConfig


def _write_ini(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "umbra_web.ini"
    p.write_text(text, encoding="utf-8")
    return p


def test_missing_ini_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        IniConfig(tmp_path / "nope.ini")


def test_defaults_when_sections_missing(tmp_path: Path):
    settings = IniConfig(_write_ini(tmp_path, "[flask]\n")).load_settings()

    assert settings.flask_host == "127.0.0.1"
    assert settings.flask_port == 5000
    assert settings.flask_debug is True
    assert settings.log_level == "INFO"
    assert settings.log_level_value == logging.INFO
    assert settings.default_module == "chat"
    assert settings.latencies == {}
    assert settings.workspace_idle_timeout_seconds == 1800.0
    assert settings.max_workspaces == 500
    assert settings.latency_for("revision") == 4.0
    assert settings.latency_for("correccion") == 3.5


def test_reads_all_sections(tmp_path: Path):
    ini = _write_ini(
        tmp_path,
        "[flask]\nhost = 0.0.0.0\nport = 8080\ndebug = false\nsecret_key = s3cret\n"
        "[logging]\nlevel = debug\n"
        "[modules]\ndefault_module = revision\n"
        "[workspaces]\nidle_timeout_seconds = 600\nmax_workspaces = 20\n"
        "[latency]\nrevision = 0.5\ndue-diligence = 1\n",
    )

    settings = IniConfig(ini).load_settings()

    assert settings.flask_host == "0.0.0.0"
    assert settings.flask_port == 8080
    assert settings.flask_debug is False
    assert settings.secret_key == "s3cret"
    assert settings.log_level == "DEBUG"
    assert settings.default_module == "revision"
    assert settings.workspace_idle_timeout_seconds == 600.0
    assert settings.max_workspaces == 20
    assert settings.latency_for("revision") == 0.5
    assert settings.latency_for("due-diligence") == 1.0
    assert settings.latency_for("chat") == 2.0


@pytest.mark.parametrize(
    "text",
    [
        "[latency]\nnot-a-module = 1\n",
        "[latency]\nchat = -1\n",
        "[logging]\nlevel = LOUD\n",
        "[modules]\ndefault_module = nowhere\n",
        "[workspaces]\nidle_timeout_seconds = 0\n",
        "[workspaces]\nmax_workspaces = 0\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, text: str):
    with pytest.raises(ValueError):
        IniConfig(_write_ini(tmp_path, text)).load_settings()


def test_app_ini_env_override(tmp_path: Path, monkeypatch):
    ini = _write_ini(tmp_path, "[flask]\nport = 9999\n")
    monkeypatch.setenv("APP_INI", str(ini))

    cfg = IniConfig.from_env_or_default()

    assert cfg.ini_path == ini
    assert cfg.load_settings().flask_port == 9999


def test_repo_default_ini_loads(monkeypatch):
    monkeypatch.delenv("APP_INI", raising=False)

    settings = IniConfig.from_env_or_default().load_settings()

    assert settings.latency_for("extraccion") == 4.5
