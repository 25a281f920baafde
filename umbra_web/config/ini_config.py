########## ini_config.py

import logging
import os
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

from umbra_web.domain.modules import MODULES, MODULES_BY_ID

INI_DEFAULT_NAME = "umbra_web.ini"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class AppSettings:
    flask_host: str = "127.0.0.1"
    flask_port: int = 5000
    flask_debug: bool = True
    secret_key: str = "umbra-dev"

    log_level: str = "INFO"
    default_module: str = "chat"

    # session workspaces
    workspace_idle_timeout_seconds: float = 1800.0
    max_workspaces: int = 500

    # simulated latency per module id, seconds
    latencies: Dict[str, float] = field(default_factory=dict)

    def latency_for(self, module_id: str) -> float:
        if module_id in self.latencies:
            return self.latencies[module_id]
        return MODULES_BY_ID[module_id].default_latency_seconds

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


class IniConfig:
    """
    Adapter around ConfigParser.
    Keeps INI handling out of your app/service code.
    """

    def __init__(self, ini_path: Path):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        if not read_ok:
            raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @property
    def ini_path(self) -> Path:
        return self._ini_path

    @staticmethod
    def from_env_or_default() -> "IniConfig":
        ini_raw = (os.getenv("APP_INI") or "").strip()
        # If APP_INI is not set, default to repo-root-relative ini location
        ini_path = Path(ini_raw) if ini_raw else (Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME)
        return IniConfig(ini_path)

    def _latencies(self, known_ids: Iterable[str]) -> Dict[str, float]:
        if not self._cfg.has_section("latency"):
            return {}

        known = set(known_ids)
        out: Dict[str, float] = {}
        for key in self._cfg.options("latency"):
            if key in self._cfg.defaults():
                continue
            if key not in known:
                raise ValueError(f"Unknown module id in [latency]: {key}")
            seconds = self._cfg.getfloat("latency", key)
            if seconds < 0:
                raise ValueError(f"Latency for {key} must be >= 0, got {seconds}")
            out[key] = seconds
        return out

    def load_settings(self) -> AppSettings:
        # Flask
        flask_host = (self._cfg.get("flask", "host", fallback="127.0.0.1") or "").strip() or "127.0.0.1"
        flask_port = self._cfg.getint("flask", "port", fallback=5000)
        flask_debug = self._cfg.getboolean("flask", "debug", fallback=True)
        secret_key = (self._cfg.get("flask", "secret_key", fallback="") or "").strip() or "umbra-dev"

        # Logging
        log_level = (self._cfg.get("logging", "level", fallback="INFO") or "").strip().upper() or "INFO"

        # Modules
        default_module = (self._cfg.get("modules", "default_module", fallback="chat") or "").strip() or "chat"
        latencies = self._latencies(m.module_id for m in MODULES)

        # Workspaces
        idle_timeout = self._cfg.getfloat("workspaces", "idle_timeout_seconds", fallback=1800.0)
        max_workspaces = self._cfg.getint("workspaces", "max_workspaces", fallback=500)

        # Validate
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {log_level}")
        if default_module not in MODULES_BY_ID:
            raise ValueError(f"Unknown default module: {default_module}")
        if idle_timeout <= 0:
            raise ValueError(f"workspaces.idle_timeout_seconds must be > 0, got {idle_timeout}")
        if max_workspaces < 1:
            raise ValueError(f"workspaces.max_workspaces must be >= 1, got {max_workspaces}")

        return AppSettings(
            flask_host=flask_host,
            flask_port=flask_port,
            flask_debug=flask_debug,
            secret_key=secret_key,
            log_level=log_level,
            default_module=default_module,
            workspace_idle_timeout_seconds=idle_timeout,
            max_workspaces=max_workspaces,
            latencies=latencies,
        )


def load_settings(ini_path: Optional[Path] = None) -> AppSettings:
    ini = IniConfig(ini_path) if ini_path else IniConfig.from_env_or_default()
    return ini.load_settings()
