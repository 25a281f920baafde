from .ini_config import AppSettings, IniConfig, load_settings

__all__ = [
    "AppSettings",
    "IniConfig",
    "load_settings",
]
