"""Find reporter data and .env files in a source checkout or a PyInstaller build."""

import sys
from pathlib import Path

REPORTERS_FILE = "reporters.json"


def get_project_root() -> Path:
    # Frozen builds unpack their data files under sys._MEIPASS
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS)
    return Path(__file__).resolve().parent.parent


def get_config_path(*parts: str) -> Path:
    """Return a path under config/, e.g. get_config_path("reporters.json")."""
    return get_project_root().joinpath("config", *parts)


def get_reporters_path() -> Path:
    return get_config_path(REPORTERS_FILE)
