"""Locations of the launcher data and the generated report."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from .errors import LauncherDirNotFoundError

LAUNCHER_DIRNAME = "Arma 3 Launcher"
CATALOG_FILENAME = "Steam.json"
PRESETS_DIRNAME = "Presets"
REPORT_FILENAME = "report.html"


def _home(env: Mapping[str, str]) -> Optional[Path]:
    home = env.get("HOME") or env.get("USERPROFILE")
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError:
        return None


def local_data_dir(
    *, platform: Optional[str] = None, env: Optional[Mapping[str, str]] = None
) -> Path:
    """Return the per-user local data directory for *platform*.

    Windows uses ``%LOCALAPPDATA%``, macOS ``~/Library/Application Support``
    and everything else ``$XDG_DATA_HOME`` falling back to ``~/.local/share``.
    """

    platform = platform or sys.platform
    env = os.environ if env is None else env

    if platform.startswith("win"):
        local_app_data = env.get("LOCALAPPDATA")
        if not local_app_data:
            raise LauncherDirNotFoundError("LOCALAPPDATA is not set")
        return Path(local_app_data)

    if platform == "darwin":
        home = _home(env)
        if home is None:
            raise LauncherDirNotFoundError("home directory is unknown")
        return home / "Library" / "Application Support"

    xdg_data_home = env.get("XDG_DATA_HOME", "")
    if xdg_data_home and Path(xdg_data_home).is_absolute():
        return Path(xdg_data_home)
    home = _home(env)
    if home is None:
        raise LauncherDirNotFoundError("home directory is unknown")
    return home / ".local" / "share"


def launcher_dir(
    *, platform: Optional[str] = None, env: Optional[Mapping[str, str]] = None
) -> Path:
    return local_data_dir(platform=platform, env=env) / LAUNCHER_DIRNAME


__all__ = [
    "CATALOG_FILENAME",
    "LAUNCHER_DIRNAME",
    "PRESETS_DIRNAME",
    "REPORT_FILENAME",
    "launcher_dir",
    "local_data_dir",
]
