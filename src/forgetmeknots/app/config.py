# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Locations of the database, logs and bundled resources.

Environment overrides:
- ``FMK_DATA_DIR``: directory holding ``fmk.db``
- ``FMK_DB_PATH``: full path of the database file (wins over ``FMK_DATA_DIR``)
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path

log = logging.getLogger(__name__)

APP_NAME = "ForgetMeKnots"
ORGANIZATION = "ForgetMeKnots"
DB_FILENAME = "fmk.db"


def resource_path(*parts: str) -> Path:
    """Return absolute path to a bundled resource.

    When running from a PyInstaller bundle, data files are extracted to a
    temporary directory available via ``sys._MEIPASS``. During normal
    development, resources live next to this package.
    """

    base = getattr(sys, "_MEIPASS", None)
    root = Path(base) if base else Path(__file__).resolve().parent.parent
    return root.joinpath(*parts)


def data_directory(app_name: str = APP_NAME) -> Path:
    """
    Platform-specific user data directory.

    - Windows: %APPDATA%\\AppName
    - macOS: ~/Library/Application Support/AppName
    - Linux: $XDG_DATA_HOME/AppName (default ~/.local/share/AppName)
    """
    override = os.environ.get("FMK_DATA_DIR")
    if override:
        return Path(override).expanduser()

    home = Path.home()
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        return base / app_name
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name
    xdg_data_home = os.environ.get("XDG_DATA_HOME") or (home / ".local" / "share")
    return Path(xdg_data_home) / app_name


def log_directory(app_name: str = APP_NAME) -> Path:
    """Platform-specific log directory (``~/Library/Logs`` on macOS, else under the data dir)."""

    if sys.platform == "darwin" and not os.environ.get("FMK_DATA_DIR"):
        return Path.home() / "Library" / "Logs" / app_name
    return data_directory(app_name) / "logs"


def database_path() -> Path:
    override = os.environ.get("FMK_DB_PATH")
    if override:
        return Path(override).expanduser()
    return data_directory() / DB_FILENAME


def ensure_database(path: Path, seed: Path | None = None) -> Path:
    """
    Make sure the data directory exists and seed a first-launch database.

    If ``path`` is missing and a bundled seed database exists, the seed is
    copied into place; otherwise the store creates an empty database on open.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        return path

    seed = seed if seed is not None else resource_path(DB_FILENAME)
    if seed.is_file():
        shutil.copyfile(seed, path)
        log.info("Seeded database %s from %s", path, seed)
    return path
