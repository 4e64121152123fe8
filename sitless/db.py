from __future__ import annotations
import sqlite3
from pathlib import Path

DB_NAME = "sitless.sqlite3"


def data_dir(app_name: str = "Sitless") -> Path:
    # Cross-platform local app data dir
    # macOS: ~/Library/Application Support/Sitless
    # Windows: %APPDATA%\Sitless
    # SITLESS_DATA_DIR wins everywhere
    override = _get_env("SITLESS_DATA_DIR", "")
    if override:
        d = Path(override)
        d.mkdir(parents=True, exist_ok=True)
        return d

    home = Path.home()
    if _is_macos():
        base = home / "Library" / "Application Support"
    elif _is_windows():
        base = Path(_get_env("APPDATA", str(home)))
    else:
        base = Path(_get_env("XDG_DATA_HOME", str(home / ".local" / "share")))
    d = base / app_name
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    return data_dir() / DB_NAME


def connect(path: Path | None = None) -> sqlite3.Connection:
    conn = sqlite3.connect(path or db_path())
    conn.row_factory = sqlite3.Row
    return conn


def migrate(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS storage (
            area TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL, -- JSON
            PRIMARY KEY (area, key)
        );
        """
    )
    conn.commit()


def _is_windows() -> bool:
    import sys
    return sys.platform.startswith("win")


def _is_macos() -> bool:
    import sys
    return sys.platform == "darwin"


def _get_env(k: str, default: str) -> str:
    import os
    return os.environ.get(k, default)
