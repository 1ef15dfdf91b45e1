"""Centralized user-data, language and migrations paths for LinkAdmin."""

from __future__ import annotations

import os
import platform
from pathlib import Path

APP_NAME = "LinkAdmin"

__all__ = ["APP_NAME", "user_data_dir", "db_path", "database_url", "alembic_dir", "lang_dir"]


def user_data_dir() -> Path:
    """
    Return the per-OS user data directory for the app and ensure it exists.

    Windows: %APPDATA%/LinkAdmin
    macOS:   ~/Library/Application Support/LinkAdmin
    Linux:   ~/.local/share/LinkAdmin

    Override (for deployments/tests): set env LINKADMIN_DATA_DIR to an absolute path.
    """
    override = os.getenv("LINKADMIN_DATA_DIR")
    if override:
        p = Path(override).expanduser().resolve()
        p.mkdir(parents=True, exist_ok=True)
        return p

    system = platform.system()
    if system == "Windows":
        base = os.getenv("APPDATA", str(Path.home() / "AppData" / "Roaming"))
        p = Path(base) / APP_NAME
    elif system == "Darwin":
        p = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        p = Path.home() / ".local" / "share" / APP_NAME

    p.mkdir(parents=True, exist_ok=True)
    return p


def db_path() -> Path:
    """
    Path to the SQLite links database file inside the user data dir.

    Always: <user_data_dir>/links.db
    """
    return user_data_dir() / "links.db"


def database_url() -> str:
    """
    SQLAlchemy URL of the links DB.

    Env LINKADMIN_DATABASE_URL wins (e.g. a SQLite file shared with the redirector);
    otherwise the SQLite file from db_path().
    """
    return os.getenv("LINKADMIN_DATABASE_URL") or f"sqlite:///{db_path().as_posix()}"


def lang_dir() -> Path:
    """
    Directory holding compiled `<locale>.mo` catalogs.

    Env LINKADMIN_LANG_DIR wins; otherwise <user_data_dir>/languages (not created).
    """
    override = os.getenv("LINKADMIN_LANG_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return user_data_dir() / "languages"


def alembic_dir() -> Path:
    """
    Locate the Alembic migrations folder.

    Resolution order:
      1) Env override LINKADMIN_ALEMBIC_DIR (absolute path).
      2) Dev: <project_root>/alembic_migrations
      3) Fallback: <user_data_dir>/alembic_migrations (will be created if missing).
    """
    override = os.getenv("LINKADMIN_ALEMBIC_DIR")
    if override:
        p = Path(override).expanduser().resolve()
        if p.exists():
            return p

    # This file is linkadmin/db/paths.py → project root is parents[2]
    project_root = Path(__file__).resolve().parents[2]
    p = project_root / "alembic_migrations"
    if p.exists():
        return p

    p = user_data_dir() / "alembic_migrations"
    p.mkdir(parents=True, exist_ok=True)
    return p
