"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

# Listing defaults
DEFAULT_PERPAGE = 50
DEFAULT_LOCALE = "en_US"
DEFAULT_SITE_URL = "http://localhost:5000"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(slots=True)
class Settings:
    site_url: str = DEFAULT_SITE_URL
    locale: str | None = None  # None → resolved by CatalogRegistry
    timezone: str | None = None
    perpage: int = DEFAULT_PERPAGE
    debug: bool = False
    sql_debug: bool = False
    log_enabled: bool = True
    log_file: str | None = "logs/admin.log"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            site_url=(os.getenv("LINKADMIN_SITE_URL") or DEFAULT_SITE_URL).rstrip("/"),
            locale=os.getenv("LINKADMIN_LANG") or None,
            timezone=os.getenv("LINKADMIN_TIMEZONE") or None,
            perpage=_env_int("LINKADMIN_PERPAGE", DEFAULT_PERPAGE),
            debug=os.getenv("LINKADMIN_DEBUG") == "1",
            sql_debug=os.getenv("LINKADMIN_SQL_DEBUG") == "1",
        )
