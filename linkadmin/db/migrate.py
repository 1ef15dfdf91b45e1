"""Programmatic Alembic upgrade run at admin start-up."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from .paths import alembic_dir, database_url

logger = logging.getLogger(__name__)


def _alembic_config(url: str) -> Config:
    # an alembic.ini beside the migrations only contributes its logging sections
    ini = Path(__file__).resolve().parents[2] / "alembic_migrations" / "alembic.ini"
    cfg = Config(str(ini)) if ini.exists() else Config()
    cfg.set_main_option("script_location", str(alembic_dir()))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def upgrade_to_head(url: str | None = None) -> None:
    """
    Bring the links schema at `url` (default: database_url()) to the latest head.
    Safe to call on every start.
    """
    url = url or database_url()
    logger.info("migrating links schema to head")
    command.upgrade(_alembic_config(url), "head")
