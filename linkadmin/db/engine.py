"""Engine and session factory for the links database."""

from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .paths import database_url

logger = logging.getLogger(__name__)

# seconds a writer waits on a locked SQLite file
SQLITE_BUSY_TIMEOUT = 15


def make_engine(url: str | None = None) -> Engine:
    url = url or database_url()
    connect_args = {}
    if url.startswith("sqlite"):
        # the dev server handles requests on worker threads
        connect_args = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
    return create_engine(url, connect_args=connect_args, future=True)


engine = make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def configure_engine(url: str | None = None) -> Engine:
    """Swap the process engine (and session factory) for one bound to `url`."""
    global engine, SessionLocal  # noqa: PLW0603

    old = engine
    engine = make_engine(url)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    old.dispose()
    logger.info("engine bound url=%s", engine.url.render_as_string(hide_password=True))
    return engine


@contextmanager
def get_session():
    """
    Context-managed DB session: commit on success, rollback on any error.

        with get_session() as s:
            ...
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.debug("session rolled back: %s", e)
        raise
    finally:
        session.close()
