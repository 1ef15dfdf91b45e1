import pytest
from sqlalchemy import text

from linkadmin.db import engine
from linkadmin.db.models import Base, Link


@pytest.fixture
def file_engine(tmp_path, monkeypatch):
    """Rebind the process engine to a throwaway file DB; the old binding is restored afterwards."""
    monkeypatch.setattr(engine, "engine", engine.engine)
    monkeypatch.setattr(engine, "SessionLocal", engine.SessionLocal)
    new_engine = engine.configure_engine(f"sqlite:///{(tmp_path / 'test.db').as_posix()}")
    Base.metadata.create_all(new_engine)
    yield new_engine
    new_engine.dispose()


def test_make_engine_defaults_to_database_url(monkeypatch, tmp_path):
    monkeypatch.setenv("LINKADMIN_DATABASE_URL", f"sqlite:///{(tmp_path / 'x.db').as_posix()}")
    eng = engine.make_engine()
    try:
        assert eng.url.database.endswith("x.db")
    finally:
        eng.dispose()


def test_configure_engine_rebinds_sessions(file_engine):
    assert engine.engine is file_engine
    assert engine.SessionLocal.kw["bind"] is file_engine


def test_get_session_commits(file_engine):
    with engine.get_session() as s:
        assert s.execute(text("SELECT 1")).scalar_one() == 1
        s.add(Link(keyword="c1", url="https://example.com"))

    with engine.get_session() as s:
        assert s.get(Link, "c1") is not None


def test_get_session_rolls_back(file_engine):
    class CustomError(Exception):
        pass

    with pytest.raises(CustomError), engine.get_session() as s:
        s.add(Link(keyword="r1", url="https://example.com"))
        s.flush()
        raise CustomError("force rollback")

    with engine.get_session() as s:
        assert s.get(Link, "r1") is None
