import struct
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from linkadmin.db.models import Base
from linkadmin.db.repo import links_sql

MO_MAGIC = 0x950412DE
DEFAULT_HEADER = "Content-Type: text/plain; charset=UTF-8\nPlural-Forms: nplurals=2; plural=(n != 1);\n"


@pytest.fixture(scope="function")
def db_session():
    """Clean in-memory SQLite DB per test."""
    engine = create_engine("sqlite:///:memory:", echo=False, future=True)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def patch_get_session(monkeypatch, db_session):

    @contextmanager
    def fake_get_session():
        yield db_session

    monkeypatch.setattr(links_sql, "get_session", fake_get_session)


def _mo_bytes(messages: dict, header: str) -> bytes:
    # keys: msgid | (context, msgid) | (context, msgid, msgid_plural) with list values for plurals
    catalog = {"": header}
    for key, value in messages.items():
        if isinstance(key, tuple):
            ctxt, msgid, *plural = key
            orig = msgid if not plural else f"{msgid}\0{plural[0]}"
            if ctxt:
                orig = f"{ctxt}\x04{orig}"
        else:
            orig = key
        catalog[orig] = "\0".join(value) if isinstance(value, list | tuple) else value

    keys = sorted(catalog)
    ids = [k.encode("utf-8") for k in keys]
    strs = [catalog[k].encode("utf-8") for k in keys]

    n = len(keys)
    orig_tab = 7 * 4
    trans_tab = orig_tab + n * 8
    offset = trans_tab + n * 8

    tables = []
    for s in ids + strs:
        tables.append(struct.pack("II", len(s), offset))
        offset += len(s) + 1

    out = [struct.pack("Iiiiiii", MO_MAGIC, 0, n, orig_tab, trans_tab, 0, 0)]
    out.extend(tables)
    out.extend(s + b"\x00" for s in ids + strs)
    return b"".join(out)


@pytest.fixture
def write_mo(tmp_path):
    """Write a compiled catalog and return its path."""

    def _write(name: str, messages: dict, header: str = DEFAULT_HEADER):
        path = tmp_path / name
        path.write_bytes(_mo_bytes(messages, header))
        return path

    return _write
