from contextlib import contextmanager
from datetime import datetime

import pytest
from sqlalchemy.exc import SQLAlchemyError

from linkadmin.admin.filters import build_date_clause, build_search_clause
from linkadmin.db.models import Link
from linkadmin.db.repo import links_sql
from linkadmin.db.repo.errors import StorageError, ValidationError
from linkadmin.db.repo.links_sql import SqlAlchemyLinkStore
from linkadmin.db.repo.schemas import Clause

SITE = "https://sho.rt"


@pytest.fixture
def store():
    return SqlAlchemyLinkStore(SITE)


@pytest.fixture
def seeded(db_session):
    rows = [
        Link(keyword="alpha", url="https://example.com/a", title="Alpha page", timestamp=datetime(2020, 1, 1, 9), ip="10.0.0.1", clicks=5),
        Link(keyword="beta", url="https://example.com/b", title="Beta", timestamp=datetime(2020, 1, 15, 12), ip="10.0.0.2", clicks=20),
        Link(keyword="gamma", url="https://other.org/xaybz", title="Gamma 100%", timestamp=datetime(2020, 1, 31, 23, 30), ip="10.0.0.1", clicks=0),
        Link(keyword="delta", url="https://other.org/d", title="Delta", timestamp=datetime(2020, 2, 1, 0, 0), ip="192.168.1.1", clicks=11),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


def test_count_all(store, seeded):
    assert store.count([]) == (4, 36)


def test_count_empty_table(store):
    assert store.count([]) == (0, 0)


def test_count_with_clicks_clause(store, seeded):
    assert store.count([Clause("clicks", ">", 10)]) == (2, 31)
    assert store.count([Clause("clicks", "<", 10)]) == (2, 5)


def test_search_wildcard_matches_substring(store, seeded):
    clause = build_search_clause("xa*bz", "url")
    rows = store.query([clause], "keyword", "asc", 0, 10)
    assert [r.keyword for r in rows] == ["gamma"]


def test_search_percent_is_literal(store, seeded):
    rows = store.query([build_search_clause("100%", "title")], "keyword", "asc", 0, 10)
    assert [r.keyword for r in rows] == ["gamma"]

    # a bare "%" must not match everything
    rows = store.query([build_search_clause("%", "keyword")], "keyword", "asc", 0, 10)
    assert rows == []


def test_search_with_quote_is_just_data(store, seeded):
    rows = store.query([build_search_clause("' OR '1'='1", "title")], "keyword", "asc", 0, 10)
    assert rows == []


def test_between_includes_whole_last_day(store, seeded):
    clause = build_date_clause("between", "2020-01-01", "2020-01-31")
    rows = store.query([clause], "timestamp", "asc", 0, 10)
    assert [r.keyword for r in rows] == ["alpha", "beta", "gamma"]


def test_before_and_after(store, seeded):
    before = store.query([build_date_clause("before", "2020-01-15")], "timestamp", "asc", 0, 10)
    after = store.query([build_date_clause("after", "2020-01-31")], "timestamp", "asc", 0, 10)
    assert [r.keyword for r in before] == ["alpha"]
    assert [r.keyword for r in after] == ["gamma", "delta"]


def test_after_includes_links_later_that_day(store, db_session):
    db_session.add(Link(keyword="noon", url="https://example.com/noon", timestamp=datetime(2020, 1, 1, 15)))
    db_session.commit()
    assert store.count([build_date_clause("after", "2020-01-01")]) == (1, 0)
    assert store.count([build_date_clause("after", "2020-01-02")]) == (0, 0)


def test_sort_and_paginate(store, seeded):
    page1 = store.query([], "clicks", "desc", 0, 2)
    page2 = store.query([], "clicks", "desc", 2, 2)
    assert [r.keyword for r in page1] == ["beta", "delta"]
    assert [r.keyword for r in page2] == ["alpha", "gamma"]


def test_sort_ties_broken_by_keyword(store, seeded):
    rows = store.query([], "ip", "asc", 0, 10)
    assert [r.keyword for r in rows][:2] == ["alpha", "gamma"]


def test_clauses_are_anded(store, seeded):
    rows = store.query(
        [Clause("ip", "LIKE", "10.0.0.1"), Clause("clicks", ">", 1)], "keyword", "asc", 0, 10
    )
    assert [r.keyword for r in rows] == ["alpha"]


def test_unknown_column_or_operator_rejected(store, seeded):
    with pytest.raises(ValidationError):
        store.count([Clause("password", "<", 1)])  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        store.count([Clause("clicks", "OR 1=1 --", 1)])  # type: ignore[arg-type]


def test_unknown_sort_field_rejected(store, seeded):
    with pytest.raises(ValidationError):
        store.query([], "title; DROP", "asc", 0, 10)


def test_invalid_window_rejected(store):
    with pytest.raises(ValidationError):
        store.query([], "keyword", "asc", -1, 10)
    with pytest.raises(ValidationError):
        store.query([], "keyword", "asc", 0, 0)


# ---------- create ----------


def test_create_with_keyword(store):
    res = store.create("HTTPS://Example.com/Page", "MyKey", "My page", "127.0.0.1")
    assert res.status == "success"
    assert res.keyword == "mykey"
    assert res.shorturl == f"{SITE}/mykey"
    assert res.url == "https://example.com/Page"
    assert res.title == "My page"

    stored = store.get("mykey")
    assert stored is not None
    assert stored.ip == "127.0.0.1"
    assert stored.clicks == 0
    assert stored.timestamp is not None


def test_create_auto_keyword(store):
    first = store.create("https://a.example.com")
    second = store.create("https://b.example.com")
    assert first.status == second.status == "success"
    assert first.keyword != second.keyword
    assert first.title == "https://a.example.com"


def test_create_keyword_taken(store):
    store.create("https://a.example.com", "taken")
    res = store.create("https://b.example.com", "taken")
    assert res.status == "fail"
    assert res.code == "error:keyword"
    assert "taken" in res.message


def test_create_reserved_keyword(store):
    res = store.create("https://a.example.com", "admin")
    assert res.code == "error:keyword"


def test_create_duplicate_url_returns_existing(store):
    store.create("https://a.example.com", "one")
    res = store.create("https://a.example.com", "two")
    assert res.status == "fail"
    assert res.code == "error:url"
    assert res.keyword == "one"
    assert res.shorturl == f"{SITE}/one"


@pytest.mark.parametrize("url,code", [("", "error:nourl"), ("   ", "error:nourl"), ("ftp://x.y", "error:url"), ("not a url", "error:url")])
def test_create_rejects_bad_urls(store, url, code):
    res = store.create(url)
    assert res.status == "fail"
    assert res.code == code


def test_create_messages_are_translated():
    store = SqlAlchemyLinkStore(SITE, translate=lambda s: s.replace("added to database", "ajouté"))
    res = store.create("https://a.example.com")
    assert res.message == "https://a.example.com ajouté"


def test_create_db_error_reported_as_fail(store, monkeypatch):
    def boom(*a, **kw):
        raise StorageError("disk full")

    monkeypatch.setattr(store, "_insert", boom)
    res = store.create("https://a.example.com")
    assert res.status == "fail"
    assert res.code == "error:db"


def test_count_wraps_sqlalchemy_errors(store, monkeypatch):
    class BrokenSession:
        def execute(self, *a, **kw):
            raise SQLAlchemyError("boom")

    @contextmanager
    def broken():
        yield BrokenSession()

    monkeypatch.setattr(links_sql, "get_session", broken)
    with pytest.raises(StorageError):
        store.count([])


def test_get_missing(store):
    assert store.get("nothing") is None
    assert store.get("") is None
