"""SQLAlchemy-backed implementation of LinkStore."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from linkadmin.config import DEFAULT_SITE_URL
from linkadmin.db.engine import get_session
from linkadmin.db.models import Link
from linkadmin.db.repo.errors import StorageError, ValidationError
from linkadmin.db.repo.link_store import LinkStore
from linkadmin.db.repo.schemas import Clause, CreationResult, LinkRecord
from linkadmin.normalization import int_to_keyword, is_valid_url, normalize_url, sanitize_keyword

logger = logging.getLogger(__name__)

# keywords that would shadow application routes
RESERVED_KEYWORDS = frozenset({"admin", "api", "static"})


def _identity(text: str) -> str:
    return text


def _to_record(r: Link) -> LinkRecord:
    return LinkRecord(
        keyword=r.keyword,
        url=r.url or "",
        title=r.title or "",
        timestamp=r.timestamp,
        ip=r.ip or "",
        clicks=r.clicks or 0,
    )


class SqlAlchemyLinkStore(LinkStore):
    """Concrete LinkStore over the `links` table."""

    _COLUMN_MAP = {
        "keyword": Link.keyword,
        "url": Link.url,
        "title": Link.title,
        "ip": Link.ip,
        "clicks": Link.clicks,
        "timestamp": Link.timestamp,
    }

    _SORT_MAP = {
        "keyword": Link.keyword,
        "url": Link.url,
        "timestamp": Link.timestamp,
        "ip": Link.ip,
        "clicks": Link.clicks,
    }

    def __init__(self, site_url: str = DEFAULT_SITE_URL, *, translate: Callable[[str], str] | None = None):
        self.site_url = site_url.rstrip("/")
        self._t = translate or _identity

    # ---------- helpers ----------

    def _clause_expr(self, clause: Clause):
        col = self._COLUMN_MAP.get(clause.column)
        if col is None:
            raise ValidationError(f"Unknown column: {clause.column}")

        if clause.operator == ">":
            return col > clause.value
        if clause.operator == "<":
            return col < clause.value
        if clause.operator == "LIKE":
            return col.like(clause.value, escape="\\")
        if clause.operator == "BETWEEN":
            low, high = clause.value
            return col.between(low, high)
        raise ValidationError(f"Unknown operator: {clause.operator}")

    def _apply_clauses(self, stmt, clauses: Sequence[Clause]):
        for clause in clauses or ():
            stmt = stmt.where(self._clause_expr(clause))
        return stmt

    def _order_expr(self, sort_by: str, sort_order: str):
        order_col = self._SORT_MAP.get(sort_by)
        if order_col is None:
            raise ValidationError(f"Unknown sort field: {sort_by}")
        return order_col.asc() if sort_order == "asc" else order_col.desc()

    def _next_keyword(self, s) -> str:
        n = s.execute(select(func.count()).select_from(Link)).scalar_one()
        while True:
            kw = int_to_keyword(n)
            if kw not in RESERVED_KEYWORDS and s.get(Link, kw) is None:
                return kw
            n += 1

    def shorturl(self, keyword: str) -> str:
        return f"{self.site_url}/{keyword}"

    # ---------- interface ----------

    def count(self, clauses: Sequence[Clause]) -> tuple[int, int]:
        stmt = self._apply_clauses(select(func.count(), func.coalesce(func.sum(Link.clicks), 0)), clauses)
        try:
            with get_session() as s:
                total, clicks = s.execute(stmt).one()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return int(total), int(clicks)

    def query(
        self,
        clauses: Sequence[Clause],
        sort_by: str,
        sort_order: str,
        offset: int,
        limit: int,
    ) -> list[LinkRecord]:
        if offset < 0 or limit <= 0:
            raise ValidationError("Invalid offset or limit")

        stmt = self._apply_clauses(select(Link), clauses)
        stmt = stmt.order_by(self._order_expr(sort_by, sort_order), Link.keyword.asc())
        stmt = stmt.offset(offset).limit(limit)
        try:
            with get_session() as s:
                rows = s.execute(stmt).scalars().all()
                # build DTOs while the session is open
                return [_to_record(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def get(self, keyword: str) -> LinkRecord | None:
        kw = sanitize_keyword(keyword)
        if not kw:
            return None
        try:
            with get_session() as s:
                obj = s.get(Link, kw)
                return _to_record(obj) if obj else None
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def create(self, url: str, keyword: str = "", title: str = "", ip: str = "") -> CreationResult:
        if not url or not str(url).strip():
            return CreationResult(status="fail", code="error:nourl", message=self._t("Missing or malformed URL"))
        if not is_valid_url(url):
            return CreationResult(
                status="fail", code="error:url", message=self._t("Missing or malformed URL"), url=str(url)
            )

        norm = normalize_url(url)
        try:
            return self._insert(norm, sanitize_keyword(keyword), title, ip)
        except StorageError as e:
            logger.error("link insert failed url=%s error=%s", norm, e)
            return CreationResult(
                status="fail", code="error:db", message=self._t("Error saving url to database"), url=norm
            )

    def _insert(self, url: str, keyword: str, title: str, ip: str) -> CreationResult:
        try:
            with get_session() as s:
                existing = s.execute(select(Link).where(Link.url == url).limit(1)).scalars().first()
                if existing is not None:
                    return CreationResult(
                        status="fail",
                        code="error:url",
                        message=self._t("%s already exists in database") % url,
                        keyword=existing.keyword,
                        shorturl=self.shorturl(existing.keyword),
                        url=existing.url,
                        title=existing.title or "",
                    )

                if keyword:
                    if keyword in RESERVED_KEYWORDS or s.get(Link, keyword) is not None:
                        return CreationResult(
                            status="fail",
                            code="error:keyword",
                            message=self._t("Short URL %s already exists in database or is reserved") % keyword,
                            url=url,
                        )
                else:
                    keyword = self._next_keyword(s)

                obj = Link(
                    keyword=keyword,
                    url=url,
                    title=title or url,
                    timestamp=datetime.now(UTC).replace(tzinfo=None),
                    ip=ip or "",
                    clicks=0,
                )
                s.add(obj)
                s.flush()
                s.commit()
                logger.info("link created keyword=%s", keyword)
                return CreationResult(
                    status="success",
                    message=self._t("%s added to database") % url,
                    keyword=obj.keyword,
                    shorturl=self.shorturl(obj.keyword),
                    url=obj.url,
                    title=obj.title or "",
                )
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
