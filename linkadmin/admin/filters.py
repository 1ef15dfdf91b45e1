"""Request parameters -> validated filter/sort/pagination descriptor.

Every enum-like parameter is resolved against a closed set and silently
falls back to its default, so stale bookmarked admin URLs keep working.
Columns in emitted clauses only ever come from those closed sets; user text
only travels as a bound clause value.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time

from markupsafe import Markup

from linkadmin.db.repo.schemas import (
    CLICK_FILTER_CHOICES,
    BOOKMARK_PERPAGE,
    DATE_FILTER_CHOICES,
    DEFAULT_PERPAGE,
    SEARCH_IN_CHOICES,
    SORT_BY_CHOICES,
    SORT_ORDER_CHOICES,
    Clause,
    FilterDescriptor,
    PageWindow,
)
from linkadmin.i18n import CatalogRegistry

DEFAULT_SEARCH_IN = "url"
DEFAULT_SORT_BY = "timestamp"
DEFAULT_SORT_ORDER = "desc"
DEFAULT_CLICK_FILTER = "less"

DATE_INPUT_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")
# SQLite binds INTEGER as signed 64-bit
SQL_INT_MAX = 2**63 - 1
# bound for page and perpage; their product stays under SQL_INT_MAX
PAGE_PARAM_MAX = 2**31 - 1
LIKE_ESCAPE = "\\"

# msgids shown in the search sentence and the filter form
SEARCH_IN_LABELS = {"keyword": "Short URL", "url": "URL", "title": "Title", "ip": "IP Address"}
SORT_BY_LABELS = {
    "keyword": "Short URL",
    "url": "URL",
    "timestamp": "Date",
    "ip": "IP Address",
    "clicks": "Clicks",
}
SORT_ORDER_LABELS = {"asc": "Ascending Order", "desc": "Descending Order"}


def normalize_enum(value, allowed: Iterable[str], default):
    """Return `value` when it is one of `allowed`, else `default`."""
    if isinstance(value, str) and value in allowed:
        return value
    return default


def _to_int(raw, default: int | None, maximum: int | None = PAGE_PARAM_MAX) -> int | None:
    """Parse an int; empty, malformed or out-of-range (`abs > maximum`) input gives `default`."""
    if raw is None:
        return default
    if isinstance(raw, int):
        value = raw
    else:
        raw = str(raw).strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            return default
    if maximum is not None and abs(value) > maximum:
        return default
    return value


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters (and the escape char itself) in `text`."""
    return (
        str(text)
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_click_clause(limit, click_filter=None) -> Clause | None:
    """`clicks > limit` for "more", `clicks < limit` otherwise; None without a usable limit."""
    value = _to_int(limit, None, maximum=None)
    if value is None:
        return None
    value = max(-SQL_INT_MAX, min(value, SQL_INT_MAX))
    op = ">" if normalize_enum(click_filter, CLICK_FILTER_CHOICES, DEFAULT_CLICK_FILTER) == "more" else "<"
    return Clause("clicks", op, value)


def build_search_clause(search_text: str | None, search_in=None) -> Clause | None:
    """Substring match; `*` in the search text is a wildcard."""
    text = (search_text or "").strip()
    if not text:
        return None
    column = normalize_enum(search_in, SEARCH_IN_CHOICES, DEFAULT_SEARCH_IN)
    pattern = "%" + escape_like(text).replace("*", "%") + "%"
    return Clause(column, "LIKE", pattern)


def parse_date(raw) -> date | None:
    """Accept YYYY-MM-DD or MM/DD/YYYY; anything else is None."""
    if isinstance(raw, date):
        return raw
    text = (raw or "").strip() if isinstance(raw, str) else ""
    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def build_date_clause(date_filter, first, second=None) -> Clause | None:
    """
    before: earlier than the first day; after: from the start of the first day on;
    between: both days included. A missing or unparseable endpoint drops the clause.
    """
    date_filter = normalize_enum(date_filter, DATE_FILTER_CHOICES, None)
    d1 = parse_date(first)
    if date_filter is None or d1 is None:
        return None

    if date_filter == "before":
        return Clause("timestamp", "<", datetime.combine(d1, time.min))
    if date_filter == "after":
        return Clause("timestamp", ">", datetime.combine(d1, time.min))

    d2 = parse_date(second)
    if d2 is None:
        return None
    if d1 > d2:
        d1, d2 = d2, d1
    return Clause("timestamp", "BETWEEN", (datetime.combine(d1, time.min), datetime.combine(d2, time.max)))


def paginate(page, perpage, total_items: int, default_perpage: int = DEFAULT_PERPAGE) -> PageWindow:
    page = _to_int(page, 1) or 1
    page = max(page, 1)
    perpage = _to_int(perpage, default_perpage) or default_perpage
    if perpage < 1:
        perpage = default_perpage
    total_items = max(int(total_items or 0), 0)

    offset = (page - 1) * perpage
    return PageWindow(
        offset=offset,
        limit=perpage,
        total_pages=math.ceil(total_items / perpage),
        display_from=min(offset + 1, total_items),
        display_to=min(offset + perpage, total_items),
    )


def _search_sentence(search_text: str, search_in: str, registry: CatalogRegistry | None) -> Markup:
    pattern = "Searching for <strong>%s</strong> in <strong>%s</strong>."
    label = SEARCH_IN_LABELS[search_in]
    if registry is not None:
        pattern = registry.translate(pattern)
        label = registry.translate(label)
    # Markup.__mod__ escapes the arguments
    return Markup(pattern) % (search_text, label)


def build_descriptor(
    args: Mapping[str, str],
    *,
    default_perpage: int = DEFAULT_PERPAGE,
    registry: CatalogRegistry | None = None,
) -> FilterDescriptor:
    """Build the listing descriptor from raw query-string values."""
    page = max(_to_int(args.get("page"), 1) or 1, 1)
    perpage = _to_int(args.get("perpage"), default_perpage) or default_perpage
    if perpage < 1:
        perpage = default_perpage

    desc = FilterDescriptor(
        sort_by=normalize_enum(args.get("sort_by"), SORT_BY_CHOICES, DEFAULT_SORT_BY),
        sort_order=normalize_enum(args.get("sort_order"), SORT_ORDER_CHOICES, DEFAULT_SORT_ORDER),
        page=page,
        perpage=perpage,
    )

    click_clause = build_click_clause(args.get("click_limit"), args.get("click_filter"))
    if click_clause is not None:
        desc.click_limit = click_clause.value
        desc.click_filter = "more" if click_clause.operator == ">" else "less"
        desc.clauses.append(click_clause)

    search_text = (args.get("search") or "").strip()
    if search_text:
        desc.search_text = search_text
        desc.search_in = normalize_enum(args.get("search_in"), SEARCH_IN_CHOICES, DEFAULT_SEARCH_IN)
        desc.search_sentence = _search_sentence(search_text, desc.search_in, registry)
        desc.clauses.append(build_search_clause(search_text, desc.search_in))

    date_filter = normalize_enum(args.get("date_filter"), DATE_FILTER_CHOICES, None)
    if date_filter is not None:
        desc.date_filter = date_filter
        date_clause = build_date_clause(date_filter, args.get("date_first"), args.get("date_second"))
        if date_clause is not None:
            desc.date_first = parse_date(args.get("date_first")).isoformat()
            if date_filter == "between":
                desc.date_second = parse_date(args.get("date_second")).isoformat()
            desc.clauses.append(date_clause)

    return desc


def bookmark_descriptor(url: str) -> FilterDescriptor:
    """Single-row view of the link just created by the bookmarklet."""
    return FilterDescriptor(
        page=1,
        perpage=BOOKMARK_PERPAGE,
        clauses=[Clause("url", "LIKE", escape_like(url))],
        is_bookmark=True,
    )
