"""Data contracts (DTO) for the admin listing and link creation. No business logic here."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

# Defaults for listing/paging
DEFAULT_PERPAGE: int = 50
BOOKMARK_PERPAGE: int = 1

SearchIn = Literal["keyword", "url", "title", "ip"]
SortBy = Literal["keyword", "url", "timestamp", "ip", "clicks"]
SortOrder = Literal["asc", "desc"]
ClickFilter = Literal["more", "less"]
DateFilter = Literal["before", "after", "between"]
Column = Literal["keyword", "url", "title", "ip", "clicks", "timestamp"]
Operator = Literal[">", "<", "LIKE", "BETWEEN"]

SEARCH_IN_CHOICES: tuple[str, ...] = ("keyword", "url", "title", "ip")
SORT_BY_CHOICES: tuple[str, ...] = ("keyword", "url", "timestamp", "ip", "clicks")
SORT_ORDER_CHOICES: tuple[str, ...] = ("asc", "desc")
CLICK_FILTER_CHOICES: tuple[str, ...] = ("more", "less")
DATE_FILTER_CHOICES: tuple[str, ...] = ("before", "after", "between")


@dataclass(frozen=True, slots=True)
class Clause:
    """
    One predicate fragment, ANDed with the others.

    `column` and `operator` come from closed sets; `value` is always bound as a parameter
    (for BETWEEN it is a `(low, high)` tuple).
    """

    column: Column
    operator: Operator
    value: Any


@dataclass(slots=True)
class LinkRecord:
    """Single short link row."""

    keyword: str
    url: str
    title: str = ""
    timestamp: datetime | None = None
    ip: str = ""
    clicks: int = 0


@dataclass(frozen=True, slots=True)
class PageWindow:
    offset: int
    limit: int
    total_pages: int
    display_from: int  # 1-based ordinal of the first row shown
    display_to: int  # 1-based ordinal of the last row shown


@dataclass(slots=True)
class FilterDescriptor:
    """Validated and normalized view of the listing request."""

    search_text: str = ""
    search_in: SearchIn = "url"
    sort_by: SortBy = "timestamp"
    sort_order: SortOrder = "desc"
    page: int = 1
    perpage: int = DEFAULT_PERPAGE
    click_limit: int | None = None
    click_filter: ClickFilter = "less"
    date_filter: DateFilter | None = None
    date_first: str = ""  # YYYY-MM-DD, empty when absent/invalid
    date_second: str = ""
    clauses: list[Clause] = field(default_factory=list)
    search_sentence: str = ""  # HTML-escaped, display only
    is_bookmark: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.perpage

    @property
    def limit(self) -> int:
        return self.perpage


@dataclass(slots=True)
class ListingResult:
    rows: list[LinkRecord]
    total_items: int
    total_items_clicks: int | None  # None when no filter is active
    total_links: int
    total_clicks: int
    window: PageWindow


@dataclass(slots=True)
class CreationResult:
    """
    Outcome of a link creation attempt.

    status: "success" or "fail"; code: machine readable reason on failure
    (error:keyword, error:url, error:nourl, error:db).
    """

    status: Literal["success", "fail"]
    message: str
    code: str | None = None
    keyword: str = ""
    shorturl: str = ""
    url: str = ""
    title: str = ""
