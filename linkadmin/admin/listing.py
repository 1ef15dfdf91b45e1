"""Run a filter descriptor against the link store, and the bookmarklet flow."""

from __future__ import annotations

import logging

from linkadmin.admin.filters import paginate
from linkadmin.db.repo.link_store import LinkStore
from linkadmin.db.repo.schemas import BOOKMARK_PERPAGE, CreationResult, FilterDescriptor, ListingResult, PageWindow

logger = logging.getLogger(__name__)

KEYWORD_CONFLICT = "error:keyword"


def run_listing(store: LinkStore, descriptor: FilterDescriptor) -> ListingResult:
    """
    Count and fetch one page of links.

    `total_items_clicks` is None when no clause is active; the page then shows
    only the overall stats, which double as the filtered totals.
    """
    total_links, total_clicks = store.count([])
    if descriptor.clauses:
        total_items, total_items_clicks = store.count(descriptor.clauses)
    else:
        total_items, total_items_clicks = total_links, None

    if descriptor.is_bookmark:
        window = PageWindow(offset=0, limit=BOOKMARK_PERPAGE, total_pages=1, display_from=1, display_to=1)
    else:
        window = paginate(descriptor.page, descriptor.perpage, total_items, default_perpage=descriptor.perpage)

    rows = store.query(descriptor.clauses, descriptor.sort_by, descriptor.sort_order, window.offset, window.limit)
    logger.debug(
        "listing clauses=%d page=%d perpage=%d total_items=%d rows=%d",
        len(descriptor.clauses),
        descriptor.page,
        window.limit,
        total_items,
        len(rows),
    )
    return ListingResult(
        rows=rows,
        total_items=total_items,
        total_items_clicks=total_items_clicks,
        total_links=total_links,
        total_clicks=total_clicks,
        window=window,
    )


def run_bookmarklet(store: LinkStore, url: str, keyword: str = "", title: str = "", ip: str = "") -> CreationResult:
    """
    Create a link from bookmarklet parameters.

    A taken keyword is retried once with an auto-generated one; the first
    failure message is appended in parentheses to the retry's message.
    """
    result = store.create(url, keyword, title, ip)
    if result.status == "fail" and result.code == KEYWORD_CONFLICT:
        first_message = result.message
        logger.info("bookmarklet keyword taken keyword=%s, retrying without keyword", keyword)
        result = store.create(url, "", title, ip)
        result.message = f"{result.message} ({first_message})"

    logger.info("bookmarklet status=%s code=%s keyword=%s", result.status, result.code, result.keyword)
    return result
