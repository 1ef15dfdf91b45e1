"""Flask app factory and the admin index blueprint (listing + bookmarklet)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from flask import Blueprint, Flask, current_app, jsonify, render_template, request, url_for

from linkadmin.admin.filters import (
    SEARCH_IN_LABELS,
    SORT_BY_LABELS,
    SORT_ORDER_LABELS,
    bookmark_descriptor,
    build_descriptor,
)
from linkadmin.admin.listing import run_bookmarklet, run_listing
from linkadmin.config import Settings
from linkadmin.db.paths import lang_dir
from linkadmin.db.repo.errors import StorageError, ValidationError
from linkadmin.db.repo.link_store import LinkStore
from linkadmin.i18n import CatalogRegistry, LocaleFormats, format_date, format_number
from linkadmin.logging_utils import setup_logging

logger = logging.getLogger(__name__)

ROW_DATE_MASK = "M d, Y H:i"
JSONP_MARKER = "yourls"

bp = Blueprint("admin", __name__, url_prefix="/admin")


@dataclass
class AdminContext:
    settings: Settings
    store: LinkStore
    registry: CatalogRegistry
    formats: LocaleFormats


def _ctx() -> AdminContext:
    return current_app.extensions["linkadmin"]


def _template_helpers(ctx: AdminContext) -> dict:
    reg = ctx.registry
    return {
        "_": reg.translate,
        "_x": reg.translate_with_context,
        "_n": reg.translate_plural,
        "fmt_number": partial(format_number, formats=ctx.formats),
        "fmt_date": partial(format_date, formats=ctx.formats, timezone=ctx.settings.timezone),
        "row_date_mask": ROW_DATE_MASK,
        "text_direction": ctx.formats.text_direction,
        "locale": reg.get_locale(),
        "search_in_labels": SEARCH_IN_LABELS,
        "sort_by_labels": SORT_BY_LABELS,
        "sort_order_labels": SORT_ORDER_LABELS,
        "site_url": ctx.settings.site_url,
    }


def _page_url(page: int) -> str:
    params = request.args.to_dict()
    params["page"] = page
    return url_for("admin.index", **params)


@bp.route("/", methods=["GET"])
@bp.route("/index.php", methods=["GET"])
def index():
    ctx = _ctx()
    if "u" in request.args:
        return _bookmarklet(ctx)

    descriptor = build_descriptor(request.args, default_perpage=ctx.settings.perpage, registry=ctx.registry)
    listing = run_listing(ctx.store, descriptor)
    return render_template(
        "index.html",
        descriptor=descriptor,
        listing=listing,
        result=None,
        page_url=_page_url,
        **_template_helpers(ctx),
    )


def _bookmarklet(ctx: AdminContext):
    args = request.args
    result = run_bookmarklet(
        ctx.store,
        args.get("u", ""),
        args.get("k", ""),
        args.get("t", ""),
        ip=request.remote_addr or "",
    )

    if args.get("jsonp") == JSONP_MARKER:
        return jsonify({"short_url": result.shorturl or "", "message": result.message})

    descriptor = bookmark_descriptor(result.url)
    listing = run_listing(ctx.store, descriptor)
    return render_template(
        "index.html",
        descriptor=descriptor,
        listing=listing,
        result=result,
        share_text=args.get("s", ""),
        page_url=_page_url,
        **_template_helpers(ctx),
    )


@bp.errorhandler(StorageError)
def _storage_error(e: StorageError):
    logger.error("storage error on %s: %s", request.path, e)
    return _ctx().registry.translate("Database error, please try again later."), 503


@bp.errorhandler(ValidationError)
def _validation_error(e: ValidationError):
    logger.warning("rejected query on %s: %s", request.path, e)
    return _ctx().registry.translate("Invalid listing parameters."), 400


def create_app(
    settings: Settings | None = None,
    *,
    store: LinkStore | None = None,
    registry: CatalogRegistry | None = None,
) -> Flask:
    """Build the admin app; `store`/`registry` are injectable for tests."""
    settings = settings or Settings.from_env()
    setup_logging(
        enabled=settings.log_enabled,
        debug=settings.debug,
        sql_debug=settings.sql_debug,
        file_path=settings.log_file,
    )

    if registry is None:
        registry = CatalogRegistry(locale=settings.locale, lang_dir=lang_dir())
        registry.load_default_catalog()

    if store is None:
        # deferred: importing the SQL store opens the DB engine
        from linkadmin.db.repo.links_sql import SqlAlchemyLinkStore  # noqa: PLC0415

        store = SqlAlchemyLinkStore(settings.site_url, translate=registry.translate)

    app = Flask(__name__)
    app.extensions["linkadmin"] = AdminContext(
        settings=settings,
        store=store,
        registry=registry,
        formats=LocaleFormats(registry),
    )
    app.register_blueprint(bp)
    logger.info("admin app ready locale=%s perpage=%d", registry.get_locale(), settings.perpage)
    return app
