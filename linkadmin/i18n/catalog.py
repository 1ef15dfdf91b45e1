"""gettext-style translation catalogs keyed by domain.

A `CatalogRegistry` owns the `domain -> translations` map and the resolved
locale. Lookups never fail: a domain without a catalog answers with a shared
`gettext.NullTranslations`, which echoes the source string and applies the
English `n == 1` plural rule.
"""

from __future__ import annotations

import gettext
import logging
import os
import struct
import threading
from dataclasses import dataclass
from pathlib import Path

from markupsafe import Markup, escape

from linkadmin.config import DEFAULT_LOCALE

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "default"

Translations = gettext.NullTranslations

_NOOP = gettext.NullTranslations()


@dataclass(frozen=True, slots=True)
class NoopPlural:
    """Plural pair registered now, translated later with a known count."""

    singular: str
    plural: str
    context: str | None = None
    domain: str | None = None


def n_noop(singular: str, plural: str, domain: str | None = None) -> NoopPlural:
    return NoopPlural(singular, plural, None, domain)


def nx_noop(singular: str, plural: str, context: str, domain: str | None = None) -> NoopPlural:
    return NoopPlural(singular, plural, context, domain)


class CatalogRegistry:
    """
    Process-wide translation state, passed explicitly to whoever renders text.

    Writers (load/unload/set_locale) serialize on a lock; lookups read the
    current dict without locking, since a domain entry is replaced atomically.
    """

    def __init__(self, locale: str | None = None, lang_dir: str | os.PathLike | None = None):
        self._configured_locale = locale
        self._locale: str | None = None
        self.lang_dir = Path(lang_dir) if lang_dir else None
        self._domains: dict[str, Translations] = {}
        self._lock = threading.Lock()

    # ---------- locale ----------

    def get_locale(self) -> str:
        """Configured locale, else LINKADMIN_LANG, else en_US; cached after first call."""
        locale = self._locale
        if locale is not None:
            return locale
        with self._lock:
            if self._locale is None:
                self._locale = self._configured_locale or os.getenv("LINKADMIN_LANG") or DEFAULT_LOCALE
            return self._locale

    def set_locale(self, locale: str | None) -> None:
        with self._lock:
            self._configured_locale = locale
            self._locale = None

    # ---------- catalogs ----------

    def translations_for_domain(self, domain: str = DEFAULT_DOMAIN) -> Translations:
        return self._domains.get(domain, _NOOP)

    def is_loaded(self, domain: str) -> bool:
        return domain in self._domains

    def load_catalog(self, domain: str, path: str | os.PathLike) -> bool:
        """
        Load a compiled .mo file into `domain`.

        When the domain already has a catalog, its entries keep precedence and the
        new file only fills missing keys. Returns False (and logs) on unreadable or
        malformed files.
        """
        path = Path(path)
        if not path.is_file() or not os.access(path, os.R_OK):
            logger.warning("catalog not readable domain=%s path=%s", domain, path)
            return False

        try:
            with path.open("rb") as fp:
                mo = gettext.GNUTranslations(fp)
        except (OSError, struct.error, UnicodeDecodeError, ValueError, LookupError) as e:
            logger.warning("catalog malformed domain=%s path=%s error=%s", domain, path, e)
            return False

        with self._lock:
            current = self._domains.get(domain)
            if current is not None:
                current.add_fallback(mo)
            else:
                self._domains[domain] = mo
        logger.info("catalog loaded domain=%s path=%s merged=%s", domain, path, current is not None)
        return True

    def unload_catalog(self, domain: str) -> bool:
        with self._lock:
            removed = self._domains.pop(domain, None)
        if removed is not None:
            logger.info("catalog unloaded domain=%s", domain)
        return removed is not None

    def load_default_catalog(self) -> bool:
        """Load `<lang_dir>/<locale>.mo` into the default domain."""
        if self.lang_dir is None:
            return False
        mofile = self.lang_dir / f"{self.get_locale()}.mo"
        if not mofile.exists():
            logger.debug("no catalog for locale=%s in %s", self.get_locale(), self.lang_dir)
            return False
        return self.load_catalog(DEFAULT_DOMAIN, mofile)

    def available_languages(self, directory: str | os.PathLike | None = None) -> list[str]:
        directory = Path(directory) if directory else self.lang_dir
        if directory is None or not directory.is_dir():
            return []
        return sorted(p.stem for p in directory.glob("*.mo"))

    # ---------- lookups ----------

    def translate(self, text: str, domain: str = DEFAULT_DOMAIN) -> str:
        return self.translations_for_domain(domain).gettext(text)

    def translate_with_context(self, text: str, context: str, domain: str = DEFAULT_DOMAIN) -> str:
        return self.translations_for_domain(domain).pgettext(context, text)

    def translate_plural(
        self,
        single: str,
        plural: str,
        number: int,
        context: str | None = None,
        domain: str = DEFAULT_DOMAIN,
    ) -> str:
        translations = self.translations_for_domain(domain)
        if context is None:
            return translations.ngettext(single, plural, number)
        return translations.npgettext(context, single, plural, number)

    def translate_nooped_plural(self, noop: NoopPlural, count: int, domain: str = DEFAULT_DOMAIN) -> str:
        return self.translate_plural(noop.singular, noop.plural, count, noop.context, noop.domain or domain)

    def translate_user_role(self, name: str) -> str:
        return self.translate_with_context(name, "User role")

    def format_pattern(self, pattern: str, *args, domain: str = DEFAULT_DOMAIN) -> str:
        """Translate `pattern`, then %-format it with `args`."""
        translated = self.translate(pattern, domain)
        return translated % args if args else translated

    # ---------- escaped variants ----------

    def esc_html(self, text: str, domain: str = DEFAULT_DOMAIN) -> Markup:
        return escape(self.translate(text, domain))

    def esc_html_x(self, text: str, context: str, domain: str = DEFAULT_DOMAIN) -> Markup:
        return escape(self.translate_with_context(text, context, domain))
