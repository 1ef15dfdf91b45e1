from .catalog import DEFAULT_DOMAIN, CatalogRegistry, NoopPlural, n_noop, nx_noop
from .formats import LocaleFormats, format_date, format_number

__all__ = [
    "DEFAULT_DOMAIN",
    "CatalogRegistry",
    "NoopPlural",
    "n_noop",
    "nx_noop",
    "LocaleFormats",
    "format_date",
    "format_number",
]
