"""Typed exceptions raised by link stores (no logic)."""


class LinkStoreError(Exception):
    """Base for every error a LinkStore raises."""


class ValidationError(LinkStoreError):
    """Clause or paging parameters outside the store's closed sets (column, operator, sort field, window)."""


class StorageError(LinkStoreError):
    """The backing database failed; the message carries the driver error."""
