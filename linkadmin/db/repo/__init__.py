"""Repository layer: link row store contract.

The SQLAlchemy implementation lives in `links_sql`; importing it opens the
DB engine, so it is not re-exported here.
"""

__all__ = ["LinkStore"]

from .link_store import LinkStore  # noqa: F401
