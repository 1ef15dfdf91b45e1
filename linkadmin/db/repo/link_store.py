"""Abstract interface for the link row store (no implementation here)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from .schemas import Clause, CreationResult, LinkRecord


class LinkStore(ABC):
    """
    Contract consumed by the admin listing and the bookmarklet.

    Implementations must:
      - AND all clauses together and bind every clause value as a parameter,
      - reject columns/operators outside the closed sets with ValidationError,
      - sort deterministically (ties broken by keyword),
      - never raise on creation conflicts: report them through CreationResult.
    """

    @abstractmethod
    def count(self, clauses: Sequence[Clause]) -> tuple[int, int]:
        """Return (number of links, sum of clicks) matching the clauses."""
        raise NotImplementedError

    @abstractmethod
    def query(
        self,
        clauses: Sequence[Clause],
        sort_by: str,
        sort_order: str,
        offset: int,
        limit: int,
    ) -> list[LinkRecord]:
        """Return at most `limit` rows starting at `offset` in (sort_by, sort_order) order."""
        raise NotImplementedError

    @abstractmethod
    def create(self, url: str, keyword: str = "", title: str = "", ip: str = "") -> CreationResult:
        """Insert a new short link; an empty keyword asks the store to pick one."""
        raise NotImplementedError

    @abstractmethod
    def get(self, keyword: str) -> LinkRecord | None:
        """Return the link stored under `keyword`, if any."""
        raise NotImplementedError
