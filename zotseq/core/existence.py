"""
Existence checks: does a record already have a page in the graph?

The primary strategy looks for a page whose ``zotero-key`` property equals
the record key. Only when that query itself fails does the checker fall
back to looking up a page named after the record title. The fallback is
degraded mode: a page whose title was edited after import is not found,
so it may report "not found" for a record that was imported.

A check never raises. If both strategies fail it reports "not found",
preferring a possible re-import over silently blocking one.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from ..errors import ExistenceCheckDegraded
from ..logging_utils import log_event
from ..store.base import PageStore
from .formatter import IDENTITY_PROPERTY, lookup_title
from .types import Record

logger = logging.getLogger(__name__)

STRATEGY_PROPERTY = "property"
STRATEGY_TITLE = "title"
STRATEGY_FAILED = "failed"


@dataclass(frozen=True)
class ExistenceCheck:
    """Result of one existence check.

    Attributes:
        exists: Whether a page was found
        strategy: Which lookup answered: "property", "title" (degraded) or
                  "failed" (both lookups raised, reported as not found)
    """
    exists: bool
    strategy: str

    @property
    def degraded(self) -> bool:
        return self.strategy != STRATEGY_PROPERTY


class ExistenceChecker:
    def __init__(self, store: PageStore, identity_property: str = IDENTITY_PROPERTY):
        self._store = store
        self._identity_property = identity_property

    async def exists(self, record: Record) -> bool:
        return (await self.check(record)).exists

    async def check(self, record: Record) -> ExistenceCheck:
        try:
            found = await self._by_property(record)
            return ExistenceCheck(exists=found, strategy=STRATEGY_PROPERTY)
        except ExistenceCheckDegraded as degraded:
            log_event(
                logger,
                "Property lookup failed, falling back to title lookup",
                level=logging.WARNING,
                event="existence_degraded",
                key=record.key,
                error=str(degraded.cause),
            )

        try:
            page = await self._store.find_page_by_title(lookup_title(record))
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                "Title lookup failed, treating record as not found",
                level=logging.WARNING,
                event="existence_failed",
                key=record.key,
                error=f"{type(exc).__name__}: {exc}",
            )
            return ExistenceCheck(exists=False, strategy=STRATEGY_FAILED)
        return ExistenceCheck(exists=page is not None, strategy=STRATEGY_TITLE)

    async def _by_property(self, record: Record) -> bool:
        try:
            pages = await self._store.find_pages_by_property(self._identity_property, record.key)
        except Exception as exc:  # noqa: BLE001
            raise ExistenceCheckDegraded(record.key, exc) from exc
        # More than one page means the invariant was already broken
        # elsewhere; that still counts as present.
        return len(pages) > 0
