"""
Guarded import of a single record as a Logseq page.

One import runs through these states:

    Idle -> Locked -> Checking -> Skipped
                               -> Persisting -> Linking (optional) -> Done

Locked is entered only if no other import for the same key is in flight;
otherwise the call returns immediately with a "guarded" outcome. The
registry entry is released on every path out of Locked, including
exceptions. Every invocation that gets past the guard emits exactly one
notice: skipped, imported or failed.
"""

from __future__ import annotations

import logging

from ..errors import ContentAppendFailure, PersistFailure
from ..logging_utils import log_event
from ..notices import Notifier
from ..store.base import PageStore
from .existence import ExistenceChecker
from .formatter import ABSTRACT_HEADING, importable_fields, page_properties
from .registry import InFlightRegistry
from .types import ImportOutcome, ImportStatus, Page, Record

logger = logging.getLogger(__name__)


class ImportCoordinator:
    """Imports records into the knowledge base at most once per key.

    Attributes:
        registry: Keys of imports currently in flight; share one instance
                  between every coordinator that must not race
    """

    def __init__(
        self,
        store: PageStore,
        checker: ExistenceChecker,
        notifier: Notifier,
        registry: InFlightRegistry | None = None,
    ):
        self._store = store
        self._checker = checker
        self._notifier = notifier
        self.registry = registry if registry is not None else InFlightRegistry()

    async def import_record(self, record: Record, link_target: str | None = None) -> ImportOutcome:
        """Import one record unless it is already present or in flight.

        Args:
            record: The record to import
            link_target: Optional block uuid; a ``[[page]]`` reference is
                         inserted after it once the page exists

        Returns:
            ImportOutcome describing which terminal state was reached
        """
        if not self.registry.try_acquire(record.key):
            log_event(
                logger,
                "Import already in flight, ignoring",
                event="import_guard",
                key=record.key,
            )
            return ImportOutcome(key=record.key, status=ImportStatus.GUARDED)

        log_event(logger, "Import start", event="import_start", key=record.key)
        try:
            return await self._run(record, link_target)
        except Exception as exc:  # noqa: BLE001
            error = str(exc) or type(exc).__name__
            log_event(
                logger,
                "Import failed",
                level=logging.ERROR,
                event="import_failed",
                key=record.key,
                error=f"{type(exc).__name__}: {exc}",
            )
            await self._notifier.error(f"Failed to import: {error}")
            return ImportOutcome(key=record.key, status=ImportStatus.FAILED, error=error)
        finally:
            self.registry.release(record.key)
            log_event(logger, "Import end", level=logging.DEBUG, event="import_end", key=record.key)

    async def _run(self, record: Record, link_target: str | None) -> ImportOutcome:
        # Re-check right before writing: the listing may be stale.
        if await self._checker.exists(record):
            log_event(logger, "Record already present", event="import_skipped", key=record.key)
            await self._notifier.warning(f'Item already exists: "{record.display_title}"')
            return ImportOutcome(key=record.key, status=ImportStatus.SKIPPED)

        fields = importable_fields(record)
        properties = page_properties(record, fields)
        page = await self._store.create_page(
            fields.page_title,
            properties.to_logseq(),
            redirect=False,
            create_first_block=False,
        )
        if page is None:
            raise PersistFailure(fields.page_title)

        outcome = ImportOutcome(key=record.key, status=ImportStatus.IMPORTED, page=page)
        if fields.markdown_abstract:
            outcome.abstract_appended = await self._append_abstract(page, fields.markdown_abstract)
        if link_target:
            outcome.linked = await self._insert_link(link_target, fields.page_title, record.key)

        log_event(
            logger,
            "Import done",
            event="import_done",
            key=record.key,
            page=page.original_name or page.name,
            page_uuid=page.uuid,
        )
        await self._notifier.success(f"Imported: {record.display_title}")
        return outcome

    async def _append_abstract(self, page: Page, markdown: str) -> bool:
        """Append the abstract block; a failure keeps the page and is only logged."""
        try:
            await self._store.append_nested_block(page, ABSTRACT_HEADING, [markdown])
        except Exception as exc:  # noqa: BLE001
            failure = ContentAppendFailure(page.original_name or page.name, exc)
            log_event(
                logger,
                str(failure),
                level=logging.WARNING,
                event="content_append_failed",
                page_uuid=page.uuid,
            )
            return False
        return True

    async def _insert_link(self, block_uuid: str, page_title: str, key: str) -> bool:
        try:
            await self._store.insert_link(block_uuid, page_title)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                "Reference link insertion failed",
                level=logging.WARNING,
                event="link_failed",
                key=key,
                block_uuid=block_uuid,
                error=f"{type(exc).__name__}: {exc}",
            )
            return False
        return True
