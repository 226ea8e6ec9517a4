"""
Search-and-import orchestration.

This module is the single entry point the CLI (or any other trigger)
uses. The console-driven, auto-import and selection-driven ways of using
the tool are the same flow with a different selection step:
1. Search Zotero and check every result against the graph
2. Render the result set
3. Select entries (by number, first new entry, or interactive prompt)
4. Import each selection through the shared ImportCoordinator
5. Patch the result set for every imported entry
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable

from rich.console import Console
from rich.prompt import Prompt

from .config import AppConfig, get_logseq_token
from .core.existence import ExistenceChecker
from .core.importer import ImportCoordinator
from .core.registry import InFlightRegistry
from .core.result_set import ResultSet
from .core.types import ImportOutcome, ImportStatus, Record
from .errors import ConfigError, InvalidQuery, NoResults, StoreError, StoreUnavailable
from .fetch.zotero import ZoteroClient
from .logging_utils import log_event, setup_logging
from .notices import Notifier, build_notifier
from .renderer import render_results
from .store.logseq import LogseqStore

logger = logging.getLogger(__name__)

PromptFn = Callable[[], str]


class SearchSession:
    """Holds the collaborators and the current result set for one user.

    A new search discards the previous result set. Imports go through the
    coordinator, whose registry is shared by everything the session does.
    """

    def __init__(
        self,
        fetcher: ZoteroClient,
        checker: ExistenceChecker,
        coordinator: ImportCoordinator,
        notifier: Notifier,
    ):
        self.fetcher = fetcher
        self.checker = checker
        self.coordinator = coordinator
        self.notifier = notifier
        self.results = ResultSet(checker)

    async def search(self, query: str) -> ResultSet:
        """Search Zotero and classify every result.

        Failures are reported as notices and leave an empty result set.
        """
        query = (query or "").strip()
        self.results = ResultSet(self.checker, query=query)

        if query:
            await self.notifier.info(f'Searching for: "{query}"...')
        try:
            records = await self.fetcher.search(query)
        except InvalidQuery as exc:
            await self.notifier.warning(str(exc))
            return self.results
        except NoResults:
            await self.notifier.warning("No results found")
            return self.results
        except StoreUnavailable as exc:
            await self.notifier.error(str(exc))
            return self.results
        except StoreError as exc:
            await self.notifier.error(f"Search error: {exc}")
            return self.results

        await self.results.populate(records)
        new_count, existing_count = self.results.summary()
        log_event(
            logger,
            "Results classified",
            event="results_classified",
            query=query,
            new=new_count,
            existing=existing_count,
        )
        if new_count == 0:
            await self.notifier.warning("All search results are already in your graph!")
        else:
            await self.notifier.success(
                f"Found {new_count} new item(s) and {existing_count} duplicate(s)"
            )
        return self.results

    async def import_record(self, record: Record, link_target: str | None = None) -> ImportOutcome:
        """Import a record and patch its result entry if it is now present."""
        outcome = await self.coordinator.import_record(record, link_target=link_target)
        if outcome.status in (ImportStatus.IMPORTED, ImportStatus.SKIPPED):
            self.results.patch(record.key, True)
        return outcome

    async def import_number(self, number: int, link_target: str | None = None) -> ImportOutcome | None:
        """Import the entry at a 1-based position of the current result set."""
        entry = self.results.by_number(number)
        if entry is None:
            if not len(self.results):
                await self.notifier.warning("No search results available. Run a search first.")
            else:
                await self.notifier.warning(
                    f"Invalid item number. Please use 1-{len(self.results)}"
                )
            return None
        return await self.import_record(entry.record, link_target)

    async def import_key(self, key: str, link_target: str | None = None) -> ImportOutcome | None:
        entry = self.results.get(key)
        if entry is None:
            await self.notifier.warning(f"No search result with key {key}")
            return None
        return await self.import_record(entry.record, link_target)

    async def import_first_new(self, link_target: str | None = None) -> ImportOutcome | None:
        entry = self.results.first_new()
        if entry is None:
            if len(self.results):
                await self.notifier.warning("All search results are already in your graph!")
            return None
        return await self.import_record(entry.record, link_target)

    async def fetch_and_import(self, key: str, link_target: str | None = None) -> ImportOutcome | None:
        """Fetch one item by key from Zotero and import it."""
        try:
            record = await self.fetcher.get_item(key)
        except InvalidQuery as exc:
            await self.notifier.warning(str(exc))
            return None
        except StoreUnavailable as exc:
            await self.notifier.error(str(exc))
            return None
        except StoreError as exc:
            await self.notifier.error(f"Lookup error for {key}: {exc}")
            return None
        return await self.import_record(record, link_target)


def build_session(
    cfg: AppConfig,
    console: Console | None = None,
    registry: InFlightRegistry | None = None,
) -> SearchSession:
    """Wire the Zotero client, Logseq store, notifier and coordinator from config.

    Raises:
        ConfigError: no Logseq API token is configured
    """
    token = get_logseq_token(cfg.logseq)
    if not token:
        raise ConfigError(
            f"Logseq API token is required. Set {cfg.logseq.token_env} "
            "or configure logseq.token in config."
        )
    store = LogseqStore(token, cfg.logseq)
    notifier = build_notifier(cfg.importing.notices, store, console)
    checker = ExistenceChecker(store)
    coordinator = ImportCoordinator(store, checker, notifier, registry)
    return SearchSession(ZoteroClient(cfg.zotero), checker, coordinator, notifier)


def run_search_and_import(
    query: str,
    cfg: AppConfig,
    select: Iterable[int] = (),
    auto_first_new: bool = False,
    interactive: bool = False,
    link_target: str | None = None,
    console: Console | None = None,
) -> ResultSet:
    """Run search-and-import for one query.

    Sets up logging, builds a session from config and runs the async flow
    to completion. Returns the final (patched) result set.
    """
    console = console or Console()
    setup_logging(cfg.logging)
    session = build_session(cfg, console)
    prompt = _console_prompt(console) if interactive else None
    return asyncio.run(
        search_and_import(
            session,
            query,
            select=select,
            auto_first_new=auto_first_new,
            prompt=prompt,
            link_target=link_target,
            console=console if cfg.importing.render_results else None,
        )
    )


def run_import_key(
    key: str,
    cfg: AppConfig,
    link_target: str | None = None,
    console: Console | None = None,
) -> ImportOutcome | None:
    """Fetch one Zotero item by key and import it."""
    console = console or Console()
    setup_logging(cfg.logging)
    session = build_session(cfg, console)
    return asyncio.run(session.fetch_and_import(key, link_target=link_target))


async def search_and_import(
    session: SearchSession,
    query: str,
    select: Iterable[int] = (),
    auto_first_new: bool = False,
    prompt: PromptFn | None = None,
    link_target: str | None = None,
    console: Console | None = None,
) -> ResultSet:
    """Async search-and-import flow over an existing session.

    Args:
        session: Session to search and import with
        query: Zotero quick-search string
        select: 1-based result numbers to import, in order
        auto_first_new: Import the first result not yet in the graph
        prompt: When given, called repeatedly for result numbers until it
                returns an empty string
        link_target: Block uuid to insert a reference link after
        console: When given, the result table is rendered to it

    Returns:
        The session's result set after all imports
    """
    results = await session.search(query)
    if not len(results):
        return results
    if console is not None:
        render_results(results, console)

    imported_any = False
    for number in select:
        outcome = await session.import_number(number, link_target=link_target)
        imported_any = imported_any or _changed(outcome)

    if auto_first_new:
        outcome = await session.import_first_new(link_target=link_target)
        imported_any = imported_any or _changed(outcome)

    if prompt is not None:
        imported_any = await _prompt_loop(session, prompt, link_target, console) or imported_any
    elif imported_any and console is not None:
        render_results(session.results, console)

    return session.results


async def _prompt_loop(
    session: SearchSession,
    prompt: PromptFn,
    link_target: str | None,
    console: Console | None,
) -> bool:
    imported_any = False
    while True:
        answer = (await asyncio.to_thread(prompt)).strip()
        if not answer:
            return imported_any
        if not answer.isdigit():
            await session.notifier.warning("Please enter a result number")
            continue
        outcome = await session.import_number(int(answer), link_target=link_target)
        if _changed(outcome):
            imported_any = True
            if console is not None:
                render_results(session.results, console)


def _changed(outcome: ImportOutcome | None) -> bool:
    return outcome is not None and outcome.status in (ImportStatus.IMPORTED, ImportStatus.SKIPPED)


def _console_prompt(console: Console) -> PromptFn:
    def ask() -> str:
        return Prompt.ask("Import # (Enter to finish)", default="", show_default=False, console=console)

    return ask