"""Shared fakes for the knowledge base and notices."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from zotseq.core.types import Creator, Page, Record
from zotseq.notices import Notice, Notifier
from zotseq.store.base import PageStore


class FakePageStore(PageStore):
    """In-memory page store that records every call.

    Pages created through create_page become visible to the property
    lookup, like a real graph.
    """

    def __init__(self) -> None:
        self.pages: dict[str, dict[str, Any]] = {}
        self.create_calls: list[tuple[str, dict[str, Any], bool, bool]] = []
        self.append_calls: list[tuple[Page, str, list[str]]] = []
        self.link_calls: list[tuple[str, str]] = []
        self.messages: list[tuple[str, str]] = []
        self.property_error: Exception | None = None
        self.title_error: Exception | None = None
        self.create_error: Exception | None = None
        self.append_error: Exception | None = None
        self.link_error: Exception | None = None
        self.create_returns_none = False
        self.create_delay = 0.0

    def add_page(self, title: str, properties: dict[str, Any] | None = None) -> Page:
        page = Page(uuid=f"uuid-{len(self.pages) + 1}", name=title.lower(), original_name=title)
        self.pages[title] = {"page": page, "properties": dict(properties or {})}
        return page

    async def find_pages_by_property(self, key: str, value: str) -> list[Any]:
        if self.property_error is not None:
            raise self.property_error
        return [
            item["page"]
            for item in self.pages.values()
            if item["properties"].get(key) == value
        ]

    async def find_page_by_title(self, title: str) -> Page | None:
        if self.title_error is not None:
            raise self.title_error
        item = self.pages.get(title)
        return item["page"] if item else None

    async def create_page(
        self,
        title: str,
        properties: dict[str, Any],
        *,
        redirect: bool = False,
        create_first_block: bool = False,
    ) -> Page | None:
        self.create_calls.append((title, properties, redirect, create_first_block))
        if self.create_delay:
            await asyncio.sleep(self.create_delay)
        if self.create_error is not None:
            raise self.create_error
        if self.create_returns_none:
            return None
        return self.add_page(title, properties)

    async def append_nested_block(self, page: Page, content: str, children: list[str]) -> None:
        self.append_calls.append((page, content, children))
        if self.append_error is not None:
            raise self.append_error

    async def insert_link(self, block_uuid: str, page_title: str) -> None:
        self.link_calls.append((block_uuid, page_title))
        if self.link_error is not None:
            raise self.link_error

    async def show_message(self, message: str, status: str) -> None:
        self.messages.append((message, status))


class CollectingNotifier(Notifier):
    def __init__(self) -> None:
        self.notices: list[Notice] = []

    async def notify(self, notice: Notice) -> None:
        self.notices.append(notice)

    def kinds(self) -> list[str]:
        return [notice.kind.value for notice in self.notices]


def make_record(
    key: str = "ABCD1234",
    title: str | None = "Deglobalization and Its Discontents",
    abstract: str | None = "<p>A <i>short</i> abstract.</p>",
    date: str | None = "March 2021",
    **kwargs: Any,
) -> Record:
    creators = kwargs.pop(
        "creators",
        (
            Creator(creator_type="author", first_name="Ada", last_name="Lovelace"),
            Creator(creator_type="editor", name="Bob"),
        ),
    )
    return Record(
        key=key,
        version=kwargs.pop("version", 1),
        item_type=kwargs.pop("item_type", "journalArticle"),
        title=title,
        creators=tuple(creators),
        date=date,
        url=kwargs.pop("url", "https://example.com/paper"),
        abstract=abstract,
    )


def zotero_item(key: str, title: str | None = "Untitled work", **data: Any) -> dict[str, Any]:
    """Build a Zotero API item payload."""
    payload = {"key": key, "version": 3, "itemType": "journalArticle", **data}
    if title is not None:
        payload["title"] = title
    return {"key": key, "version": 3, "data": payload}


@pytest.fixture
def store() -> FakePageStore:
    return FakePageStore()


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()
