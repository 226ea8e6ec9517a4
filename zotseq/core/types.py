"""
Core data types for zotseq.

This module defines the data structures shared by every pipeline stage:
- Creator / Record: Zotero items as returned by the local API
- ImportableFields: display and persistence fields derived from a Record
- PageProperties: the fixed property set written onto an imported page
- Page: handle for a Logseq page
- ResultEntry: one search result paired with its existence flag
- ImportOutcome: the terminal state of one import attempt
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Creator:
    """One contributor of a Zotero item.

    Attributes:
        creator_type: Role label ("author", "editor", ...)
        first_name: Given name, when the two-field form is used
        last_name: Family name, when the two-field form is used
        name: Full name, when the single-field form is used
    """
    creator_type: str
    first_name: str | None = None
    last_name: str | None = None
    name: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Creator:
        return cls(
            creator_type=data.get("creatorType", ""),
            first_name=data.get("firstName") or None,
            last_name=data.get("lastName") or None,
            name=data.get("name") or None,
        )


@dataclass(frozen=True)
class Record:
    """A bibliographic item from the Zotero library.

    The key is issued by Zotero and is the identity used for dedupe.
    Records are never mutated locally.

    Attributes:
        key: Stable Zotero item key
        version: Zotero item version
        item_type: Category label (e.g. "journalArticle")
        title: Optional display title
        creators: Ordered contributors
        date: Free-text date string, not necessarily ISO
        url: Optional URL
        abstract: Optional abstract, may contain inline HTML tags
        raw: The item's untouched "data" mapping
    """
    key: str
    version: int = 0
    item_type: str = ""
    title: str | None = None
    creators: tuple[Creator, ...] = ()
    date: str | None = None
    url: str | None = None
    abstract: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Record:
        """Build a Record from a Zotero API item (``{"key", "version", "data"}``)."""
        data = item.get("data") or {}
        key = item.get("key") or data.get("key")
        if not key:
            raise ValueError("Zotero item is missing its key")
        return cls(
            key=key,
            version=int(item.get("version") or data.get("version") or 0),
            item_type=data.get("itemType", ""),
            title=data.get("title") or None,
            creators=tuple(Creator.from_api(c) for c in data.get("creators") or []),
            date=data.get("date") or None,
            url=data.get("url") or None,
            abstract=data.get("abstractNote") or None,
            raw=dict(data),
        )

    @property
    def display_title(self) -> str:
        """Title for notices, falling back to the key."""
        return self.title or self.key


@dataclass(frozen=True)
class ImportableFields:
    """Fields derived from a Record for display and persistence."""
    page_title: str
    authors_display: str
    year: int | None
    markdown_abstract: str


@dataclass(frozen=True)
class PageProperties:
    """Properties written onto a newly created page.

    Each field has one fixed serialization; see to_logseq().
    """
    title: str
    authors: str
    year: int | None
    item_type: str
    external_id: str
    external_link: str
    url: str

    def to_logseq(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "authors": self.authors,
            "year": self.year if self.year is not None else "",
            "item-type": self.item_type,
            "zotero-key": self.external_id,
            "zotero-link": self.external_link,
            "url": self.url,
        }


@dataclass(frozen=True)
class Page:
    """Handle for a Logseq page.

    Attributes:
        uuid: Page entity uuid, used as the parent for appended blocks
        name: Lower-cased page name as Logseq stores it
        original_name: Page name as created
    """
    uuid: str
    name: str
    original_name: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Page:
        return cls(
            uuid=str(data.get("uuid", "")),
            name=data.get("name") or data.get("originalName") or "",
            original_name=data.get("originalName") or data.get("original-name"),
        )


@dataclass
class ResultEntry:
    """One search result and whether it already has a page."""
    record: Record
    exists: bool


class ImportStatus(str, Enum):
    GUARDED = "guarded"
    SKIPPED = "skipped"
    IMPORTED = "imported"
    FAILED = "failed"


@dataclass
class ImportOutcome:
    """Terminal state of one import invocation.

    Attributes:
        key: The record key the import was attempted for
        status: guarded (another import in flight), skipped (already present),
                imported, or failed
        page: The created page, for imported outcomes
        error: Failure description, for failed outcomes
        abstract_appended: Whether the abstract block was written
        linked: Whether a reference link was inserted
    """
    key: str
    status: ImportStatus
    page: Page | None = None
    error: str | None = None
    abstract_appended: bool = False
    linked: bool = False
