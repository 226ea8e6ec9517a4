"""
Abstract base class for knowledge-base page stores.

New backends should inherit from PageStore and implement the page lookup,
page creation and block insertion methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..core.types import Page


class PageStore(ABC):
    """Interface to the knowledge base that owns pages and blocks."""

    @abstractmethod
    async def find_pages_by_property(self, key: str, value: str) -> list[Any]:
        """Return every page whose property ``key`` equals ``value``.

        Raises when the query mechanism itself is unavailable, so callers
        can tell "no match" apart from "could not ask".
        """
        raise NotImplementedError

    @abstractmethod
    async def find_page_by_title(self, title: str) -> Page | None:
        """Return the page with this exact name, or None."""
        raise NotImplementedError

    @abstractmethod
    async def create_page(
        self,
        title: str,
        properties: dict[str, Any],
        *,
        redirect: bool = False,
        create_first_block: bool = False,
    ) -> Page | None:
        """Create a page with properties.

        Returns:
            The created page, or None when the store declined to create it
        """
        raise NotImplementedError

    @abstractmethod
    async def append_nested_block(self, page: Page, content: str, children: list[str]) -> None:
        """Append one top-level block with one child block per ``children`` item."""
        raise NotImplementedError

    @abstractmethod
    async def insert_link(self, block_uuid: str, page_title: str) -> None:
        """Insert a ``[[page_title]]`` reference as a sibling after a block."""
        raise NotImplementedError

    @abstractmethod
    async def show_message(self, message: str, status: str) -> None:
        """Show a transient notice inside the host application."""
        raise NotImplementedError
