"""Search results paired with their existence flags, scoped to one search."""

from __future__ import annotations

import asyncio
from typing import Iterator

from .existence import ExistenceChecker
from .types import Record, ResultEntry


class ResultSet:
    """Ordered collection of ResultEntry for one search session.

    populate() fills it with one concurrent existence check per record;
    patch() flips a single entry after an import so the rest of the set
    does not have to be checked again.
    """

    def __init__(self, checker: ExistenceChecker, query: str = ""):
        self._checker = checker
        self.query = query
        self.entries: list[ResultEntry] = []

    async def populate(self, records: list[Record]) -> list[ResultEntry]:
        """Check every record concurrently; entries keep the input order."""
        flags = await asyncio.gather(*(self._checker.exists(record) for record in records))
        self.entries = [
            ResultEntry(record=record, exists=bool(flag)) for record, flag in zip(records, flags)
        ]
        return self.entries

    def patch(self, key: str, exists: bool) -> bool:
        """Set the existence flag of the entry for ``key``.

        Returns:
            True if an entry was updated, False if no entry has that key
        """
        entry = self.get(key)
        if entry is None:
            return False
        entry.exists = exists
        return True

    def get(self, key: str) -> ResultEntry | None:
        for entry in self.entries:
            if entry.record.key == key:
                return entry
        return None

    def by_number(self, number: int) -> ResultEntry | None:
        """Return the entry at a 1-based position, as shown in the result table."""
        if number < 1 or number > len(self.entries):
            return None
        return self.entries[number - 1]

    def first_new(self) -> ResultEntry | None:
        for entry in self.entries:
            if not entry.exists:
                return entry
        return None

    @property
    def new_entries(self) -> list[ResultEntry]:
        return [entry for entry in self.entries if not entry.exists]

    @property
    def existing_entries(self) -> list[ResultEntry]:
        return [entry for entry in self.entries if entry.exists]

    def summary(self) -> tuple[int, int]:
        """Return (new, existing) counts."""
        return len(self.new_entries), len(self.existing_entries)

    def __iter__(self) -> Iterator[ResultEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
