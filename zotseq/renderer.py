"""
Console rendering of a search result set.

Each entry shows its 1-based number (used by ``--import N`` and the
interactive prompt), whether it is already in the graph, the title with
its item type, and the author line with year.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .core.formatter import authors_display, extract_year
from .core.result_set import ResultSet
from .core.types import ResultEntry


def render_results(results: ResultSet, console: Console) -> None:
    """Print the result table followed by the new/duplicate summary."""
    if not len(results):
        return

    title = f"Zotero results for {results.query!r}" if results.query else "Zotero results"
    table = Table(title=title, show_lines=False, expand=False)
    table.add_column("#", justify="right", style="bold")
    table.add_column("Status", no_wrap=True)
    table.add_column("Title")
    table.add_column("Authors (year)", style="dim")
    table.add_column("Key", style="dim", no_wrap=True)

    for number, entry in enumerate(results, start=1):
        table.add_row(
            str(number),
            _status_cell(entry),
            _title_cell(entry),
            describe_authors(entry),
            entry.record.key,
        )

    console.print(table)
    new_count, existing_count = results.summary()
    console.print(f"New items: {new_count}  Already in graph: {existing_count}")


def describe_authors(entry: ResultEntry) -> str:
    record = entry.record
    authors = authors_display(record.creators) or "No authors"
    year = extract_year(record.date)
    return f"{authors} ({year if year is not None else 'No date'})"


def _status_cell(entry: ResultEntry) -> Text:
    if entry.exists:
        return Text("✓ In graph", style="green")
    return Text("New", style="bold red")


def _title_cell(entry: ResultEntry) -> Text:
    text = Text(entry.record.title or "Untitled")
    if entry.record.item_type:
        text.append(f"  [{entry.record.item_type}]", style="dim")
    return text
