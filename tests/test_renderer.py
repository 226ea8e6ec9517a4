from rich.console import Console

from zotseq.core.existence import ExistenceChecker
from zotseq.core.result_set import ResultSet
from zotseq.core.types import Record, ResultEntry
from zotseq.renderer import describe_authors, render_results

from conftest import make_record


def test_render_results_shows_status_and_summary(store):
    results = ResultSet(ExistenceChecker(store), query="trade")
    results.entries = [
        ResultEntry(record=make_record(key="K1", title="Trade wars"), exists=True),
        ResultEntry(record=make_record(key="K2", title="Supply chains"), exists=False),
    ]
    console = Console(record=True, width=160)

    render_results(results, console)
    text = console.export_text()

    assert "Zotero results for 'trade'" in text
    assert "Trade wars" in text
    assert "In graph" in text
    assert "New" in text
    assert "Ada Lovelace (2021)" in text
    assert "New items: 1  Already in graph: 1" in text


def test_render_results_empty_prints_nothing(store):
    console = Console(record=True)
    render_results(ResultSet(ExistenceChecker(store)), console)
    assert console.export_text() == ""


def test_describe_authors_fallbacks():
    entry = ResultEntry(record=Record(key="K1"), exists=False)
    assert describe_authors(entry) == "No authors (No date)"
