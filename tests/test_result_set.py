"""Tests for ResultSet population, patching and the search-to-import scenario."""

import asyncio

from zotseq.core.existence import ExistenceChecker
from zotseq.core.importer import ImportCoordinator
from zotseq.core.result_set import ResultSet
from zotseq.core.types import ImportStatus

from conftest import make_record


class _SlowFirstChecker(ExistenceChecker):
    """Finishes checks in reverse order to prove ordering follows the input."""

    async def exists(self, record):
        await asyncio.sleep(0.02 if record.key == "K1" else 0)
        return record.key == "K1"


def test_populate_keeps_input_order_with_defined_flags(store):
    records = [make_record(key=f"K{i}", title=f"T{i}") for i in (1, 2, 3)]
    results = ResultSet(_SlowFirstChecker(store))

    entries = asyncio.run(results.populate(records))

    assert [entry.record.key for entry in entries] == ["K1", "K2", "K3"]
    assert [entry.exists for entry in entries] == [True, False, False]
    assert all(isinstance(entry.exists, bool) for entry in entries)


def test_populate_with_failing_store_still_defines_flags(store):
    store.property_error = RuntimeError("down")
    store.title_error = RuntimeError("down")
    results = ResultSet(ExistenceChecker(store))

    entries = asyncio.run(results.populate([make_record(key="K1"), make_record(key="K2")]))

    assert [entry.exists for entry in entries] == [False, False]


def test_patch_updates_single_entry(store):
    results = ResultSet(ExistenceChecker(store))
    asyncio.run(results.populate([make_record(key="K1"), make_record(key="K2")]))

    assert results.patch("K2", True) is True
    assert results.patch("UNKNOWN", True) is False
    assert [entry.exists for entry in results] == [False, True]


def test_selection_helpers(store):
    store.add_page("Existing", {"zotero-key": "K1"})
    results = ResultSet(ExistenceChecker(store))
    asyncio.run(results.populate([make_record(key="K1"), make_record(key="K2")]))

    assert results.by_number(1).record.key == "K1"
    assert results.by_number(0) is None
    assert results.by_number(3) is None
    assert results.first_new().record.key == "K2"
    assert results.summary() == (1, 1)
    assert results.get("K2").exists is False


def test_deglobalization_scenario(store, notifier):
    store.add_page("Already here #zot", {"zotero-key": "K2"})
    checker = ExistenceChecker(store)
    records = [
        make_record(key="K1", title="Deglobalization revisited"),
        make_record(key="K2", title="Already here"),
        make_record(key="K3", title="Slowbalisation"),
    ]
    results = ResultSet(checker, query="deglobalization")
    asyncio.run(results.populate(records))

    assert [entry.record.key for entry in results.existing_entries] == ["K2"]

    coordinator = ImportCoordinator(store, checker, notifier)
    outcome = asyncio.run(coordinator.import_record(records[2]))
    assert outcome.status == ImportStatus.IMPORTED
    results.patch(outcome.key, True)

    assert {entry.record.key: entry.exists for entry in results} == {
        "K1": False,
        "K2": True,
        "K3": True,
    }
