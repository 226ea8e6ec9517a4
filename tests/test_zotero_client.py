"""Tests for the Zotero local API search client."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from zotseq.config import ZoteroConfig
from zotseq.errors import InvalidQuery, NoResults, StoreError, StoreUnavailable
from zotseq.fetch.zotero import ZoteroClient

from conftest import zotero_item


def _client(handler, **cfg) -> ZoteroClient:
    return ZoteroClient(ZoteroConfig(**cfg), transport=httpx.MockTransport(handler))


def test_search_sends_broad_recency_query_with_allowed_header():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[zotero_item("K1", "First"), zotero_item("K2", "Second")])

    records = asyncio.run(_client(handler).search("  deglobalization "))

    assert [r.key for r in records] == ["K1", "K2"]
    assert records[0].title == "First"
    request = seen[0]
    assert request.url.path == "/api/users/0/items/top"
    assert request.url.params["q"] == "deglobalization"
    assert request.url.params["qmode"] == "everything"
    assert request.url.params["sort"] == "dateAdded"
    assert request.url.params["direction"] == "desc"
    assert "limit" not in request.url.params
    assert request.headers["Zotero-Allowed-Request"] == "1"


def test_search_passes_limit_when_configured():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[zotero_item("K1")])

    asyncio.run(_client(handler, limit=5).search("trade"))
    assert seen[0].url.params["limit"] == "5"


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_query_rejected_without_request(query):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=[])

    with pytest.raises(InvalidQuery):
        asyncio.run(_client(handler).search(query))
    assert calls == 0


def test_empty_result_signals_no_results():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    with pytest.raises(NoResults):
        asyncio.run(_client(handler).search("nothing"))


def test_non_success_status_is_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(_client(handler).search("trade"))
    assert excinfo.value.status_code == 500
    assert "500" in str(excinfo.value)


def test_connection_failure_is_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(StoreUnavailable, match="Zotero is running"):
        asyncio.run(_client(handler).search("trade"))


def test_non_list_body_is_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with pytest.raises(StoreError):
        asyncio.run(_client(handler).search("trade"))


def test_get_item_fetches_by_key():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/users/0/items/K7"
        return httpx.Response(200, json=zotero_item("K7", "Single"))

    record = asyncio.run(_client(handler).get_item("K7"))
    assert record.key == "K7"
    assert record.title == "Single"


def test_get_item_missing_key_is_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="Not found")

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(_client(handler).get_item("NOPE"))
    assert excinfo.value.status_code == 404


@pytest.mark.parametrize(
    "body",
    [
        [{"version": 1, "data": {"title": "No key"}}],
        ["not-an-object"],
        [zotero_item("K1", "Fine"), None],
    ],
)
def test_malformed_items_raise_store_error(body):
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(StoreError, match="malformed item"):
        asyncio.run(client.search("trade"))


def test_get_item_without_key_is_store_error():
    client = _client(lambda request: httpx.Response(200, json={"version": 1, "data": {}}))

    with pytest.raises(StoreError, match="malformed item"):
        asyncio.run(client.get_item("K1"))


@pytest.mark.parametrize("key", ["a/b", "../collections", "K1?format=bib", ""])
def test_get_item_rejects_non_alphanumeric_key_before_request(key):
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(InvalidQuery, match="Invalid Zotero item key"):
        asyncio.run(_client(handler).get_item(key))
