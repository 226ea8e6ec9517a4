"""
Search client for the Zotero desktop app's local HTTP API.

The local API only answers requests that carry the Zotero-Allowed-Request
header. Failures are split into two shapes: the app cannot be reached at
all (StoreUnavailable) or it answered with a non-success status
(StoreError). Neither is retried.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

import httpx

from ..config import ZoteroConfig
from ..core.types import Record
from ..errors import InvalidQuery, NoResults, StoreError, StoreUnavailable
from ..logging_utils import log_event

logger = logging.getLogger(__name__)

ALLOWED_REQUEST_HEADER = "Zotero-Allowed-Request"

_ITEM_KEY_RE = re.compile(r"^[A-Za-z0-9]+$")


class ZoteroClient:
    """Fetches candidate records from the Zotero local API.

    A fresh httpx.AsyncClient is opened per request. Pass a transport to
    route requests elsewhere (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        cfg: ZoteroConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cfg = cfg or ZoteroConfig()
        self._transport = transport

    @property
    def library_url(self) -> str:
        base = self._cfg.base_url.rstrip("/")
        library = self._cfg.library.strip("/")
        return f"{base}/{library}"

    async def search(self, query: str) -> list[Record]:
        """Search top-level items, most recently added first.

        Args:
            query: Non-empty quick-search string

        Returns:
            Records in the order Zotero returned them

        Raises:
            InvalidQuery: query is empty or whitespace; no request is made
            StoreUnavailable: Zotero is not running or the API is disabled
            StoreError: Zotero answered with a non-success status or bad body
            NoResults: the search matched nothing
        """
        if not query or not query.strip():
            raise InvalidQuery("Please enter a search query")
        query = query.strip()

        params: dict[str, Any] = {
            "q": query,
            "qmode": self._cfg.qmode,
            "sort": self._cfg.sort,
            "direction": self._cfg.direction,
        }
        if self._cfg.limit:
            params["limit"] = self._cfg.limit

        log_event(logger, "Search start", event="search_start", query=query)
        body = await self._get_json(f"{self.library_url}/items/top", params)
        if not isinstance(body, list):
            raise StoreError(None, "expected a list of items")

        records = _parse_records(body)
        log_event(logger, "Search done", event="search_done", query=query, count=len(records))
        if not records:
            raise NoResults(query)
        return records

    async def get_item(self, key: str) -> Record:
        """Fetch a single item by its key.

        Raises:
            InvalidQuery: key is not a plain alphanumeric Zotero key
        """
        key = (key or "").strip()
        if not _ITEM_KEY_RE.match(key):
            raise InvalidQuery(f"Invalid Zotero item key: {key!r}")
        body = await self._get_json(f"{self.library_url}/items/{key}", {})
        if not isinstance(body, dict):
            raise StoreError(None, "expected an item object")
        return _parse_records([body])[0]

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        headers = {ALLOWED_REQUEST_HEADER: "1", "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(
                timeout=self._cfg.timeout_seconds,
                trust_env=self._cfg.trust_env,
                transport=self._transport,
            ) as client:
                resp = await client.get(url, params=params, headers=headers)
        except httpx.TransportError as exc:
            raise StoreUnavailable(
                "Cannot connect to Zotero. Make sure Zotero is running "
                "and its local API is enabled."
            ) from exc

        if not resp.is_success:
            raise StoreError(resp.status_code, resp.reason_phrase)
        try:
            return resp.json()
        except ValueError as exc:
            raise StoreError(resp.status_code, f"invalid JSON: {exc}") from exc


def _parse_records(items: Iterable[Any]) -> list[Record]:
    try:
        return [Record.from_api(item) for item in items]
    except (ValueError, AttributeError, TypeError) as exc:
        raise StoreError(None, f"malformed item: {exc}") from exc
