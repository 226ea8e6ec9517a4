"""
Page store backed by the Logseq HTTP API server.

Logseq exposes its plugin API over HTTP when the API server is enabled:
every call is a POST to a single endpoint with a bearer token and a body of
the form ``{"method": "logseq.Editor.getPage", "args": [...]}``. The
response body is the JSON-encoded return value of the plugin call.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from ..config import LogseqConfig
from ..core.types import Page
from ..errors import PageStoreError, PageStoreUnavailable
from .base import PageStore

logger = logging.getLogger(__name__)


class LogseqStore(PageStore):
    """PageStore implementation that calls the Logseq API server.

    Attributes:
        api_url: Endpoint that receives every API call
    """

    def __init__(
        self,
        token: str,
        cfg: LogseqConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cfg = cfg or LogseqConfig()
        self._token = token
        self._transport = transport
        self.api_url = self._cfg.api_url

    async def call(self, method: str, *args: Any) -> Any:
        """Invoke one plugin API method and return its decoded result.

        Raises:
            PageStoreUnavailable: the API server could not be reached
            PageStoreError: non-success status or an error payload
        """
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        payload = {"method": method, "args": list(args)}
        try:
            async with httpx.AsyncClient(
                timeout=self._cfg.timeout_seconds,
                trust_env=self._cfg.trust_env,
                transport=self._transport,
            ) as client:
                resp = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.TransportError as exc:
            raise PageStoreUnavailable(
                method, f"cannot reach Logseq API server at {self.api_url}: {exc}"
            ) from exc

        if not resp.is_success:
            raise PageStoreError(method, f"{resp.status_code} {resp.text}".strip(), resp.status_code)
        if not resp.content:
            return None
        try:
            body = resp.json()
        except json.JSONDecodeError as exc:
            raise PageStoreError(method, f"invalid JSON response: {exc}", resp.status_code) from exc
        if isinstance(body, dict) and "error" in body:
            raise PageStoreError(method, str(body["error"]), resp.status_code)
        return body

    async def find_pages_by_property(self, key: str, value: str) -> list[Any]:
        query = f'(page-property {key} "{_escape(value)}")'
        result = await self.call("logseq.DB.q", query)
        if not result:
            return []
        return list(result)

    async def find_page_by_title(self, title: str) -> Page | None:
        result = await self.call("logseq.Editor.getPage", title)
        if not result:
            return None
        return Page.from_api(result)

    async def create_page(
        self,
        title: str,
        properties: dict[str, Any],
        *,
        redirect: bool = False,
        create_first_block: bool = False,
    ) -> Page | None:
        result = await self.call(
            "logseq.Editor.createPage",
            title,
            properties,
            {"redirect": redirect, "createFirstBlock": create_first_block},
        )
        if not result:
            return None
        return Page.from_api(result)

    async def append_nested_block(self, page: Page, content: str, children: list[str]) -> None:
        batch = [
            {
                "content": content,
                "children": [{"content": child, "children": []} for child in children],
            }
        ]
        await self.call("logseq.Editor.insertBatchBlock", page.uuid, batch, {"sibling": False})

    async def insert_link(self, block_uuid: str, page_title: str) -> None:
        await self.call("logseq.Editor.insertBlock", block_uuid, f"[[{page_title}]]", {"sibling": True})

    async def show_message(self, message: str, status: str) -> None:
        await self.call("logseq.UI.showMsg", message, status)


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
