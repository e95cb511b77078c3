"""
Low-level async client for the Notion REST API.

Used by `ContentService` to fetch block children and database rows, and by
the renderers (through injected callables) to fetch attachment text. It
returns typed pydantic models from notionhtml.models.blocks and hides HTTP
details.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .models.blocks import Block, BlockChildrenPage, DatabaseQueryPage

LOGGER = logging.getLogger(__name__)

API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"


# ------------------------------- Errors --------------------------------------


class NotionError(Exception):
    """Base Notion transport error."""


class NotionAuthError(NotionError):
    """Missing/invalid integration token or page not shared (401/403)."""


class NotionRateLimited(NotionError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class NotionApiError(NotionError):
    """Catch-all API error."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


# ------------------------------- Transport -----------------------------------


class _NotionHttp:
    """
    Minimal JSON transport:
      - bearer token + Notion-Version headers on API calls only
      - status code → exception mapping
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str, token: str):
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": NOTION_VERSION,
            "Content-Type": "application/json",
        }
        LOGGER.debug("Initialized _NotionHttp with base_url: %s", self._base_url)

    async def request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        LOGGER.info("%s to %s", method, url)
        resp = await self._http.request(
            method, url, headers=self._headers, json=payload, params=params
        )
        code = resp.status_code
        LOGGER.debug("%s to %s returned status %d", method, url, code)
        if code >= 400:
            if code in (401, 403):
                LOGGER.error("%s to %s failed with auth error: %d", method, url, code)
                raise NotionAuthError(f"HTTP {code}: unauthorized")
            if code == 429:
                retry_after = None
                hdr = resp.headers.get("Retry-After")
                if hdr:
                    try:
                        retry_after = float(hdr)
                    except ValueError:
                        retry_after = None
                LOGGER.warning(
                    "%s to %s was rate-limited. Retry after: %s", method, url, retry_after
                )
                raise NotionRateLimited(
                    "HTTP 429: rate limited", retry_after=retry_after
                )
            # Include the server's json error body when there is one
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            LOGGER.error("%s to %s failed with code %d", method, url, code)
            raise NotionApiError(f"HTTP {code}", payload=body)
        try:
            return resp.json()
        except ValueError:
            LOGGER.error("Failed to parse JSON response from %s", url)
            raise NotionApiError("Invalid JSON response", payload=resp.text)


# ------------------------------ Raw client -----------------------------------


class NotionClient:
    """
    Raw Notion API client.

    Methods map 1:1 to API endpoints:
      - GET  /blocks/{id}/children  (paged)
      - POST /databases/{id}/query  (paged)

    plus plain GETs for files referenced by blocks (no auth headers; the
    hosted file URLs are pre-signed and reject extra credentials).
    """

    def __init__(
        self,
        token: str,
        *,
        http: Optional[httpx.AsyncClient] = None,
        base_url: str = API_URL,
    ):
        self._owns_http = http is None
        self._client = http or httpx.AsyncClient(timeout=30.0, follow_redirects=True)
        self._api = _NotionHttp(self._client, base_url, token)
        LOGGER.info("NotionClient initialized.")

    @property
    def http(self) -> httpx.AsyncClient:
        return self._client

    async def aclose(self) -> None:
        if self._owns_http:
            await self._client.aclose()

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ----- Block children (paged generator) -----

    async def iter_block_children(
        self, block_id: str, *, page_size: int = 100
    ) -> AsyncIterator[BlockChildrenPage]:
        LOGGER.info("Start fetching children for block: %s", block_id)
        cursor: Optional[str] = None
        page_num = 1
        while True:
            params: Dict[str, Any] = {"page_size": page_size}
            if cursor:
                params["start_cursor"] = cursor
            LOGGER.debug("Fetching children page %d of %s", page_num, block_id)
            data = await self._api.request(
                "GET", f"/blocks/{block_id}/children", params=params
            )
            try:
                page = BlockChildrenPage.model_validate(data)
            except ValidationError:
                LOGGER.error("Block children response validation failed.")
                raise NotionApiError(
                    "Block children response validation failed", payload=data
                )
            LOGGER.debug(
                "Children page %d returned %d blocks.", page_num, len(page.results)
            )
            yield page
            if not page.has_more or not page.next_cursor:
                return
            cursor = page.next_cursor
            page_num += 1

    async def fetch_block_children(self, block_id: str) -> List[Block]:
        blocks: List[Block] = []
        async for page in self.iter_block_children(block_id):
            blocks.extend(page.results)
        LOGGER.info("Block %s has %d children.", block_id, len(blocks))
        return blocks

    async def fetch_page(self, page_id: str) -> List[Block]:
        """Root-level blocks of a page (a page is the parent block of its body)."""
        return await self.fetch_block_children(page_id)

    # ----- Database query (paged) -----

    async def query_database(
        self,
        database_id: str,
        *,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        page_size: int = 100,
    ) -> List[Dict[str, Any]]:
        LOGGER.info("Querying database: %s", database_id)
        rows: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            payload: Dict[str, Any] = {"page_size": page_size}
            if filter:
                payload["filter"] = filter
            if sorts:
                payload["sorts"] = sorts
            if cursor:
                payload["start_cursor"] = cursor
            data = await self._api.request(
                "POST", f"/databases/{database_id}/query", payload=payload
            )
            try:
                page = DatabaseQueryPage.model_validate(data)
            except ValidationError:
                LOGGER.error("Database query response validation failed.")
                raise NotionApiError(
                    "Database query response validation failed", payload=data
                )
            rows.extend(page.results)
            if not page.has_more or not page.next_cursor:
                break
            cursor = page.next_cursor
        LOGGER.info("Database %s returned %d rows.", database_id, len(rows))
        return rows

    # ----- Plain file GETs -----

    async def fetch_text(self, url: str) -> Optional[str]:
        LOGGER.info("GET %s", url)
        resp = await self._client.get(url)
        if not resp.is_success:
            LOGGER.warning("GET %s failed with code %d", url, resp.status_code)
            return None
        return resp.text
