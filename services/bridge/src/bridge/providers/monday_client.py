"""Client for the monday.com GraphQL API."""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import httpx

from common.config import settings
from common.http import http_client
from common.logging import get_logger

from ..errors import ConfigurationError, NetworkError, NotFoundError, UpstreamQueryError
from ..models import BoardItem, MediaReference

LOGGER = get_logger(__name__)

ITEM_ASSETS_QUERY = """
query ($ids: [ID!]) {
  items(ids: $ids) {
    id
    name
    assets { id name public_url file_size mimetype }
  }
}
"""

EXACT_MATCH_QUERY = """
query ($board: ID!, $column: String!, $values: [String]!) {
  items_page_by_column_values(
    board_id: $board,
    columns: [{column_id: $column, column_values: $values}],
    limit: 1
  ) { items { id name } }
}
"""

ITEMS_PAGE_QUERY = """
query ($board: [ID!], $column: [String!], $limit: Int!) {
  boards(ids: $board) {
    items_page(limit: $limit) {
      cursor
      items { id name column_values(ids: $column) { id text } }
    }
  }
}
"""

NEXT_ITEMS_PAGE_QUERY = """
query ($cursor: String!, $column: [String!], $limit: Int!) {
  next_items_page(cursor: $cursor, limit: $limit) {
    cursor
    items { id name column_values(ids: $column) { id text } }
  }
}
"""

ADD_FILE_MUTATION = """
mutation ($file: File!, $item: ID!, $column: String!) {
  add_file_to_column(item_id: $item, column_id: $column, file: $file) { id }
}
"""


class MondayClient:
    """Typed wrapper around the monday.com v2 API."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        file_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token = token or settings.monday_token
        if not self._token:
            raise ConfigurationError("MONDAY_TOKEN not configured")
        self._api_url = api_url or settings.monday_api_url
        self._file_url = file_url or settings.monday_file_url
        self._timeout = timeout or settings.http_timeout
        self._transport = transport

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            errors = payload.get("errors")
            if errors:
                first = errors[0]
                message = first.get("message") if isinstance(first, dict) else str(first)
                raise UpstreamQueryError(message or "monday query failed")
            if payload.get("error_message"):
                raise UpstreamQueryError(payload["error_message"])
        if response.is_error:
            raise NetworkError(f"monday.com responded HTTP {response.status_code}")
        if not isinstance(payload, dict):
            raise UpstreamQueryError("monday.com returned a non-JSON response")
        return payload.get("data") or {}

    async def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object."""

        try:
            async with http_client(
                authorization=self._token,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._api_url,
                    json={"query": query, "variables": variables or {}},
                )
        except httpx.HTTPError as exc:
            raise NetworkError(f"monday.com request failed: {exc}") from exc
        return self._decode(response)

    async def get_item(self, item_id: int | str) -> BoardItem:
        """Fetch an item with its file assets."""

        LOGGER.info("Fetching monday item", item_id=item_id)
        data = await self.query(ITEM_ASSETS_QUERY, {"ids": [str(item_id)]})
        items = data.get("items") or []
        if not items:
            raise NotFoundError(f"monday item {item_id} not found")
        record = items[0]
        assets = [MediaReference.from_asset(asset) for asset in record.get("assets") or []]
        LOGGER.info("monday assets found", item_id=item_id, count=len(assets))
        return BoardItem(id=str(record.get("id") or item_id), name=record.get("name") or "", assets=assets)

    async def list_assets(self, item_id: int | str) -> List[MediaReference]:
        item = await self.get_item(item_id)
        return item.assets

    async def find_item_by_column_value(
        self, board_id: str, column_id: str, value: str
    ) -> Optional[str]:
        """Exact match of ``value`` against a column; returns the item id."""

        data = await self.query(
            EXACT_MATCH_QUERY,
            {"board": str(board_id), "column": column_id, "values": [value]},
        )
        page = data.get("items_page_by_column_values") or {}
        items = page.get("items") or []
        if not items:
            return None
        return str(items[0]["id"])

    async def iter_board_items(
        self, board_id: str, column_id: str, page_size: int = 100
    ) -> AsyncIterator[Tuple[str, str]]:
        """Yield ``(item_id, column_text)`` for every item on the board."""

        data = await self.query(
            ITEMS_PAGE_QUERY,
            {"board": [str(board_id)], "column": [column_id], "limit": page_size},
        )
        boards = data.get("boards") or []
        if not boards:
            raise NotFoundError(f"monday board {board_id} not found")
        page = boards[0].get("items_page") or {}
        while True:
            for item in page.get("items") or []:
                text = ""
                for column in item.get("column_values") or []:
                    if column.get("id") == column_id:
                        text = column.get("text") or ""
                yield str(item["id"]), text
            cursor = page.get("cursor")
            if not cursor:
                return
            data = await self.query(
                NEXT_ITEMS_PAGE_QUERY,
                {"cursor": cursor, "column": [column_id], "limit": page_size},
            )
            page = data.get("next_items_page") or {}

    async def add_file_to_column(
        self,
        *,
        item_id: int | str,
        column_id: str,
        data: bytes,
        filename: str,
        content_type: str,
    ) -> str:
        """Upload a file into a files column; returns the new asset id."""

        form = {
            "query": ADD_FILE_MUTATION,
            "variables": json.dumps({"item": str(item_id), "column": column_id, "file": None}),
        }
        files = {"file": (filename, data, content_type)}
        try:
            async with http_client(
                authorization=self._token,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._file_url, data=form, files=files)
        except httpx.HTTPError as exc:
            raise NetworkError(f"monday.com upload failed: {exc}") from exc
        payload = self._decode(response)
        asset = payload.get("add_file_to_column") or {}
        asset_id = asset.get("id")
        if not asset_id:
            raise UpstreamQueryError(f"monday upload response missing asset id for {filename}")
        LOGGER.info("Uploaded file to monday", item_id=item_id, filename=filename, asset_id=asset_id)
        return str(asset_id)


__all__ = ["MondayClient"]
