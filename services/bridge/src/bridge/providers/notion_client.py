"""Client for the Notion REST API."""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from common.config import settings
from common.http import http_client
from common.logging import get_logger

from ..errors import ConfigurationError, NetworkError, NotFoundError, UpstreamQueryError
from ..models import FileUploadHandle

LOGGER = get_logger(__name__)

MAX_CHILDREN_PER_APPEND = 100


class NotionClient:
    """Typed wrapper around the subset of the Notion API the bridge uses."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token = token or settings.notion_token
        if not self._token:
            raise ConfigurationError("NOTION_TOKEN not configured")
        self._base_url = (base_url or settings.notion_api_base).rstrip("/")
        self._version = version or settings.notion_version
        self._timeout = timeout or settings.http_timeout
        self._transport = transport

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("object") == "error":
            message = payload.get("message") or payload.get("code") or "Notion request failed"
            if response.status_code == 404:
                raise NotFoundError(message)
            raise UpstreamQueryError(message)
        if response.is_error:
            raise NetworkError(f"Notion responded HTTP {response.status_code}")
        if not isinstance(payload, dict):
            raise UpstreamQueryError("Notion returned a non-JSON response")
        return payload

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = path if path.startswith("http") else f"{self._base_url}{path}"
        headers: Dict[str, str] = {"Notion-Version": self._version}
        try:
            async with http_client(
                bearer_token=self._token,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Notion request failed: {exc}") from exc
        return self._decode(response)

    # Pages -----------------------------------------------------------------

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/pages/{page_id}")

    async def create_page(self, database_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        page = await self._request(
            "POST",
            "/pages",
            json={"parent": {"database_id": database_id}, "properties": properties},
        )
        LOGGER.info("Created Notion page", page_id=page.get("id"), url=page.get("url"))
        return page

    async def update_page_properties(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/pages/{page_id}", json={"properties": properties})

    # Blocks ----------------------------------------------------------------

    async def list_block_children(
        self,
        block_id: str,
        start_cursor: Optional[str] = None,
        page_size: int = 100,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page_size": page_size}
        if start_cursor:
            params["start_cursor"] = start_cursor
        return await self._request("GET", f"/blocks/{block_id}/children", params=params)

    async def iter_block_children(self, block_id: str) -> AsyncIterator[Dict[str, Any]]:
        """Yield every direct child of ``block_id``, following cursors."""

        cursor: Optional[str] = None
        while True:
            page = await self.list_block_children(block_id, start_cursor=cursor)
            for block in page.get("results") or []:
                yield block
            cursor = page.get("next_cursor")
            if not page.get("has_more") or not cursor:
                return

    async def append_block_children(self, block_id: str, children: List[Dict[str, Any]]) -> None:
        for start in range(0, len(children), MAX_CHILDREN_PER_APPEND):
            chunk = children[start : start + MAX_CHILDREN_PER_APPEND]
            await self._request("PATCH", f"/blocks/{block_id}/children", json={"children": chunk})

    # File uploads ----------------------------------------------------------

    async def create_file_upload(self, filename: str, content_type: str) -> FileUploadHandle:
        payload = await self._request(
            "POST",
            "/file_uploads",
            json={"mode": "single_part", "filename": filename, "content_type": content_type},
        )
        handle = FileUploadHandle.from_api(payload)
        if not handle.upload_url:
            handle.upload_url = f"{self._base_url}/file_uploads/{handle.handle_id}/send"
        return handle

    async def send_file_upload(
        self,
        handle: FileUploadHandle,
        data: bytes,
        filename: str,
        content_type: str,
    ) -> FileUploadHandle:
        url = handle.upload_url or f"/file_uploads/{handle.handle_id}/send"
        payload = await self._request("POST", url, files={"file": (filename, data, content_type)})
        return FileUploadHandle.from_api({"id": handle.handle_id, **payload})

    async def retrieve_file_upload(self, file_upload_id: str) -> FileUploadHandle:
        payload = await self._request("GET", f"/file_uploads/{file_upload_id}")
        return FileUploadHandle.from_api(payload)


__all__ = ["NotionClient", "MAX_CHILDREN_PER_APPEND"]
