"""Destination writers for Notion pages and monday.com file columns."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from common.logging import get_logger

from .models import TransferredFile
from .pipeline import MAX_EMBED_BYTES
from .providers.monday_client import MondayClient
from .providers.notion_client import NotionClient

LOGGER = get_logger(__name__)


def _file_identity(entry: Dict[str, Any]) -> Tuple[str, str]:
    kind = entry.get("type") or ""
    body = entry.get(kind) or {}
    return kind, str(body.get("id") or body.get("url") or entry.get("name") or "")


class PageWriter:
    """Uploads bytes to Notion and attaches the results to a page."""

    max_embed_bytes: Optional[int] = MAX_EMBED_BYTES

    def __init__(self, notion: NotionClient, files_property: str = "files") -> None:
        self._notion = notion
        self._files_property = files_property

    async def embed(self, data: bytes, filename: str, content_type: str) -> str:
        handle = await self._notion.create_file_upload(filename, content_type)
        LOGGER.info("Created Notion upload", handle_id=handle.handle_id, filename=filename, size=len(data))
        await self._notion.send_file_upload(handle, data, filename, content_type)
        return handle.handle_id

    async def merge_files(self, page_id: str, files: Sequence[TransferredFile]) -> List[Dict[str, Any]]:
        """Union ``files`` into the page's files property and write it back.

        Not guarded against concurrent writers: the last write wins.
        """

        page = await self._notion.retrieve_page(page_id)
        prop = (page.get("properties") or {}).get(self._files_property) or {}
        existing: List[Dict[str, Any]] = list(prop.get("files") or [])
        known = {_file_identity(entry) for entry in existing}

        merged = list(existing)
        for transferred in files:
            entry = transferred.to_property_file()
            identity = _file_identity(entry)
            if identity in known:
                continue
            known.add(identity)
            merged.append(entry)

        LOGGER.info(
            "Updating Notion files property",
            page_id=page_id,
            existing=len(existing),
            total=len(merged),
        )
        await self._notion.update_page_properties(
            page_id, {self._files_property: {"files": merged}}
        )
        return merged

    async def append_previews(self, page_id: str, files: Sequence[TransferredFile]) -> None:
        children = [transferred.to_preview_block() for transferred in files]
        if not children:
            return
        LOGGER.info("Appending preview blocks", page_id=page_id, count=len(children))
        await self._notion.append_block_children(page_id, children)

    async def write(self, page_id: str, files: Sequence[TransferredFile]) -> None:
        if not files:
            return
        await self.merge_files(page_id, files)
        await self.append_previews(page_id, files)


class BoardWriter:
    """Pushes bytes into one item's files column, one request per file.

    Uploads that already succeeded are kept if a later one fails.
    """

    max_embed_bytes: Optional[int] = None

    def __init__(self, monday: MondayClient, item_id: str, column_id: str) -> None:
        self._monday = monday
        self._item_id = item_id
        self._column_id = column_id

    async def embed(self, data: bytes, filename: str, content_type: str) -> str:
        return await self._monday.add_file_to_column(
            item_id=self._item_id,
            column_id=self._column_id,
            data=data,
            filename=filename,
            content_type=content_type,
        )


__all__ = ["BoardWriter", "PageWriter"]
