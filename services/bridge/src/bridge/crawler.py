"""Depth-bounded walk over a Notion page's block tree."""

from __future__ import annotations

from typing import List

from common.logging import get_logger

from .media import is_media_block_type
from .models import MediaBlock
from .providers.notion_client import NotionClient

LOGGER = get_logger(__name__)

# The root's children sit at depth 0; nesting below MAX_DEPTH is not fetched.
MAX_DEPTH = 2


class BlockCrawler:
    """Collect media blocks under a page, depth first, in document order."""

    def __init__(self, notion: NotionClient, max_depth: int = MAX_DEPTH) -> None:
        self._notion = notion
        self._max_depth = max_depth

    async def crawl(self, root_id: str) -> List[MediaBlock]:
        found: List[MediaBlock] = []
        await self._walk(root_id, 0, found)
        LOGGER.info("Crawled blocks", root_id=root_id, media=len(found))
        return found

    async def _walk(self, block_id: str, depth: int, found: List[MediaBlock]) -> None:
        async for block in self._notion.iter_block_children(block_id):
            block_type = block.get("type") or ""
            if is_media_block_type(block_type):
                found.append(MediaBlock(id=block["id"], type=block_type, depth=depth, raw=block))
            if block.get("has_children") and depth < self._max_depth:
                await self._walk(block["id"], depth + 1, found)


__all__ = ["BlockCrawler", "MAX_DEPTH"]
