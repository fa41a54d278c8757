"""Orchestration of both sync directions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from common.config import Settings
from common.logging import get_logger

from .crawler import BlockCrawler
from .dedup import SeenLedger
from .errors import ConfigurationError, UpstreamQueryError
from .matcher import ItemMatcher
from .models import MediaReference
from .pipeline import MediaTransferPipeline
from .providers.monday_client import MondayClient
from .providers.notion_client import NotionClient
from .retry import RetryPolicy
from .writers import BoardWriter, PageWriter

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ItemSyncResult:
    page_id: str
    added: int
    url: Optional[str] = None  # set when the page was created for this item


@dataclass(slots=True)
class PageSyncResult:
    status: str  # "added" | "no_match" | "nothing_new"
    added: int = 0
    item_id: Optional[str] = None


class MediaSyncService:
    def __init__(
        self,
        *,
        config: Settings,
        monday: MondayClient,
        notion: NotionClient,
        ledger: SeenLedger,
        crawler: Optional[BlockCrawler] = None,
        matcher: Optional[ItemMatcher] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._monday = monday
        self._notion = notion
        self._ledger = ledger
        self._crawler = crawler or BlockCrawler(notion)
        self._matcher = matcher or ItemMatcher(
            monday,
            board_id=config.monday_board_id or "",
            column_id=config.text_column_id or "",
            loose_fallback=config.matcher_loose_fallback,
        )
        self._retry = RetryPolicy(attempts=max(1, config.transfer_retry_attempts))
        self._transport = transport

    def _pipeline(self, sink, **kwargs: Any) -> MediaTransferPipeline:
        return MediaTransferPipeline(
            sink,
            pacing_seconds=self._config.transfer_pacing_seconds,
            retry=self._retry,
            timeout=self._config.http_timeout,
            transport=self._transport,
            **kwargs,
        )

    # monday item -> Notion page ---------------------------------------------

    async def sync_item_to_page(self, item_id: int, page_id: Optional[str] = None) -> ItemSyncResult:
        item = await self._monday.get_item(item_id)

        url: Optional[str] = None
        if not page_id:
            page = await self._create_page(item.name)
            page_id, url = page["id"], page.get("url")

        writer = PageWriter(self._notion, files_property=self._config.notion_files_property)
        files = await self._pipeline(writer).transfer(item.assets)
        await writer.write(page_id, files)

        LOGGER.info("Item media synced to page", item_id=item_id, page_id=page_id, added=len(files))
        return ItemSyncResult(page_id=page_id, added=len(files), url=url)

    async def _create_page(self, title: str) -> Dict[str, Any]:
        config = self._config
        if not config.notion_database_id:
            raise ConfigurationError("NOTION_DATABASE_ID not configured")
        properties: Dict[str, Any] = {
            config.notion_title_property: {"title": [{"text": {"content": title}}]},
        }
        if config.bot_id:
            properties[config.notion_people_property] = {"people": [{"id": config.bot_id}]}
        return await self._notion.create_page(config.notion_database_id, properties)

    # Notion page -> monday item ---------------------------------------------

    async def sync_page_to_item(self, page_id: str) -> PageSyncResult:
        page = await self._notion.retrieve_page(page_id)
        page_url = page.get("url")
        if not page_url:
            raise UpstreamQueryError("page.url missing")

        item_id = await self._matcher.match(page_url)
        if not item_id:
            return PageSyncResult(status="no_match")

        blocks = await self._crawler.crawl(page_id)
        references = [MediaReference.from_block(block) for block in blocks]
        writer = BoardWriter(self._monday, item_id, self._config.files_column_id or "")
        pipeline = self._pipeline(
            writer,
            resolver=self._notion.retrieve_file_upload,
            ledger=self._ledger,
        )
        files = await pipeline.transfer(references)
        if not files:
            LOGGER.info("No new media on page", page_id=page_id, item_id=item_id)
            return PageSyncResult(status="nothing_new", item_id=item_id)

        LOGGER.info("Page media synced to item", page_id=page_id, item_id=item_id, added=len(files))
        return PageSyncResult(status="added", added=len(files), item_id=item_id)


__all__ = ["ItemSyncResult", "MediaSyncService", "PageSyncResult"]
