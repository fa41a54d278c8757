"""Resolve a Notion page URL to the monday.com item that references it."""

from __future__ import annotations

from typing import Optional

from common.logging import get_logger

from .providers.monday_client import MondayClient

LOGGER = get_logger(__name__)


class ItemMatcher:
    """Exact column match first, then an optional case-insensitive substring scan.

    The loose pass returns the first item discovered in board order; which
    one that is when several contain the URL is up to monday.com.
    """

    def __init__(
        self,
        monday: MondayClient,
        board_id: str,
        column_id: str,
        loose_fallback: bool = True,
    ) -> None:
        self._monday = monday
        self._board_id = board_id
        self._column_id = column_id
        self._loose_fallback = loose_fallback

    async def match(self, page_url: str) -> Optional[str]:
        item_id = await self._monday.find_item_by_column_value(
            self._board_id, self._column_id, page_url
        )
        if item_id:
            LOGGER.info("Matched monday item", item_id=item_id, match="exact")
            return item_id
        if not self._loose_fallback:
            return None

        needle = page_url.lower()
        async for candidate_id, text in self._monday.iter_board_items(self._board_id, self._column_id):
            if needle in text.lower():
                LOGGER.info("Matched monday item", item_id=candidate_id, match="loose")
                return candidate_id
        LOGGER.info("No monday item references page", url=page_url)
        return None


__all__ = ["ItemMatcher"]
