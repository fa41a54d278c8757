"""Remote API clients."""

from .monday_client import MondayClient
from .notion_client import NotionClient

__all__ = ["MondayClient", "NotionClient"]
