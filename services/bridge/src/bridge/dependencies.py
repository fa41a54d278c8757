"""Dependency wiring for the bridge service."""

from __future__ import annotations

from functools import lru_cache

from common.config import settings
from common.credentials import MondayCredentials, NotionCredentials

from .dedup import SeenLedger, build_ledger
from .errors import ConfigurationError
from .providers.monday_client import MondayClient
from .providers.notion_client import NotionClient
from .sync import MediaSyncService


def require_settings() -> None:
    """Fail fast when required integration settings are missing."""

    missing = settings.missing_required()
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")


@lru_cache(maxsize=1)
def get_monday_client() -> MondayClient:
    credentials = MondayCredentials.from_settings(settings)
    return MondayClient(
        token=credentials.token.get_secret_value(),
        api_url=credentials.api_url,
        file_url=credentials.file_url,
    )


@lru_cache(maxsize=1)
def get_notion_client() -> NotionClient:
    credentials = NotionCredentials.from_settings(settings)
    return NotionClient(
        token=credentials.token.get_secret_value(),
        base_url=credentials.base_url,
        version=credentials.version,
    )


@lru_cache(maxsize=1)
def get_seen_ledger() -> SeenLedger:
    return build_ledger(settings)


@lru_cache(maxsize=1)
def get_sync_service() -> MediaSyncService:
    return MediaSyncService(
        config=settings,
        monday=get_monday_client(),
        notion=get_notion_client(),
        ledger=get_seen_ledger(),
    )


__all__ = [
    "get_monday_client",
    "get_notion_client",
    "get_seen_ledger",
    "get_sync_service",
    "require_settings",
]
