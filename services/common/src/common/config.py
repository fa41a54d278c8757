"""Application-wide configuration management using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_FIELDS = (
    "notion_token",
    "monday_token",
    "monday_board_id",
    "text_column_id",
    "files_column_id",
    "bot_id",
)


class Settings(BaseSettings):
    """Central configuration for the bridge service.

    Environment variables use the upper-cased field name, e.g. ``NOTION_TOKEN``
    or ``FILES_COLUMN_ID``.
    """

    model_config = SettingsConfigDict(env_file=".env", env_nested_delimiter="__", extra="allow")

    environment: str = "development"
    service_name: str = "bridge"
    log_level: str = "INFO"

    # Notion (page system)
    notion_token: Optional[str] = None
    notion_api_base: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"
    notion_database_id: Optional[str] = None
    notion_files_property: str = "files"
    notion_title_property: str = "Name"
    notion_people_property: str = "Owner"

    # monday.com (board system)
    monday_token: Optional[str] = None
    monday_api_url: str = "https://api.monday.com/v2"
    monday_file_url: str = "https://api.monday.com/v2/file"
    monday_board_id: Optional[str] = None
    text_column_id: Optional[str] = None  # column holding the Notion page URL
    files_column_id: Optional[str] = None
    bot_id: Optional[str] = None  # default People value for new pages

    # Transfer behaviour
    http_timeout: float = 60.0
    transfer_pacing_seconds: float = 0.0
    transfer_retry_attempts: int = 1
    matcher_loose_fallback: bool = True

    # Seen ledger
    redis_url: Optional[str] = None
    seen_ttl_seconds: int = 30 * 24 * 3600

    def missing_required(self) -> List[str]:
        """Return env var names of required settings that are unset."""

        return [name.upper() for name in REQUIRED_FIELDS if not getattr(self, name)]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache configuration for the current process."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
