"""Typed credential containers for integrations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, SecretStr

if TYPE_CHECKING:
    from common.config import Settings


class NotionCredentials(BaseModel):
    token: SecretStr
    base_url: str = "https://api.notion.com/v1"
    version: str = "2022-06-28"

    @classmethod
    def from_settings(cls, config: "Settings") -> "NotionCredentials":
        return cls(
            token=config.notion_token or "",
            base_url=config.notion_api_base,
            version=config.notion_version,
        )


class MondayCredentials(BaseModel):
    token: SecretStr
    api_url: str = "https://api.monday.com/v2"
    file_url: str = "https://api.monday.com/v2/file"

    @classmethod
    def from_settings(cls, config: "Settings") -> "MondayCredentials":
        return cls(
            token=config.monday_token or "",
            api_url=config.monday_api_url,
            file_url=config.monday_file_url,
        )


__all__ = ["NotionCredentials", "MondayCredentials"]
