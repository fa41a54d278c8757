"""Shared fixtures for bridge tests."""

from __future__ import annotations

from typing import Callable, Dict

import httpx
import pytest

from common.config import Settings


@pytest.fixture
def bridge_settings() -> Settings:
    """Fully configured settings, independent of the process environment."""
    return Settings(
        _env_file=None,
        notion_token="secret_notion",
        monday_token="monday-token",
        monday_board_id="42",
        text_column_id="text_url",
        files_column_id="files",
        bot_id="bot-user",
        notion_database_id="db-1",
        http_timeout=5.0,
    )


@pytest.fixture
def media_server() -> Callable[[Dict[str, bytes]], httpx.MockTransport]:
    """Build a transport serving fixed payloads keyed by URL path."""

    def _build(files: Dict[str, bytes]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            payload = files.get(request.url.path)
            if payload is None:
                return httpx.Response(404)
            return httpx.Response(200, content=payload)

        return httpx.MockTransport(handler)

    return _build
