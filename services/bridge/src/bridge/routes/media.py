"""Attach a monday.com item's files to a Notion page."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PayloadError

from common.logging import get_logger

from ..dependencies import get_sync_service
from ..errors import BridgeError, ValidationError
from ..sync import MediaSyncService
from .payloads import AddMediaRequest, read_json_object

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["media"])


@router.post("/add-media")
async def add_media(
    request: Request,
    service: MediaSyncService = Depends(get_sync_service),
) -> Dict[str, Any]:
    """Copy an item's assets onto a page, creating the page if none is given."""

    body = await read_json_object(request)
    try:
        payload = AddMediaRequest.model_validate(body)
    except PayloadError as exc:
        raise ValidationError("itemId missing or invalid") from exc

    try:
        result = await service.sync_item_to_page(payload.item_id, payload.page_id)
    except BridgeError:
        raise
    except Exception as exc:
        raise BridgeError(str(exc)) from exc

    response: Dict[str, Any] = {"ok": True, "added": result.added}
    if result.url:
        response["url"] = result.url
    return response
