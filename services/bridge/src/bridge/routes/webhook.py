"""Notion webhook receiver: push new page media to the matching monday item."""

from __future__ import annotations

from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError as PayloadError

from common.logging import get_logger

from ..dependencies import get_sync_service
from ..errors import BridgeError, ValidationError
from ..sync import MediaSyncService
from .payloads import WebhookEvent, read_json_object

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["webhook"])

CONTENT_UPDATED = "page.content_updated"
VERIFICATION_TYPES = frozenset({"url_verification", "verification"})


@router.head("/notion-webhook")
async def webhook_probe() -> Response:
    return Response(status_code=200)


@router.post("/notion-webhook", response_model=None)
async def notion_webhook(
    request: Request,
    service: MediaSyncService = Depends(get_sync_service),
) -> Union[Dict[str, Any], Response]:
    body = await read_json_object(request)
    LOGGER.debug("Webhook event received", payload=body)
    try:
        event = WebhookEvent.model_validate(body)
    except PayloadError as exc:
        raise ValidationError("malformed webhook event") from exc

    challenge = event.challenge or event.verification_token
    if event.type in VERIFICATION_TYPES and not challenge:
        raise ValidationError("challenge missing")
    if challenge:
        LOGGER.info("Webhook verification handshake", event_type=event.type)
        return {"challenge": challenge}

    if event.type != CONTENT_UPDATED:
        return PlainTextResponse("ignored")

    page_id = event.entity.id if event.entity else None
    if not page_id:
        raise ValidationError("entity.id missing")

    try:
        result = await service.sync_page_to_item(page_id)
    except BridgeError:
        raise
    except Exception as exc:
        raise BridgeError(str(exc)) from exc

    if result.status == "no_match":
        return PlainTextResponse("no monday row")
    if result.status == "nothing_new":
        return PlainTextResponse("nothing new")
    return {"ok": True, "added": result.added}
