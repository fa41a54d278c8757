"""Request payloads shared by the bridge routes."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from ..errors import ValidationError


class AddMediaRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: int = Field(..., alias="itemId", gt=0)
    page_id: Optional[str] = Field(default=None, alias="pageId", min_length=1)


class WebhookEntity(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    type: Optional[str] = None


class WebhookEvent(BaseModel):
    """Notion webhook envelope; only the routing fields are typed."""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    challenge: Optional[str] = None
    verification_token: Optional[str] = None
    entity: Optional[WebhookEntity] = None
    data: Optional[Dict[str, Any]] = None


async def read_json_object(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("request body must be JSON") from exc
    if not isinstance(body, dict):
        raise ValidationError("request body must be a JSON object")
    return body


__all__ = ["AddMediaRequest", "WebhookEntity", "WebhookEvent", "read_json_object"]
