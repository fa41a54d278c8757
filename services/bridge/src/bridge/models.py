"""Shared data models for the bridge service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .media import classify, filename_from_url, mime_for, preview_kind


class PlacementMode(str, Enum):
    """How a transferred file ended up at the destination."""

    EMBEDDED = "embedded"  # bytes copied into destination storage
    LINKED = "linked"  # destination keeps a pointer to the source URL


@dataclass(slots=True)
class MediaReference:
    """One remote file waiting to be transferred."""

    name: str
    source_url: Optional[str]
    origin_id: str
    declared_size: Optional[int] = None
    mime_hint: Optional[str] = None
    upload_handle_id: Optional[str] = None

    @property
    def content_type(self) -> str:
        return self.mime_hint or mime_for(self.name)

    @classmethod
    def from_asset(cls, asset: Dict[str, Any]) -> "MediaReference":
        """Build a reference from a monday.com asset record."""

        size = asset.get("file_size")
        return cls(
            name=asset.get("name") or f"{asset['id']}.bin",
            source_url=asset.get("public_url"),
            origin_id=str(asset["id"]),
            declared_size=int(size) if size is not None else None,
            mime_hint=asset.get("mimetype"),
        )

    @classmethod
    def from_block(cls, block: "MediaBlock") -> "MediaReference":
        """Build a reference from a Notion media block.

        Hosted uploads only carry a file-upload id; the pipeline resolves
        those to a download URL before fetching.
        """

        data = block.content
        url = (data.get("external") or {}).get("url") or (data.get("file") or {}).get("url")
        handle_id = None if url else (data.get("file_upload") or {}).get("id")
        fallback = f"{block.id}.bin"
        name = data.get("name") or (filename_from_url(url, fallback) if url else fallback)
        return cls(
            name=name,
            source_url=url,
            origin_id=block.id,
            upload_handle_id=handle_id,
        )


@dataclass(slots=True)
class FileUploadHandle:
    """Notion file upload object: created before bytes are sent, short-lived."""

    handle_id: str
    upload_url: Optional[str] = None
    retrievable_url: Optional[str] = None
    filename: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "FileUploadHandle":
        return cls(
            handle_id=payload["id"],
            upload_url=payload.get("upload_url"),
            retrievable_url=payload.get("url") or payload.get("download_url"),
            filename=payload.get("filename"),
            status=payload.get("status"),
        )


@dataclass(slots=True)
class TransferredFile:
    """Outcome of transferring one reference."""

    display_name: str
    placement: PlacementMode
    pointer: str
    source_url: str
    origin_id: str
    size: int = 0

    @property
    def embedded(self) -> bool:
        return self.placement is PlacementMode.EMBEDDED

    def _file_object(self) -> Dict[str, Any]:
        if self.embedded:
            return {"type": "file_upload", "file_upload": {"id": self.pointer}}
        return {"type": "external", "external": {"url": self.pointer}}

    def to_property_file(self) -> Dict[str, Any]:
        """Entry for a Notion ``files`` property."""

        return {"name": self.display_name, **self._file_object()}

    def to_preview_block(self) -> Dict[str, Any]:
        """Notion block previewing this file; kind follows the extension."""

        kind = preview_kind(self.display_name)
        body = self._file_object()
        if kind == "file":
            body["name"] = self.display_name
        return {"object": "block", "type": kind, kind: body}

    @property
    def content_type(self) -> str:
        return classify(self.display_name)[0]


@dataclass(slots=True)
class MediaBlock:
    """A Notion block whose type qualifies as media."""

    id: str
    type: str
    depth: int
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def content(self) -> Dict[str, Any]:
        return self.raw.get(self.type) or {}


@dataclass(slots=True)
class BoardItem:
    """A monday.com item with its attached assets."""

    id: str
    name: str
    assets: List[MediaReference] = field(default_factory=list)


__all__ = [
    "BoardItem",
    "FileUploadHandle",
    "MediaBlock",
    "MediaReference",
    "PlacementMode",
    "TransferredFile",
]
