"""Filename helpers: display-name truncation and extension classification."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Literal, Tuple
from urllib.parse import unquote, urlparse

PreviewKind = Literal["video", "image", "file"]

MAX_NAME_LENGTH = 100
ELLIPSIS = "…"
# longer "extensions" are treated as part of the stem
MAX_SUFFIX_LENGTH = 10

MEDIA_BLOCK_TYPES = frozenset({"image", "video", "file", "pdf", "audio"})

GENERIC_MIME = "application/octet-stream"

# extension -> (mime type, preview block kind)
_EXTENSIONS: Dict[str, Tuple[str, PreviewKind]] = {
    ".mp4": ("video/mp4", "video"),
    ".jpg": ("image/jpeg", "image"),
    ".jpeg": ("image/jpeg", "image"),
    ".png": ("image/png", "image"),
    ".gif": ("image/gif", "image"),
    ".webp": ("image/webp", "image"),
    ".tif": ("image/tiff", "image"),
    ".tiff": ("image/tiff", "image"),
    ".pdf": ("application/pdf", "file"),
}


def extension_of(filename: str) -> str:
    return PurePosixPath(filename).suffix.lower()


def classify(filename: str) -> Tuple[str, PreviewKind]:
    """Return ``(mime_type, preview_kind)`` for a filename.

    Unknown extensions fall back to a generic binary file.
    """

    return _EXTENSIONS.get(extension_of(filename), (GENERIC_MIME, "file"))


def mime_for(filename: str) -> str:
    return classify(filename)[0]


def preview_kind(filename: str) -> PreviewKind:
    return classify(filename)[1]


def truncate_name(name: str, limit: int = MAX_NAME_LENGTH) -> str:
    """Clamp a display name to ``limit`` characters.

    The stem is cut and marked with an ellipsis; a short extension is kept
    after it so the name still classifies the same way.
    """

    if len(name) <= limit:
        return name
    suffix = PurePosixPath(name).suffix
    if not suffix or len(suffix) > MAX_SUFFIX_LENGTH:
        suffix = ""
    stem = name[: len(name) - len(suffix)]
    return stem[: limit - len(ELLIPSIS) - len(suffix)] + ELLIPSIS + suffix


def is_media_block_type(block_type: str) -> bool:
    return block_type in MEDIA_BLOCK_TYPES


def filename_from_url(url: str, fallback: str) -> str:
    """Last path segment of ``url``, or ``fallback`` when there is none."""

    name = PurePosixPath(unquote(urlparse(url).path)).name
    return name or fallback


__all__ = [
    "MAX_NAME_LENGTH",
    "MEDIA_BLOCK_TYPES",
    "GENERIC_MIME",
    "classify",
    "extension_of",
    "filename_from_url",
    "is_media_block_type",
    "mime_for",
    "preview_kind",
    "truncate_name",
]
