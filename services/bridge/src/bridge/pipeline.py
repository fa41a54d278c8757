"""Media transfer pipeline.

Given media references from either system, download each one, then either
embed the bytes at the destination or, when the payload is above the
destination's ceiling, keep a link to the source URL. At most
``MAX_CONCURRENT_TRANSFERS`` references are in flight at once and the first
failure aborts the batch.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List, Optional, Protocol, Tuple

import httpx

from common.http import http_client
from common.logging import get_logger

from .dedup import SeenLedger
from .errors import NetworkError, UpstreamQueryError
from .media import mime_for, truncate_name
from .models import FileUploadHandle, MediaReference, PlacementMode, TransferredFile
from .pool import gather_bounded
from .retry import NO_RETRY, RetryPolicy

LOGGER = get_logger(__name__)

# Notion's single-part upload ceiling.
MAX_EMBED_BYTES = 20 * 1024 * 1024

HandleResolver = Callable[[str], Awaitable[FileUploadHandle]]


class MediaSink(Protocol):
    """Destination that can store raw bytes and hand back a pointer."""

    max_embed_bytes: Optional[int]

    async def embed(self, data: bytes, filename: str, content_type: str) -> str:
        ...


@dataclass(slots=True)
class TransferOutcome:
    """Settled result for one reference."""

    reference: MediaReference
    file: Optional[TransferredFile] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _redact(url: str) -> str:
    # signed URLs carry credentials in the query string
    return url.split("?", 1)[0]


class MediaTransferPipeline:
    def __init__(
        self,
        sink: MediaSink,
        *,
        resolver: Optional[HandleResolver] = None,
        ledger: Optional[SeenLedger] = None,
        pacing_seconds: float = 0.0,
        retry: RetryPolicy = NO_RETRY,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._sink = sink
        self._resolver = resolver
        self._ledger = ledger
        self._pacing_seconds = pacing_seconds
        self._retry = retry
        self._timeout = timeout
        self._transport = transport

    async def transfer(self, references: Iterable[MediaReference]) -> List[TransferredFile]:
        """Transfer every fresh reference; raises on the first failure."""

        fresh = await self._claim(references)
        if not fresh:
            return []
        return await gather_bounded(fresh, self._process)

    async def transfer_settled(self, references: Iterable[MediaReference]) -> List[TransferOutcome]:
        """Transfer every fresh reference and report each outcome."""

        fresh = await self._claim(references)
        results = await gather_bounded(fresh, self._process, return_exceptions=True)
        outcomes: List[TransferOutcome] = []
        for reference, result in zip(fresh, results):
            if isinstance(result, BaseException):
                outcomes.append(TransferOutcome(reference=reference, error=result))
            else:
                outcomes.append(TransferOutcome(reference=reference, file=result))
        return outcomes

    async def _claim(self, references: Iterable[MediaReference]) -> List[MediaReference]:
        references = list(references)
        if self._ledger is None:
            return references
        fresh: List[MediaReference] = []
        try:
            for reference in references:
                if await self._ledger.claim(reference.origin_id):
                    fresh.append(reference)
                else:
                    LOGGER.debug("Skipping already transferred media", origin_id=reference.origin_id)
        except Exception:
            LOGGER.warning("Claiming media failed, releasing partial claims", claimed=len(fresh))
            await self._release(fresh)
            raise
        return fresh

    async def _release(self, references: Iterable[MediaReference]) -> None:
        for reference in references:
            try:
                await self._ledger.release(reference.origin_id)
            except Exception as exc:
                LOGGER.error("Releasing claim failed", origin_id=reference.origin_id, error=str(exc))

    async def _process(self, reference: MediaReference) -> TransferredFile:
        try:
            transferred = await self._retry.call(self._transfer_one, reference)
        except Exception:
            if self._ledger is not None:
                await self._ledger.release(reference.origin_id)
            raise
        if self._pacing_seconds > 0:
            await asyncio.sleep(self._pacing_seconds)
        return transferred

    async def _transfer_one(self, reference: MediaReference) -> TransferredFile:
        url, name = await self._resolve(reference)
        data = await self.download(url)
        display_name = truncate_name(name)
        limit = self._sink.max_embed_bytes

        if limit is not None and len(data) > limit:
            LOGGER.info(
                "Keeping oversized file as link",
                name=display_name,
                size=len(data),
                limit=limit,
            )
            return TransferredFile(
                display_name=display_name,
                placement=PlacementMode.LINKED,
                pointer=url,
                source_url=url,
                origin_id=reference.origin_id,
                size=len(data),
            )

        content_type = reference.mime_hint or mime_for(name)
        pointer = await self._sink.embed(data, display_name, content_type)
        LOGGER.info(
            "Embedded file",
            name=display_name,
            size=len(data),
            origin_id=reference.origin_id,
            pointer=pointer,
        )
        return TransferredFile(
            display_name=display_name,
            placement=PlacementMode.EMBEDDED,
            pointer=pointer,
            source_url=url,
            origin_id=reference.origin_id,
            size=len(data),
        )

    async def _resolve(self, reference: MediaReference) -> Tuple[str, str]:
        """Return the fetchable URL and filename for a reference."""

        if reference.source_url:
            return reference.source_url, reference.name
        if not reference.upload_handle_id or self._resolver is None:
            raise UpstreamQueryError(f"no url on block {reference.origin_id}")
        handle = await self._resolver(reference.upload_handle_id)
        if not handle.retrievable_url:
            raise UpstreamQueryError(f"no url on block {reference.origin_id}")
        name = reference.name
        if handle.filename and name == f"{reference.origin_id}.bin":
            name = handle.filename
        return handle.retrievable_url, name

    async def download(self, url: str) -> bytes:
        LOGGER.debug("Downloading media", url=_redact(url))
        try:
            async with http_client(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise NetworkError(f"download failed for {_redact(url)}: {exc}") from exc
        return response.content


__all__ = [
    "MAX_EMBED_BYTES",
    "MediaSink",
    "MediaTransferPipeline",
    "TransferOutcome",
]
