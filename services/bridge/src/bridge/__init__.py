"""Bridge service: syncs file attachments between monday.com and Notion."""

from .errors import BridgeError
from .models import MediaReference, PlacementMode, TransferredFile
from .pipeline import MAX_EMBED_BYTES, MediaTransferPipeline

__all__ = [
    "BridgeError",
    "MAX_EMBED_BYTES",
    "MediaReference",
    "MediaTransferPipeline",
    "PlacementMode",
    "TransferredFile",
]
