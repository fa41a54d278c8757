from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from common.config import settings
from common.logging import configure_logging, get_logger

from .dependencies import require_settings
from .errors import BridgeError
from .routes.media import router as media_router
from .routes.webhook import router as webhook_router

LOGGER = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.log_level)
    require_settings()
    LOGGER.info("Bridge service starting", environment=settings.environment)
    yield


app = FastAPI(title="monday ⇄ Notion media bridge", lifespan=lifespan)
app.include_router(media_router)
app.include_router(webhook_router)


@app.exception_handler(BridgeError)
async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error("Request failed", path=request.url.path, error=str(exc), exc_info=exc)
    else:
        LOGGER.warning("Request rejected", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": str(exc)})


@app.get("/healthz")
async def health() -> dict[str, str]:
    """Basic health check for load balancer."""
    return {"status": "ok"}
