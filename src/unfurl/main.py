import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .config import load_settings
from .lib.errors import EmbedError, UpstreamError
from .routers import embed, health, pages
from .security import add_security_headers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # `python -m unfurl` builds the settings before starting the server.
    settings = getattr(app.state, "settings", None) or load_settings()
    if not settings.has_credential:
        logger.warning("TWITTER_BEARER_TOKEN is not set; embed requests will fail")
    app.state.settings = settings

    async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
        app.state.http = http
        yield


app = FastAPI(
    title="Unfurl",
    description="Serves Open Graph / player-card pages so tweet videos play inline in chat apps",
    version="0.1.0",
    lifespan=lifespan,
)

app.middleware("http")(add_security_headers)

app.include_router(health.router)
app.include_router(embed.router)
# Catch-all; keep last.
app.include_router(pages.router)


@app.exception_handler(EmbedError)
async def embed_error_handler(request: Request, exc: EmbedError) -> PlainTextResponse:
    if isinstance(exc, UpstreamError):
        logger.error(
            "Error fetching post %s from Twitter API: %s (upstream status=%s body=%s)",
            exc.post_id,
            exc.detail,
            exc.upstream_status,
            exc.upstream_body,
        )
    elif exc.status_code >= 500:
        logger.error("Cannot serve embed for post %s: %s", exc.post_id, exc.detail)
    else:
        logger.info(
            "No embed for post %s (%s): %s", exc.post_id, type(exc).__name__, exc.detail
        )
    return PlainTextResponse(exc.public_message, status_code=exc.status_code)
