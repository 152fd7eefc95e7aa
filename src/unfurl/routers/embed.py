"""Embed router.

GET /embed/{post_id}  (also HEAD, and with a trailing slash)
    Resolve the tweet, pick its best MP4 and return an HTML page whose meta
    tags make chat apps show an inline video player. Failures are raised as
    ``EmbedError`` subclasses and turned into plain-text responses by the
    handler registered in ``main.py``.
"""

import logging
import re
from urllib.parse import unquote_to_bytes

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ..lib.errors import ConfigurationError, InvalidIdentifierError
from ..lib.render import render_embed
from ..lib.twitter import resolve_post
from ..lib.variants import select_video

router = APIRouter(tags=["embed"])

logger = logging.getLogger(__name__)

# ASCII digits only; a bare \d would also accept other Unicode digits.
POST_ID_RE = re.compile(r"[0-9]+")


EMBED_PREFIX = b"/embed/"


def is_valid_post_id(post_id: str) -> bool:
    return POST_ID_RE.fullmatch(post_id) is not None


def encoded_slash_post_id(raw_path: bytes | None) -> str | None:
    """Return the decoded id of an ``/embed/`` URL whose id has an encoded slash.

    The router only sees the decoded path, so ``/embed/12%2F3`` looks like
    two segments and misses the embed route. Such ids are still a single
    (invalid) segment in the raw path; anything else returns ``None``.
    """
    if not raw_path:
        return None
    raw_path = raw_path.split(b"?", 1)[0]
    if not raw_path.startswith(EMBED_PREFIX):
        return None
    segment = raw_path[len(EMBED_PREFIX):]
    if segment.endswith(b"/"):
        segment = segment[:-1]
    if not segment or b"/" in segment:
        return None
    return unquote_to_bytes(segment).decode("utf-8", errors="replace")


# Also answers HEAD and the trailing-slash form, like a non-strict GET route.
@router.api_route("/embed/{post_id}", methods=["GET", "HEAD"], response_class=HTMLResponse)
@router.api_route(
    "/embed/{post_id}/",
    methods=["GET", "HEAD"],
    response_class=HTMLResponse,
    include_in_schema=False,
)
async def embed(request: Request, post_id: str) -> HTMLResponse:
    settings = request.app.state.settings
    if not settings.has_credential:
        raise ConfigurationError("TWITTER_BEARER_TOKEN is not set", post_id=post_id)

    if not is_valid_post_id(post_id):
        raise InvalidIdentifierError(f"not a numeric id: {post_id!r}", post_id=post_id)

    bundle = await resolve_post(request.app.state.http, post_id, settings)
    item, variant = select_video(bundle)
    logger.info(
        "Serving embed for post %s (%s bit/s, %dx%d)",
        post_id,
        variant.bitrate,
        item.width,
        item.height,
    )
    return HTMLResponse(render_embed(post_id, bundle, item, variant))
