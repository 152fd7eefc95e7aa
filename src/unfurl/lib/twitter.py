"""Twitter API v2 post resolver.

Looks up a single tweet with the author and media expansions and turns the
payload into a :class:`PostBundle`:

1. Refuse to run without a bearer token (``ConfigurationError``).
2. ``GET /tweets/{id}`` once, with a bounded timeout. Transport errors,
   timeouts, non-2xx statuses and non-JSON bodies become ``UpstreamError``.
3. Validate the payload; a missing post, author or media list is a
   ``NotFoundError``.

There are no retries: the first failure is reported to the caller.
"""

import logging

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import (
    ApiMedia,
    ApiUser,
    Author,
    MediaItem,
    MediaType,
    MediaVariant,
    PostBundle,
    TweetLookupResponse,
)
from .errors import ConfigurationError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

LOOKUP_PARAMS = {
    "expansions": "author_id,attachments.media_keys",
    "tweet.fields": "text",
    "user.fields": "name,username,profile_image_url",
    "media.fields": "variants,preview_image_url,width,height",
}

# Upstream bodies are kept on errors for logging; cap what we hold on to.
MAX_ERROR_BODY = 2000


def tweet_lookup_url(settings: Settings, post_id: str) -> str:
    return f"{settings.twitter_api_base.rstrip('/')}/tweets/{post_id}"


async def fetch_tweet(http: httpx.AsyncClient, post_id: str, settings: Settings) -> dict:
    """Perform the lookup request and return the decoded JSON body."""
    if not settings.has_credential:
        raise ConfigurationError("TWITTER_BEARER_TOKEN is not set", post_id=post_id)

    url = tweet_lookup_url(settings, post_id)
    try:
        resp = await http.get(
            url,
            params=LOOKUP_PARAMS,
            headers={"Authorization": f"Bearer {settings.twitter_bearer_token}"},
            timeout=settings.request_timeout,
        )
    except httpx.TimeoutException as exc:
        raise UpstreamError(
            f"timed out after {settings.request_timeout}s", post_id=post_id
        ) from exc
    except httpx.HTTPError as exc:
        raise UpstreamError(f"request failed: {exc!r}", post_id=post_id) from exc

    if not resp.is_success:
        raise UpstreamError(
            f"provider returned HTTP {resp.status_code}",
            post_id=post_id,
            upstream_status=resp.status_code,
            upstream_body=resp.text[:MAX_ERROR_BODY],
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamError(
            "provider returned a non-JSON body",
            post_id=post_id,
            upstream_status=resp.status_code,
            upstream_body=resp.text[:MAX_ERROR_BODY],
        ) from exc


def _pick_author(users: list[ApiUser], author_id: str | None) -> ApiUser:
    if author_id is not None:
        for user in users:
            if user.id == author_id:
                return user
    return users[0]


def _media_type(raw: str | None) -> MediaType:
    try:
        return MediaType(raw)
    except ValueError:
        return MediaType.OTHER


def _to_media_item(media: ApiMedia) -> MediaItem:
    variants = tuple(
        MediaVariant(content_type=v.content_type or "", bitrate=v.bit_rate, url=v.url)
        for v in media.variants or []
        if v.url
    )
    return MediaItem(
        type=_media_type(media.type),
        preview_image_url=media.preview_image_url or media.url or "",
        width=media.width or 0,
        height=media.height or 0,
        variants=variants,
    )


def parse_tweet_payload(payload: dict, post_id: str) -> PostBundle:
    """Normalise a tweet lookup payload into a :class:`PostBundle`."""
    try:
        lookup = TweetLookupResponse.model_validate(payload)
    except ValidationError as exc:
        raise NotFoundError(f"unexpected payload shape: {exc}", post_id=post_id) from exc

    if lookup.errors:
        logger.info(
            "Twitter API reported errors for post %s: %s",
            post_id,
            [e.detail or e.title for e in lookup.errors],
        )

    tweet = lookup.data
    includes = lookup.includes
    if tweet is None:
        raise NotFoundError("payload has no data", post_id=post_id)
    if includes is None or includes.media is None:
        raise NotFoundError("payload has no media includes", post_id=post_id)
    if not includes.users:
        raise NotFoundError("payload has no author", post_id=post_id)

    user = _pick_author(includes.users, tweet.author_id)
    if not user.username:
        raise NotFoundError("author has no username", post_id=post_id)

    return PostBundle(
        text=tweet.text or "",
        author=Author(
            name=user.name or user.username,
            handle=user.username,
            avatar_url=user.profile_image_url or "",
        ),
        media=tuple(_to_media_item(m) for m in includes.media),
    )


async def resolve_post(http: httpx.AsyncClient, post_id: str, settings: Settings) -> PostBundle:
    """Fetch *post_id* from the Twitter API and return its :class:`PostBundle`.

    *post_id* must already be a validated numeric string.
    """
    payload = await fetch_tweet(http, post_id, settings)
    if not isinstance(payload, dict):
        raise NotFoundError("payload is not a JSON object", post_id=post_id)
    return parse_tweet_payload(payload, post_id)
