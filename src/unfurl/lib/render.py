"""Render the embed HTML document.

Every ``{{ ... }}`` expression in the template passes through
:func:`escape_html`, so post text, author fields and URLs can never break out
of the attribute they are placed in. Quotes are escaped as ``&quot;``.
"""

import html

from jinja2 import Environment, StrictUndefined

from ..models import MediaItem, MediaVariant, PostBundle
from .variants import MP4_CONTENT_TYPE

EMBED_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Tweet by {{ name }}</title>

    <!-- Open Graph / General -->
    <meta property="og:title" content="{{ title }}">
    <meta property="og:description" content="{{ text }}">
    <meta property="og:image" content="{{ image }}">

    <!-- Twitter Card -->
    <meta name="twitter:card" content="player">
    <meta name="twitter:title" content="{{ title }}">
    <meta name="twitter:description" content="{{ text }}">
    <meta name="twitter:image" content="{{ image }}">
    <meta name="twitter:player" content="{{ video_url }}">
    <meta name="twitter:player:width" content="{{ width }}">
    <meta name="twitter:player:height" content="{{ height }}">

    <!-- Video tags for Discord/Telegram -->
    <meta property="og:video" content="{{ video_url }}">
    <meta property="og:video:secure_url" content="{{ video_url }}">
    <meta property="og:video:type" content="{{ video_type }}">
    <meta property="og:video:width" content="{{ width }}">
    <meta property="og:video:height" content="{{ height }}">

    <!-- Send people who click the link on to the tweet -->
    <meta http-equiv="refresh" content="0; url={{ redirect_url }}">
</head>
<body>
    <p>Redirecting you to the tweet...</p>
</body>
</html>
"""


def escape_html(value) -> str:
    """Escape ``&``, ``<``, ``>``, ``"`` and ``'`` for use in HTML attributes."""
    return html.escape("" if value is None else str(value), quote=True)


_env = Environment(
    autoescape=False,
    finalize=escape_html,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)
_template = _env.from_string(EMBED_TEMPLATE)


def canonical_post_url(handle: str, post_id: str) -> str:
    return f"https://twitter.com/{handle}/status/{post_id}"


def render_embed(
    post_id: str,
    bundle: PostBundle,
    item: MediaItem,
    variant: MediaVariant,
) -> str:
    """Render the embed page for *variant* of *item* in *bundle*."""
    author = bundle.author
    return _template.render(
        name=author.name,
        title=f"{author.name} (@{author.handle})",
        text=bundle.text,
        image=item.preview_image_url,
        video_url=variant.url,
        video_type=MP4_CONTENT_TYPE,
        width=item.width,
        height=item.height,
        redirect_url=canonical_post_url(author.handle, post_id),
    )
