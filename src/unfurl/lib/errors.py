"""Errors raised while building an embed.

Each error knows the HTTP status and the short plain-text message returned
to the client. The exception handler in ``main.py`` does the mapping, so the
library code never deals with responses.
"""


class EmbedError(Exception):
    """Base class for everything that can stop an embed from being served."""

    status_code = 500
    public_message = "Internal server error."

    def __init__(self, detail: str | None = None, *, post_id: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message
        self.post_id = post_id


class ConfigurationError(EmbedError):
    status_code = 500
    public_message = "Server configuration error: Missing Twitter API Bearer Token."


class InvalidIdentifierError(EmbedError):
    status_code = 400
    public_message = "Invalid Tweet ID format."


class NotFoundError(EmbedError):
    """The provider had no usable post (or author/media) for the identifier."""

    status_code = 404
    public_message = "Could not find a video in this Tweet."


class NoVideoError(EmbedError):
    status_code = 404
    public_message = "This Tweet does not contain a processable video."


class NoMp4VariantError(EmbedError):
    """A video item exists, but none of its variants is an MP4."""

    status_code = 404
    public_message = "No MP4 video variant found for this Tweet."


class UpstreamError(EmbedError):
    """The provider call failed, timed out, or returned a non-success status.

    ``upstream_status`` is ``None`` when no response was received.
    """

    status_code = 500
    public_message = "Failed to fetch Tweet data from the API."

    def __init__(
        self,
        detail: str | None = None,
        *,
        post_id: str | None = None,
        upstream_status: int | None = None,
        upstream_body: str | None = None,
    ):
        super().__init__(detail, post_id=post_id)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
