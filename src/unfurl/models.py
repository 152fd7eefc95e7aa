from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Normalised post bundle
# ---------------------------------------------------------------------------

class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    ANIMATED_GIF = "animated_gif"
    OTHER = "other"


class Author(BaseModel):
    """The author of a post, as reported by the provider."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name")
    handle: str = Field(..., description="Username, without the leading @")
    avatar_url: str = Field("", description="Profile image URL")


class MediaVariant(BaseModel):
    """One encoding of a media asset."""

    model_config = ConfigDict(frozen=True)

    content_type: str = Field(..., description="MIME type, e.g. video/mp4")
    bitrate: int | None = Field(None, description="Bitrate in bits/s, if known")
    url: str


class MediaItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: MediaType
    preview_image_url: str = ""
    width: int = 0
    height: int = 0
    variants: tuple[MediaVariant, ...] = ()


class PostBundle(BaseModel):
    """Everything needed to render an embed for one post."""

    model_config = ConfigDict(frozen=True)

    text: str
    author: Author
    media: tuple[MediaItem, ...] = ()


# ---------------------------------------------------------------------------
# Twitter API v2 tweet lookup payload
#
# Every nested object is optional so that presence is checked explicitly by
# the resolver instead of being assumed.
# ---------------------------------------------------------------------------

class ApiVariant(BaseModel):
    content_type: str | None = None
    bit_rate: int | None = None
    url: str | None = None


class ApiMedia(BaseModel):
    media_key: str | None = None
    type: str | None = None
    preview_image_url: str | None = None
    url: str | None = None
    width: int | None = None
    height: int | None = None
    variants: list[ApiVariant] | None = None


class ApiUser(BaseModel):
    id: str | None = None
    name: str | None = None
    username: str | None = None
    profile_image_url: str | None = None


class ApiTweet(BaseModel):
    id: str | None = None
    text: str | None = None
    author_id: str | None = None


class ApiIncludes(BaseModel):
    users: list[ApiUser] | None = None
    media: list[ApiMedia] | None = None


class ApiProblem(BaseModel):
    title: str | None = None
    detail: str | None = None
    type: str | None = None


class TweetLookupResponse(BaseModel):
    data: ApiTweet | None = None
    includes: ApiIncludes | None = None
    errors: list[ApiProblem] | None = None

    @field_validator("errors", mode="before")
    @classmethod
    def _drop_malformed_errors(cls, v):
        # Only used for diagnostics; never let its shape reject a payload.
        if not isinstance(v, list):
            return None
        return [e for e in v if isinstance(e, dict)]
