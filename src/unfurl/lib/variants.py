"""Pick the video and the encoding to advertise in an embed."""

from ..models import MediaItem, MediaType, MediaVariant, PostBundle
from .errors import NoMp4VariantError, NoVideoError

MP4_CONTENT_TYPE = "video/mp4"


def first_video(bundle: PostBundle) -> MediaItem | None:
    return next((m for m in bundle.media if m.type == MediaType.VIDEO), None)


def best_mp4_variant(item: MediaItem) -> MediaVariant | None:
    """Return the highest-bitrate MP4 variant of *item*, or ``None``.

    A missing bitrate ranks as 0. ``max`` keeps the first of equal keys, so
    ties go to the variant listed first.
    """
    mp4s = [v for v in item.variants if v.content_type == MP4_CONTENT_TYPE]
    if not mp4s:
        return None
    return max(mp4s, key=lambda v: v.bitrate or 0)


def select_video(bundle: PostBundle) -> tuple[MediaItem, MediaVariant]:
    """Return the first video item in *bundle* and its best MP4 variant.

    Raises ``NoVideoError`` when the bundle has no video item and
    ``NoMp4VariantError`` when the first video has no MP4 encoding.
    """
    item = first_video(bundle)
    if item is None:
        raise NoVideoError("post has no video media item")

    variant = best_mp4_variant(item)
    if variant is None:
        kinds = sorted({v.content_type for v in item.variants})
        raise NoMp4VariantError(f"video has no {MP4_CONTENT_TYPE} variant (found: {kinds})")
    return item, variant
