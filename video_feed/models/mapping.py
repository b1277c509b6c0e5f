"""Mapping functions to convert raw Reddit listing children to VideoRecords."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from video_feed.models.video import VideoRecord

logger = logging.getLogger(__name__)

REDDIT_WEB_ROOT = "https://reddit.com"
DEFAULT_VIDEO_DOMAIN = "v.redd.it"

# Checked in order; the first container present on the submission wins.
_MEDIA_LOCATIONS: Tuple[Tuple[str, str], ...] = (
    ("secure_media", "reddit_video"),
    ("preview", "reddit_video_preview"),
)


def _locate_media(data: Dict[str, Any]) -> Tuple[Optional[str], bool]:
    """Return the fallback URL and audio flag of the first video container found."""
    for outer, inner in _MEDIA_LOCATIONS:
        outer_value = data.get(outer)
        container = outer_value.get(inner) if isinstance(outer_value, dict) else None
        if isinstance(container, dict):
            return container.get("fallback_url"), bool(container.get("has_audio"))
    return None, False


def _is_video_host(url: str, video_domain: str) -> bool:
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not hostname:
        return False
    host = hostname.lower()
    return host == video_domain or host.endswith("." + video_domain)


def _normalize_thumbnail(thumbnail: Any) -> str:
    # Reddit uses sentinels such as "self", "default" and "nsfw" in place of URLs
    if isinstance(thumbnail, str) and thumbnail.startswith(("http://", "https://")):
        return thumbnail
    return ""


def _coerce_score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _absolute_permalink(permalink: str) -> str:
    if permalink.startswith(("http://", "https://")):
        return permalink
    if not permalink.startswith("/"):
        permalink = "/" + permalink
    return REDDIT_WEB_ROOT + permalink


def child_to_record(
    child: Dict[str, Any],
    video_domain: str = DEFAULT_VIDEO_DOMAIN,
) -> Optional[VideoRecord]:
    """
    Convert one listing child into a VideoRecord.

    Args:
        child: A listing child (``{"kind": "t3", "data": {...}}``) or its bare ``data`` dict
        video_domain: Host that playable media URLs must belong to

    Returns:
        The VideoRecord, or None if the item has no playable video on the video
        host or is missing required fields
    """
    data = child.get("data") if isinstance(child.get("data"), dict) else child

    video_url, has_audio = _locate_media(data)
    if not video_url or not isinstance(video_url, str):
        return None
    if not _is_video_host(video_url, video_domain):
        logger.debug(f"Rejecting {data.get('id')}: media URL {video_url} is not on {video_domain}")
        return None

    post_id = data.get("id")
    author = data.get("author")
    subreddit = data.get("subreddit")
    permalink = data.get("permalink")
    for field_name, value in (("id", post_id), ("author", author), ("subreddit", subreddit), ("permalink", permalink)):
        if not isinstance(value, str) or not value:
            logger.debug(f"Rejecting {post_id}: missing {field_name}")
            return None

    ups = _coerce_score(data.get("ups", 0))
    if ups is None:
        logger.debug(f"Rejecting {post_id}: non-integer ups {data.get('ups')!r}")
        return None

    title = data.get("title")
    return VideoRecord(
        id=post_id,
        title=title if isinstance(title, str) else "",
        author=author,
        url=video_url,
        thumbnail=_normalize_thumbnail(data.get("thumbnail")),
        ups=ups,
        subreddit=subreddit,
        permalink=_absolute_permalink(permalink),
        has_audio=has_audio,
    )


def children_to_records(
    children: Iterable[Any],
    video_domain: str = DEFAULT_VIDEO_DOMAIN,
) -> List[VideoRecord]:
    """
    Convert a page of listing children, dropping every item that fails to map.

    Args:
        children: The ``data.children`` array of a listing
        video_domain: Host that playable media URLs must belong to

    Returns:
        List of VideoRecords in listing order
    """
    records = []

    for child in children:
        if not isinstance(child, dict):
            continue
        record = child_to_record(child, video_domain)
        if record is not None:
            records.append(record)

    return records
