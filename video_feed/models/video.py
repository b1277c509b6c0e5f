"""Data model for playable video records produced by the collector."""

from pydantic import BaseModel, ConfigDict, Field


class VideoRecord(BaseModel):
    """
    A single playable clip in the feed.

    Records are built only by the payload mapper and are immutable afterwards.
    ``url`` always points at the video content host, never at a Reddit page.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str  # Reddit base36 id, unique within one fetched batch
    title: str = ""
    author: str
    url: str  # Direct media URL (fallback_url of the Reddit video)
    thumbnail: str = ""  # Empty when Reddit published no real thumbnail URL
    ups: int
    subreddit: str
    permalink: str  # Fully-qualified link to the submission page
    has_audio: bool = Field(default=False, alias="hasAudio")
