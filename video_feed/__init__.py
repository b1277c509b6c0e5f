"""Content acquisition engine for an infinite short-video feed backed by Reddit."""

from video_feed.categories import CATEGORY_MAP, DEFAULT_CATEGORY, CategoryRegistry
from video_feed.collector.collector import VideoCollector
from video_feed.config import Config
from video_feed.models.video import VideoRecord
from video_feed.reddit_client import RedditClient
from video_feed.session import FeedSession

__all__ = [
    "CATEGORY_MAP",
    "DEFAULT_CATEGORY",
    "CategoryRegistry",
    "Config",
    "FeedSession",
    "RedditClient",
    "VideoCollector",
    "VideoRecord",
]

__version__ = "0.1.0"
