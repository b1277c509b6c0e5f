"""Feed session: the accumulated feed plus the single-flight loading guard."""

import logging
from typing import List

from video_feed.collector.collector import VideoCollector
from video_feed.models.video import VideoRecord

logger = logging.getLogger(__name__)


class FeedSession:
    """
    Caller-side state of one scrolling feed.

    Only one load may be in flight at a time; calls made while loading are
    dropped instead of overlapping on the collector.
    """

    def __init__(self, collector: VideoCollector):
        self.collector = collector
        self.videos: List[VideoRecord] = []
        self.loading = False

    @property
    def category(self) -> str:
        return self.collector.category

    @property
    def is_empty(self) -> bool:
        return not self.videos

    async def load_more(self, initial: bool = False) -> List[VideoRecord]:
        """
        Fetch the next batch and append it to the feed.

        Args:
            initial: Replace the feed instead of appending to it

        Returns:
            The newly fetched batch (empty if a load was already running or nothing was found)
        """
        if self.loading:
            logger.debug("Load already in progress, ignoring request")
            return []

        self.loading = True
        try:
            batch = await self.collector.fetch_videos()
        finally:
            self.loading = False

        if initial:
            self.videos = list(batch)
        else:
            self.videos.extend(batch)

        if not batch:
            logger.warning(f"No videos found for '{self.category}' right now")
        return batch

    async def change_category(self, category: str) -> List[VideoRecord]:
        """
        Switch to another category and load its first batch.

        Ignored when the category is already active or a load is running.

        Returns:
            The first batch of the new category, or an empty list if ignored
        """
        if category == self.category or self.loading:
            return []

        self.videos = []
        self.collector.set_category(category)
        return await self.load_more(initial=True)
