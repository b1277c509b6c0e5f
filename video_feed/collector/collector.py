"""Core collector turning a feed category into batches of playable, audible clips."""

import logging
import random
from contextlib import nullcontext
from typing import List, Optional

from video_feed.categories import CategoryRegistry
from video_feed.collector.cache import ResponseCache
from video_feed.collector.error_handler import (
    FetchError,
    NoQualifyingContent,
    advance_stride,
    extract_listing,
    outcome_label,
)
from video_feed.collector.rotation import RotationState
from video_feed.config import Config
from video_feed.models.mapping import children_to_records
from video_feed.models.video import VideoRecord
from video_feed.reddit_client import RedditClient

logger = logging.getLogger(__name__)


class VideoCollector:
    """
    Collector for short-video batches with subreddit rotation and bounded retries.

    One instance backs one feed. ``fetch_videos`` is not safe for overlapping
    calls on the same instance; callers must wait for one call to finish before
    starting the next.
    """

    def __init__(
        self,
        client: RedditClient,
        config: Optional[Config] = None,
        registry: Optional[CategoryRegistry] = None,
        cache: Optional[ResponseCache] = None,
        prometheus_exporter=None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the video collector.

        Args:
            client: Client used for listing requests
            config: Application configuration (defaults to Config())
            registry: Category lookup (defaults to the configured categories)
            cache: Response cache (a fresh one per collector by default)
            prometheus_exporter: Optional metrics exporter
            rng: Random source for subreddit order and batch shuffling
        """
        self.client = client
        self.config = config or Config()
        self.registry = registry or CategoryRegistry(self.config.categories, self.config.default_category)
        self.cache = cache if cache is not None else ResponseCache()
        self.prometheus_exporter = prometheus_exporter
        self._rng = rng or random.Random()
        self.rotation = RotationState(
            self.registry,
            max_retries=self.config.max_retries,
            rng=self._rng,
        )

    @property
    def category(self) -> str:
        return self.rotation.category

    def set_category(self, category: str) -> None:
        """
        Switch the feed to another category.

        Does nothing if the category is already active. Otherwise the rotation
        order, cursor, pagination token and retry counter all start over.

        Args:
            category: Category name; unknown names use the default category's subreddits
        """
        if category == self.rotation.category:
            return
        logger.info(f"Switching category from '{self.rotation.category}' to '{category}'")
        self.rotation.reset(category)

    async def fetch_videos(self) -> List[VideoRecord]:
        """
        Produce the next batch of videos for the active category.

        Never raises for upstream problems: failed or empty attempts are retried
        against other subreddit windows until the retry budget is spent, after
        which an empty list is returned.

        Returns:
            Shuffled list of audible VideoRecords, or an empty list if nothing was found
        """
        window_size = self.config.window_size

        while True:
            key = self.rotation.cache_key()
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {key}, returning {len(cached)} videos")
                self._record_served(origin="cache")
                return cached

            window = self.rotation.next_window(window_size)

            try:
                batch = await self._fetch_window(window)
            except FetchError as e:
                self._log_failure(e, window)
                stride = advance_stride(e, window_size)
            else:
                self.cache.put(key, batch)
                self.rotation.reset_retries()
                self.rotation.advance(window_size)
                logger.info(
                    f"Fetched {len(batch)} videos for '{self.rotation.category}' "
                    f"from {len(window)} subreddits"
                )
                self._record_served(origin="network")
                return batch

            if self.rotation.bump_retry():
                logger.error(
                    f"Giving up on '{self.rotation.category}' after "
                    f"{self.rotation.max_retries} retries"
                )
                self.rotation.reset_retries()
                if self.prometheus_exporter:
                    self.prometheus_exporter.record_exhausted(self.rotation.category)
                    self.prometheus_exporter.set_retry_count(0)
                return []

            self.rotation.advance(stride)
            self.rotation.clear_pagination()
            if self.prometheus_exporter:
                self.prometheus_exporter.set_retry_count(self.rotation.retry_count)

    async def _fetch_window(self, window: List[str]) -> List[VideoRecord]:
        """
        Run one request for a window of subreddits and build the batch.

        Raises:
            FetchError: For any failed attempt, including a valid but empty result
        """
        if self.prometheus_exporter:
            timer = self.prometheus_exporter.time_request()
        else:
            timer = None

        try:
            with timer if timer else nullcontext():
                payload = await self.client.get_hot_listing(window, after=self.rotation.pagination_token)
            children, after = extract_listing(payload)
        except FetchError as e:
            if self.prometheus_exporter:
                self.prometheus_exporter.record_fetch_attempt(outcome_label(e))
            raise

        self.rotation.pagination_token = after

        records = children_to_records(children, self.config.video_domain)
        audible = [record for record in records if record.has_audio is True]

        batch = []
        seen_ids = set()
        for record in audible:
            if record.id not in seen_ids:
                seen_ids.add(record.id)
                batch.append(record)
        self._rng.shuffle(batch)

        if self.prometheus_exporter:
            self.prometheus_exporter.record_rejected("unplayable", len(children) - len(records))
            self.prometheus_exporter.record_rejected("silent", len(records) - len(audible))

        if not batch:
            error = NoQualifyingContent(f"No audible videos among {len(children)} items")
            if self.prometheus_exporter:
                self.prometheus_exporter.record_fetch_attempt(outcome_label(error))
            raise error

        if self.prometheus_exporter:
            self.prometheus_exporter.record_fetch_attempt("success")
        return batch

    def _log_failure(self, error: FetchError, window: List[str]) -> None:
        label = outcome_label(error)
        attempt = f"(retry {self.rotation.retry_count}/{self.rotation.max_retries})"
        if label == "timeout":
            logger.warning(f"Reddit fetch timed out, retrying... {attempt}")
        elif label == "not_found":
            logger.warning(f"{str(error)}. Retrying with next subreddit... {attempt}")
        elif label == "no_content":
            logger.info(f"{str(error)} in {'+'.join(window)}, skipping window {attempt}")
        else:
            logger.error(f"Reddit fetch error: {str(error)} {attempt}")

    def _record_served(self, origin: str) -> None:
        if self.prometheus_exporter:
            self.prometheus_exporter.record_batch_served(self.rotation.category, origin)
            self.prometheus_exporter.set_cache_entries(len(self.cache))
            self.prometheus_exporter.set_retry_count(self.rotation.retry_count)
