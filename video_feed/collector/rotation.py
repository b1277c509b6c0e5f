"""Rotation over a category's subreddits, plus the pagination and retry state of a feed."""

import logging
import random
from typing import List, Optional, Tuple

from video_feed.categories import CategoryRegistry

logger = logging.getLogger(__name__)

START_TOKEN = "start"


class RotationState:
    """
    Mutable traversal state for one feed.

    Holds a shuffled order of the active category's subreddits, a cursor into
    that order, the upstream ``after`` token and the consecutive retry counter.
    Not safe for overlapping use; callers serialize fetches.
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        category: Optional[str] = None,
        max_retries: int = 30,
        rng: Optional[random.Random] = None,
    ):
        self.registry = registry
        self.max_retries = max_retries
        self._rng = rng or random.Random()

        self.category = ""
        self.order: List[str] = []
        self.cursor = 0
        self.pagination_token: Optional[str] = None
        self.retry_count = 0

        self.reset(category if category is not None else registry.default)

    def reset(self, category: str) -> None:
        """Start a fresh, randomly ordered traversal of ``category``."""
        self.category = category
        self.order = self.registry.sources_for(category)
        self._rng.shuffle(self.order)
        self.cursor = 0
        self.pagination_token = None
        self.retry_count = 0
        logger.debug(f"Rotation reset for '{category}' over {len(self.order)} subreddits")

    def next_window(self, size: int) -> List[str]:
        """
        Return up to ``size`` subreddits starting at the cursor.

        Windows never wrap; the last window of a pass may be shorter.
        """
        end = min(self.cursor + size, len(self.order))
        return self.order[self.cursor:end]

    def advance(self, step: int) -> None:
        """Move the cursor, reshuffling the order whenever it wraps back to the start."""
        self.cursor = (self.cursor + step) % len(self.order)
        if self.cursor == 0:
            self._rng.shuffle(self.order)
            logger.debug(f"Completed a pass over '{self.category}', reshuffled subreddits")

    def bump_retry(self) -> bool:
        """
        Count one more retry.

        Returns:
            True if the retry budget was already spent (nothing is counted),
            False if the retry was counted and may proceed
        """
        if self.retry_count >= self.max_retries:
            return True
        self.retry_count += 1
        return False

    def reset_retries(self) -> None:
        self.retry_count = 0

    def clear_pagination(self) -> None:
        self.pagination_token = None

    def cache_key(self) -> Tuple[str, str]:
        return self.category, self.pagination_token or START_TOKEN
