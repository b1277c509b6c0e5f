"""Request pacing for Reddit's public listing endpoints."""

import asyncio
import logging
import time
from typing import Any, Mapping, Optional

from video_feed.config import RateLimitConfig

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Rate limiter for Reddit listing requests.

    Monitors X-Ratelimit headers and spaces requests to make throttling less likely.
    Every sleep is capped at ``max_wait_sec`` so a retry chain never stalls for long.
    """

    def __init__(self, config: RateLimitConfig):
        """
        Initialize the rate limiter with configuration.

        Args:
            config: Rate limiting configuration
        """
        self.config = config
        self.remaining_calls: Optional[int] = None
        self.reset_timestamp: Optional[float] = None
        self.last_request_time = 0.0

        self.min_interval = 60.0 / self.config.max_requests_per_minute

    async def pre_request(self) -> None:
        """
        Check rate limits before making a request and sleep if necessary.

        This should be called before each listing request.
        """
        if not self.config.enabled:
            return

        now = time.time()
        elapsed = now - self.last_request_time
        if elapsed < self.min_interval:
            await asyncio.sleep(min(self.min_interval - elapsed, self.config.max_wait_sec))

        if (self.remaining_calls is not None and
            self.reset_timestamp is not None and
            self.remaining_calls < self.config.min_remaining_calls):

            wait_time = self.reset_timestamp - time.time() + self.config.sleep_buffer_sec
            if wait_time > 0:
                wait_time = min(wait_time, self.config.max_wait_sec)
                logger.info(f"Rate limit approaching: {self.remaining_calls} calls remaining. "
                            f"Sleeping for {wait_time:.2f}s.")
                await asyncio.sleep(wait_time)
            self.remaining_calls = None
            self.reset_timestamp = None

    def update_from_headers(self, headers: Mapping[str, Any]) -> None:
        """
        Update rate limit tracking based on listing response headers.

        Args:
            headers: Response headers from a Reddit request
        """
        self.last_request_time = time.time()
        lowered = {str(key).lower(): value for key, value in headers.items()}

        if "x-ratelimit-remaining" in lowered:
            try:
                self.remaining_calls = int(float(lowered["x-ratelimit-remaining"]))
            except (ValueError, TypeError):
                logger.warning("Failed to parse x-ratelimit-remaining header")

        if "x-ratelimit-reset" in lowered:
            try:
                self.reset_timestamp = time.time() + float(lowered["x-ratelimit-reset"])
            except (ValueError, TypeError):
                logger.warning("Failed to parse x-ratelimit-reset header")

        if self.remaining_calls is not None and self.reset_timestamp is not None:
            reset_in = self.reset_timestamp - time.time()
            logger.debug(f"Rate limit status: {self.remaining_calls} calls remaining, "
                         f"reset in {reset_in:.2f}s")

    def note_throttled(self, retry_after: Optional[str] = None) -> None:
        """
        Record a 429 response so the next request waits for the hinted period.

        Does not sleep; the wait happens in the next ``pre_request`` and is
        capped there.

        Args:
            retry_after: Value of the Retry-After header, if available
        """
        try:
            wait_seconds = float(retry_after) if retry_after else self.config.max_wait_sec
        except (ValueError, TypeError):
            wait_seconds = self.config.max_wait_sec

        logger.warning(f"Rate limited (429). Next request deferred by up to {wait_seconds:.2f}s.")
        self.remaining_calls = 0
        self.reset_timestamp = time.time() + wait_seconds
