"""HTTP client for Reddit's public, unauthenticated JSON listings."""

import asyncio
import logging
import random
from typing import Any, Dict, List, Optional

import aiohttp

from video_feed.collector.error_handler import MalformedPayload, NetworkTimeout, UpstreamHttpError
from video_feed.collector.rate_limiter import RateLimiter
from video_feed.config import Config

logger = logging.getLogger(__name__)


class RedditClient:
    """Wrapper around an aiohttp session for fetching combined-subreddit hot listings."""

    def __init__(
        self,
        config: Config,
        session: Optional[aiohttp.ClientSession] = None,
        rate_limiter: Optional[RateLimiter] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the Reddit client with configuration.

        Args:
            config: Application configuration
            session: Optional externally owned session; one is created lazily otherwise
            rate_limiter: Optional pacing for outgoing requests
            rng: Random source for picking the User-Agent
        """
        self.config = config
        self.rate_limiter = rate_limiter
        self._session = session
        self._owns_session = session is None
        self._rng = rng or random.Random()

    async def initialize(self) -> aiohttp.ClientSession:
        """
        Create the HTTP session if needed.

        Returns:
            The aiohttp session used for requests
        """
        if self._session is None or self._session.closed:
            logger.info("Initializing Reddit HTTP session")
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.request_timeout_sec),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            logger.info("Closing Reddit HTTP session")
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "RedditClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def listing_url(self, subreddits: List[str]) -> str:
        return f"{self.config.base_url}/r/{'+'.join(subreddits)}/hot.json"

    def _pick_user_agent(self) -> str:
        return self._rng.choice(self.config.user_agents)

    async def get_hot_listing(self, subreddits: List[str], after: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch one page of the combined hot listing for a window of subreddits.

        The request races a fixed deadline; on expiry it is cancelled and its
        connection released before NetworkTimeout is raised.

        Args:
            subreddits: Subreddit names to combine into one ``a+b+c`` listing
            after: Continuation token from the previous page, if any

        Returns:
            Decoded JSON body

        Raises:
            NetworkTimeout: If the deadline passed
            UpstreamHttpError: On a non-2xx status or a transport failure
            MalformedPayload: If the body is not valid JSON
        """
        url = self.listing_url(subreddits)
        params = {"limit": str(self.config.page_limit), "raw_json": "1"}
        if after:
            params["after"] = after
        headers = {
            "Accept": "application/json",
            "User-Agent": self._pick_user_agent(),
        }

        if self.rate_limiter:
            await self.rate_limiter.pre_request()

        try:
            return await asyncio.wait_for(
                self._get_json(url, params, headers),
                timeout=self.config.request_timeout_sec,
            )
        except asyncio.TimeoutError as e:
            raise NetworkTimeout(
                f"Request to {url} timed out after {self.config.request_timeout_sec}s"
            ) from e

    async def _get_json(self, url: str, params: Dict[str, str], headers: Dict[str, str]) -> Any:
        session = await self.initialize()

        try:
            async with session.get(url, params=params, headers=headers) as response:
                if self.rate_limiter:
                    self.rate_limiter.update_from_headers(response.headers)

                if response.status == 404:
                    raise UpstreamHttpError(f"Subreddits not found (404): {url}", status=404)
                if response.status == 429 and self.rate_limiter:
                    self.rate_limiter.note_throttled(response.headers.get("Retry-After"))
                if not 200 <= response.status < 300:
                    raise UpstreamHttpError(f"Reddit API error: {response.status}", status=response.status)

                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedPayload(f"Response from {url} is not valid JSON") from e
        except asyncio.TimeoutError:
            raise
        except aiohttp.ClientError as e:
            raise UpstreamHttpError(f"Request to {url} failed: {str(e)}") from e
