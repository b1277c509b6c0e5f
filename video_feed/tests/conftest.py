"""Shared fixtures: listing payload builders and a fake aiohttp session."""

import asyncio
import random
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from video_feed.config import Config


def make_child(
    post_id: str,
    has_audio: Optional[bool] = True,
    url: Optional[str] = None,
    location: str = "secure_media",
    thumbnail: str = "https://b.thumbs.redditmedia.com/x.jpg",
    **overrides: Any,
) -> Dict[str, Any]:
    """Build one ``t3`` listing child carrying a Reddit-hosted video."""
    video = {"fallback_url": url or f"https://v.redd.it/{post_id}/DASH_720.mp4?source=fallback"}
    if has_audio is not None:
        video["has_audio"] = has_audio

    data = {
        "id": post_id,
        "title": f"Clip {post_id}",
        "author": "someone",
        "ups": 1234,
        "subreddit": "funny",
        "permalink": f"/r/funny/comments/{post_id}/clip/",
        "thumbnail": thumbnail,
    }
    if location == "secure_media":
        data["secure_media"] = {"reddit_video": video}
    elif location == "preview":
        data["preview"] = {"reddit_video_preview": video}
    data.update(overrides)
    return {"kind": "t3", "data": data}


def make_listing(children: List[Dict[str, Any]], after: Optional[str] = None) -> Dict[str, Any]:
    return {"kind": "Listing", "data": {"after": after, "children": children}}


class FakeResponse:
    """Stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status: int = 200, payload: Any = None, headers: Optional[Dict[str, str]] = None,
                 delay: float = 0.0, json_error: Optional[Exception] = None, enter_error: Optional[Exception] = None):
        self.status = status
        self.payload = payload
        self.headers = headers or {}
        self.delay = delay
        self.json_error = json_error
        self.enter_error = enter_error
        self.released = False

    async def __aenter__(self) -> "FakeResponse":
        if self.enter_error:
            raise self.enter_error
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.released = True

    async def json(self, content_type: Optional[str] = "application/json") -> Any:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.json_error:
            raise self.json_error
        return self.payload


class FakeSession:
    """Records GET calls and replays queued FakeResponses."""

    def __init__(self, responses: List[FakeResponse]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, str]] = None, headers: Optional[Dict[str, str]] = None):
        self.calls.append({"url": url, "params": params, "headers": headers})
        return self.responses.pop(0)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def config():
    """Default configuration with pacing disabled."""
    config = Config()
    config.rate_limit.enabled = False
    return config


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def mock_client():
    """Client double whose ``get_hot_listing`` is an AsyncMock."""
    client = MagicMock()
    client.get_hot_listing = AsyncMock()
    return client
