"""Tests for the Reddit listing HTTP client."""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from video_feed.collector.error_handler import MalformedPayload, NetworkTimeout, UpstreamHttpError
from video_feed.reddit_client import RedditClient
from video_feed.tests.conftest import FakeResponse, FakeSession, make_child, make_listing


def make_client(config, responses, rate_limiter=None):
    session = FakeSession(responses)
    return RedditClient(config, session=session, rate_limiter=rate_limiter), session


@pytest.mark.asyncio
async def test_builds_combined_listing_request(config):
    listing = make_listing([make_child("a")], after="t3_a")
    client, session = make_client(config, [FakeResponse(payload=listing)])

    payload = await client.get_hot_listing(["funny", "Aww", "Space"])

    assert payload == listing
    call = session.calls[0]
    assert call["url"] == "https://www.reddit.com/r/funny+Aww+Space/hot.json"
    assert call["params"] == {"limit": "50", "raw_json": "1"}
    assert call["headers"]["Accept"] == "application/json"
    assert call["headers"]["User-Agent"] in config.user_agents


@pytest.mark.asyncio
async def test_passes_after_token(config):
    client, session = make_client(config, [FakeResponse(payload=make_listing([]))])

    await client.get_hot_listing(["funny"], after="t3_next")

    assert session.calls[0]["params"]["after"] == "t3_next"


@pytest.mark.asyncio
async def test_not_found_is_reported_as_missing_source(config):
    client, _ = make_client(config, [FakeResponse(status=404)])

    with pytest.raises(UpstreamHttpError) as exc_info:
        await client.get_hot_listing(["doesnotexist"])

    assert exc_info.value.status == 404
    assert exc_info.value.source_not_found


@pytest.mark.asyncio
async def test_server_error(config):
    client, _ = make_client(config, [FakeResponse(status=503)])

    with pytest.raises(UpstreamHttpError) as exc_info:
        await client.get_hot_listing(["funny"])

    assert exc_info.value.status == 503
    assert not exc_info.value.source_not_found


@pytest.mark.asyncio
async def test_invalid_json_is_malformed(config):
    client, _ = make_client(config, [FakeResponse(json_error=ValueError("Expecting value"))])

    with pytest.raises(MalformedPayload):
        await client.get_hot_listing(["funny"])


@pytest.mark.asyncio
async def test_transport_error(config):
    error = aiohttp.ClientConnectionError("connection reset")
    client, _ = make_client(config, [FakeResponse(enter_error=error)])

    with pytest.raises(UpstreamHttpError) as exc_info:
        await client.get_hot_listing(["funny"])

    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_timeout_cancels_and_releases_request(config):
    config.request_timeout_sec = 0.05
    slow = FakeResponse(payload=make_listing([]), delay=5.0)
    client, _ = make_client(config, [slow])

    with pytest.raises(NetworkTimeout):
        await client.get_hot_listing(["funny"])

    assert slow.released


@pytest.mark.asyncio
async def test_rate_limiter_sees_every_response(config):
    rate_limiter = MagicMock()
    rate_limiter.pre_request = AsyncMock()
    headers = {"x-ratelimit-remaining": "10", "Retry-After": "7"}
    client, _ = make_client(config, [FakeResponse(status=429, headers=headers)], rate_limiter=rate_limiter)

    with pytest.raises(UpstreamHttpError):
        await client.get_hot_listing(["funny"])

    rate_limiter.pre_request.assert_awaited_once()
    rate_limiter.update_from_headers.assert_called_once_with(headers)
    rate_limiter.note_throttled.assert_called_once_with("7")


@pytest.mark.asyncio
async def test_close_leaves_injected_session_open(config):
    client, session = make_client(config, [])

    async with client:
        pass

    assert session.closed is False


@pytest.mark.asyncio
async def test_close_owned_session(config):
    client = RedditClient(config)
    session = await client.initialize()

    await client.close()

    assert session.closed
