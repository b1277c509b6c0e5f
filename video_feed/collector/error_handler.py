"""Fetch failure taxonomy and the retry policy that maps failures to rotation strides."""

from typing import Any, List, Optional, Tuple


class FetchError(Exception):
    """Base class for every failure of a single listing fetch attempt."""


class NetworkTimeout(FetchError):
    """The request did not complete before the deadline and was cancelled."""


class UpstreamHttpError(FetchError):
    """Non-2xx response, or a transport failure before any response (status None)."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)

    @property
    def source_not_found(self) -> bool:
        """A 404 means at least one subreddit in the combination does not exist."""
        return self.status == 404


class MalformedPayload(FetchError):
    """2xx response whose body is not a listing with a ``data.children`` array."""


class NoQualifyingContent(FetchError):
    """Valid listing, but no item survived mapping and the audio filter."""


def advance_stride(error: FetchError, window_size: int) -> int:
    """
    Pick how far to move the rotation cursor after a failed attempt.

    An empty result skips the whole window; any other failure may come from a
    single subreddit, so the window only slides by one.

    Args:
        error: The failure of the last attempt
        window_size: Number of subreddits queried per request

    Returns:
        Number of positions to advance the rotation cursor
    """
    if isinstance(error, NoQualifyingContent):
        return window_size
    return 1


def outcome_label(error: FetchError) -> str:
    """Short label for an attempt outcome, used for logging and metrics."""
    if isinstance(error, NetworkTimeout):
        return "timeout"
    if isinstance(error, UpstreamHttpError):
        return "not_found" if error.source_not_found else "http_error"
    if isinstance(error, MalformedPayload):
        return "malformed"
    if isinstance(error, NoQualifyingContent):
        return "no_content"
    return "error"


def extract_listing(payload: Any) -> Tuple[List[Any], Optional[str]]:
    """
    Validate a listing body and pull out its children and continuation token.

    Args:
        payload: Decoded JSON body of a ``hot.json`` response

    Returns:
        Tuple of (children, after token or None)

    Raises:
        MalformedPayload: If ``data.children`` is missing or not a list
    """
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise MalformedPayload("Response has no listing 'data' object")

    children = data.get("children")
    if not isinstance(children, list):
        raise MalformedPayload("Response listing has no 'children' array")

    after = data.get("after")
    if not isinstance(after, str) or not after:
        after = None

    return children, after
