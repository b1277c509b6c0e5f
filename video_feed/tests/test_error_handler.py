"""Tests for the fetch failure taxonomy and listing validation."""

import pytest

from video_feed.collector.error_handler import (
    MalformedPayload,
    NetworkTimeout,
    NoQualifyingContent,
    UpstreamHttpError,
    advance_stride,
    extract_listing,
    outcome_label,
)
from video_feed.tests.conftest import make_child, make_listing


def test_empty_result_skips_whole_window():
    assert advance_stride(NoQualifyingContent("none"), 10) == 10


@pytest.mark.parametrize("error", [
    NetworkTimeout("slow"),
    UpstreamHttpError("gone", status=404),
    UpstreamHttpError("boom", status=503),
    UpstreamHttpError("refused"),
    MalformedPayload("junk"),
])
def test_request_failures_slide_by_one(error):
    assert advance_stride(error, 10) == 1


def test_outcome_labels():
    assert outcome_label(NetworkTimeout("x")) == "timeout"
    assert outcome_label(UpstreamHttpError("x", status=404)) == "not_found"
    assert outcome_label(UpstreamHttpError("x", status=500)) == "http_error"
    assert outcome_label(MalformedPayload("x")) == "malformed"
    assert outcome_label(NoQualifyingContent("x")) == "no_content"


def test_source_not_found_only_for_404():
    assert UpstreamHttpError("x", status=404).source_not_found
    assert not UpstreamHttpError("x", status=403).source_not_found
    assert not UpstreamHttpError("x").source_not_found


def test_extract_listing_valid():
    children = [make_child("a")]
    extracted, after = extract_listing(make_listing(children, after="t3_a"))
    assert extracted == children
    assert after == "t3_a"


def test_extract_listing_without_after():
    _, after = extract_listing(make_listing([], after=None))
    assert after is None
    _, after = extract_listing(make_listing([], after=""))
    assert after is None


@pytest.mark.parametrize("payload", [
    None,
    [],
    {},
    {"data": None},
    {"data": {"after": "t3_a"}},
    {"data": {"children": "nope"}},
    {"error": 403, "message": "Forbidden"},
])
def test_extract_listing_rejects_other_shapes(payload):
    with pytest.raises(MalformedPayload):
        extract_listing(payload)
