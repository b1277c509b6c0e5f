"""Tests for the subreddit rotation state."""

import random
from unittest.mock import patch

import pytest

from video_feed.categories import CATEGORY_MAP, CategoryRegistry
from video_feed.collector.rotation import RotationState


@pytest.fixture
def rotation(rng):
    return RotationState(CategoryRegistry(), max_retries=3, rng=rng)


def test_starts_on_default_category(rotation):
    assert rotation.category == "Viral"
    assert sorted(rotation.order) == sorted(CATEGORY_MAP["Viral"])
    assert rotation.cursor == 0
    assert rotation.pagination_token is None
    assert rotation.retry_count == 0


def test_reset_is_a_full_permutation_regardless_of_prior_state(rotation):
    rotation.cursor = 7
    rotation.pagination_token = "t3_abc"
    rotation.retry_count = 2
    rotation.order = ["leftover"]

    rotation.reset("Hot")

    assert rotation.category == "Hot"
    assert sorted(rotation.order) == sorted(CATEGORY_MAP["Hot"])
    assert len(rotation.order) == len(set(rotation.order))
    assert rotation.cursor == 0
    assert rotation.pagination_token is None
    assert rotation.retry_count == 0


def test_reset_unknown_category_uses_default_sources(rotation):
    rotation.reset("Nope")
    assert rotation.category == "Nope"
    assert sorted(rotation.order) == sorted(CATEGORY_MAP["Viral"])


def test_next_window_never_exceeds_size(rotation):
    for size in (1, 5, 10, 100):
        assert len(rotation.next_window(size)) <= size
    assert rotation.next_window(10) == rotation.order[:10]


def test_next_window_does_not_wrap(rotation):
    total = len(rotation.order)
    rotation.cursor = total - 3
    window = rotation.next_window(10)
    assert window == rotation.order[total - 3:]
    assert len(window) == 3


def test_advance_wraps_modulo_length(rotation):
    total = len(rotation.order)
    rotation.advance(10)
    assert rotation.cursor == 10
    rotation.cursor = total - 1
    rotation.advance(3)
    assert rotation.cursor == 2


def test_advance_reshuffles_only_when_wrapping_to_start():
    rng = random.Random(7)
    rotation = RotationState(CategoryRegistry({"A": list("abcde")}, default="A"), rng=rng)

    with patch.object(rng, "shuffle", wraps=rng.shuffle) as spy:
        rotation.advance(4)
        spy.assert_not_called()
        rotation.advance(1)
        assert rotation.cursor == 0
        spy.assert_called_once_with(rotation.order)

    assert sorted(rotation.order) == list("abcde")


def test_bump_retry_is_bounded(rotation):
    assert rotation.bump_retry() is False
    assert rotation.bump_retry() is False
    assert rotation.bump_retry() is False
    assert rotation.retry_count == 3

    assert rotation.bump_retry() is True
    assert rotation.retry_count == 3

    rotation.reset_retries()
    assert rotation.retry_count == 0


def test_cache_key_uses_start_sentinel(rotation):
    assert rotation.cache_key() == ("Viral", "start")
    rotation.pagination_token = "t3_next"
    assert rotation.cache_key() == ("Viral", "t3_next")
    rotation.clear_pagination()
    assert rotation.cache_key() == ("Viral", "start")
