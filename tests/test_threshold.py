"""
Tests for threshold visibility.
"""

import pytest

from charactercount.threshold import is_visible


@pytest.mark.parametrize("count", [0, 1, 5, 10, 50])
def test_zero_threshold_is_always_visible(count):
    assert is_visible(count, 10, 0) is True


def test_eighty_percent_boundary_is_inclusive():
    """8 of 10 is exactly 80% and therefore visible."""
    assert is_visible(7, 10, 80) is False
    assert is_visible(8, 10, 80) is True
    assert is_visible(9, 10, 80) is True


def test_fractional_threshold_boundary():
    """50% of 7 is 3.5, so 3 is hidden and 4 is shown."""
    assert is_visible(3, 7, 50) is False
    assert is_visible(4, 7, 50) is True


def test_full_threshold_shows_only_at_limit():
    assert is_visible(99, 100, 100) is False
    assert is_visible(100, 100, 100) is True
    assert is_visible(150, 100, 100) is True


@pytest.mark.parametrize("count,limit,threshold", [
    (0, 10, 1),
    (33, 100, 34),
    (74, 200, 38),
])
def test_visible_iff_count_reaches_percentage(count, limit, threshold):
    assert is_visible(count, limit, threshold) == (count * 100 >= limit * threshold)
