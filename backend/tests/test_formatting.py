"""Tests for human-readable size and duration labels."""

import pytest

from tierfinder.utils.formatting import format_bytes, format_duration


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (512, "512 B"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (2 * 1024 ** 3, "2 GB"),
])
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


@pytest.mark.parametrize("seconds,expected", [
    (0, "Instant"),
    (30, "Less than a minute"),
    (60, "About 1 minute"),
    (61, "About 2 minutes"),
    (3600, "About 1 hour"),
    (4 * 3600 + 1, "About 5 hours"),
    (90000, "About 2 days"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected
