"""
Tests for duration parsing and the view threshold rule.
"""
import pytest

from vidshare.client.view_tracker import view_threshold_seconds
from vidshare.shared_lib.duration import parse_duration_seconds


class TestParseDuration:

    @pytest.mark.parametrize("raw, expected", [
        ("4:20", 260),
        ("04:20", 260),
        ("1:12:09", 4329),
        ("0:09", 9),
        ("1h 2m", 3720),
        ("45m", 2700),
        ("2h", 7200),
        ("", 0),
        (None, 0),
        ("about a minute", 0),
    ])
    def test_parse(self, raw, expected):
        assert parse_duration_seconds(raw) == expected

    def test_clock_format_takes_precedence(self):
        assert parse_duration_seconds("10:00") == 600


class TestViewThreshold:

    @pytest.mark.parametrize("duration, expected", [
        (0, 3.0),
        (9, 3.0),
        (14, 3.0),
        (15, 3.0),
        (30, 6.0),
        (50, 10.0),
        (3600, 10.0),
    ])
    def test_threshold(self, duration, expected):
        assert view_threshold_seconds(duration) == pytest.approx(expected)
