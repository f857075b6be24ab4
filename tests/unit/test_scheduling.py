"""Tests for platform rules and posting-time arithmetic."""

from __future__ import annotations

import pytest

from content_factory.agents.models import DraftItem
from content_factory.content.platforms import resolve_content_type, validate_content
from content_factory.content.scheduling import (
    get_optimal_time_for_platform,
    minutes_to_time_string,
    parse_time_to_minutes,
    slot_key,
)


class TestParseTime:
    @pytest.mark.parametrize(
        "text, minutes",
        [
            ("7:00 PM", 1140),
            ("7pm", 1140),
            ("19:30", 1170),
            ("12:00 AM", 0),
            ("12:00 PM", 720),
            ("9:15 am", 555),
            ("", 0),
            ("whenever", 0),
        ],
    )
    def test_parse(self, text, minutes):
        assert parse_time_to_minutes(text) == minutes

    @pytest.mark.parametrize(
        "minutes, text",
        [(0, "12:00 AM"), (720, "12:00 PM"), (1140, "7:00 PM"), (1500, "1:00 AM")],
    )
    def test_format(self, minutes, text):
        assert minutes_to_time_string(minutes) == text

    def test_slot_key_normalises_time(self):
        assert slot_key("Monday", "7pm") == slot_key("Monday", "7:00 PM")


class TestOptimalTime:
    def test_best_day_uses_top_time(self):
        assert get_optimal_time_for_platform("tiktok", "Tuesday") == "7:00 AM"

    def test_other_day_uses_middle_time(self):
        assert get_optimal_time_for_platform("tiktok", "Monday") == "7:00 PM"
        assert get_optimal_time_for_platform("shorts", "Monday") == "2:00 PM"

    def test_unknown_platform_defaults_to_noon(self):
        assert get_optimal_time_for_platform("myspace", "Monday") == "12:00 PM"


class TestPlatformRules:
    def test_text_kept_where_supported(self):
        assert resolve_content_type("linkedin", "text") == "text"

    def test_text_falls_back_to_video(self):
        assert resolve_content_type("tiktok", "text") == "video"
        assert resolve_content_type("unknown", None) == "video"

    def test_valid_item(self):
        item = DraftItem(platform="tiktok", hook="h", caption="short", hashtags=["a"])
        assert validate_content(item) == (True, [])

    def test_limits_exceeded(self):
        item = DraftItem(platform="shorts", hook="h", caption="x" * 101, hashtags=["a"] * 4)
        valid, warnings = validate_content(item)
        assert valid is False
        assert len(warnings) == 2
        assert "100 characters" in warnings[0]
        assert "Max: 3" in warnings[1]

    def test_unknown_platform(self):
        item = DraftItem(platform="myspace", hook="h")
        assert validate_content(item) == (True, ["Unknown platform"])
