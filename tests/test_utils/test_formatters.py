"""Tests for formatting utilities."""

from datetime import datetime, timedelta, timezone

from rindang.utils.formatters import (
    format_failed_message,
    format_percentage,
    format_synced_message,
    format_time_since,
    pluralize,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestSyncMessages:
    """Toast texts shown after a sync pass."""

    def test_singular(self):
        assert format_synced_message(1) == "1 change synced"

    def test_plural(self):
        assert format_synced_message(3) == "3 changes synced"

    def test_failed(self):
        assert format_failed_message(2) == "2 changes failed to sync"

    def test_pluralize_custom(self):
        assert pluralize(0, "entry", "entries") == "0 entries"


class TestFormatPercentage:
    def test_two_decimals(self):
        assert format_percentage(16.39) == "16.39%"

    def test_zero(self):
        assert format_percentage(0) == "0.00%"


class TestFormatTimeSince:
    def test_never(self):
        assert format_time_since(None) == "Never"

    def test_just_now(self):
        assert format_time_since(NOW - timedelta(seconds=20), NOW) == "Just now"

    def test_minutes(self):
        assert format_time_since(NOW - timedelta(minutes=5), NOW) == (
            "5 minutes ago"
        )

    def test_hours(self):
        assert format_time_since(NOW - timedelta(hours=1, minutes=10), NOW) == (
            "1 hour ago"
        )

    def test_days(self):
        assert format_time_since(NOW - timedelta(days=3), NOW) == "3 days ago"

    def test_naive_treated_as_utc(self):
        naive = datetime(2024, 3, 1, 11, 0)
        assert format_time_since(naive, NOW) == "1 hour ago"
