"""Formatting utilities for display values."""

from datetime import datetime, timezone


def pluralize(count: int, singular: str, plural: str = None) -> str:
    """``1 change`` / ``3 changes``."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


def format_synced_message(count: int) -> str:
    return f"{pluralize(count, 'change')} synced"


def format_failed_message(count: int) -> str:
    return f"{pluralize(count, 'change')} failed to sync"


def format_percentage(value: float) -> str:
    """Format a 0-100 value for a CSS length, e.g. ``16.39%``."""
    return f"{value:.2f}%"


def format_time_since(moment: datetime | None,
                      now: datetime | None = None) -> str:
    """Human-readable age of a timestamp: 'Just now', '5 minutes ago'..."""
    if moment is None:
        return "Never"
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    minutes = int((now - moment).total_seconds() / 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{pluralize(minutes, 'minute')} ago"
    if minutes < 1440:
        return f"{pluralize(minutes // 60, 'hour')} ago"
    return f"{pluralize(minutes // 1440, 'day')} ago"
