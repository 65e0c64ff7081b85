"""Human-readable timestamps shown next to messages and conversations."""
from __future__ import annotations

from datetime import datetime, timezone


def format_clock_time(ts: datetime) -> str:
    """``9:05 AM`` style time of day."""
    hour = ts.hour % 12 or 12
    suffix = "AM" if ts.hour < 12 else "PM"
    return f"{hour}:{ts.minute:02d} {suffix}"


def format_relative_time(ts: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    delta = now - ts
    minutes = int(delta.total_seconds() // 60)
    hours = int(delta.total_seconds() // 3600)
    days = delta.days

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return format_clock_time(ts)
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return f"{ts.strftime('%b')} {ts.day}"
