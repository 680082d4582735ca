"""Relative time strings for due dates ("in 3 days", "2 hours ago").

Thresholds follow the moment.js fromNow() rules (English only).
"""

from datetime import datetime, timezone
from typing import Optional


def _span(seconds: float) -> str:
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24

    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    if minutes < 45:
        return f"{round(minutes)} minutes"
    if minutes < 90:
        return "an hour"
    if hours < 22:
        return f"{round(hours)} hours"
    if hours < 36:
        return "a day"
    if days < 26:
        return f"{round(days)} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{max(round(days / 30.4), 2)} months"
    if days < 548:
        return "a year"
    return f"{max(round(days / 365), 2)} years"


def from_now(moment: datetime, now: Optional[datetime] = None) -> str:
    """Describe moment relative to now."""
    if now is None:
        now = datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    delta = (moment - now).total_seconds()
    span = _span(abs(delta))
    if delta >= 0:
        return f"in {span}"
    return f"{span} ago"
