"""Contribution streak calculation.

All days are calendar dates in UTC. A day counts toward a streak when its
contribution count is strictly positive; a day missing from the mapping
breaks a run exactly like a day with an explicit zero.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone

_ONE_DAY = timedelta(days=1)


def to_calendar_date(value: date | datetime) -> date:
    """Strip the time of day, converting aware datetimes to UTC first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def normalize_contributions(contribs: Mapping[date | datetime, int]) -> dict[date, int]:
    """Key counts by calendar date, summing entries that land on the same day."""
    normalized: dict[date, int] = {}
    for day, count in contribs.items():
        key = to_calendar_date(day)
        normalized[key] = normalized.get(key, 0) + count
    return normalized


def compute_streaks(
    contribs: Mapping[date | datetime, int] | None,
    today: date | None = None,
) -> tuple[int, int]:
    """Return ``(current, longest)`` streak lengths in days.

    The current streak walks backwards from ``today`` (the current UTC date by
    default) and is 0 when today itself has no contributions. The longest
    streak is the longest run of consecutive qualifying days anywhere in the
    mapping.
    """
    if not contribs:
        return 0, 0

    normalized = normalize_contributions(contribs)
    if today is None:
        today = utc_today()

    current = 0
    day = today
    while normalized.get(day, 0) > 0:
        current += 1
        day -= _ONE_DAY

    longest = 0
    for start in sorted(normalized):
        if normalized[start] <= 0 or normalized.get(start - _ONE_DAY, 0) > 0:
            continue
        length = 0
        day = start
        while normalized.get(day, 0) > 0:
            length += 1
            day += _ONE_DAY
        longest = max(longest, length)

    return current, longest
