"""Offline provider returning fixed sample data."""

from __future__ import annotations

from datetime import timedelta

from ..models import Activity, DevStats, Identity, LanguageStat, Totals
from ..streaks import compute_streaks, utc_today
from .base import Provider


class DemoProvider(Provider):
    """Needs no network access; the shared client is accepted but never used."""

    name = "demo"

    async def _collect(self, handle: str) -> DevStats:
        today = utc_today()
        contributions = {today - timedelta(days=i): 3 + i for i in range(7)}
        current, longest = compute_streaks(contributions, today=today)
        return DevStats(
            identity=Identity(
                name="Demo Developer",
                username=handle,
                handles=[f"demo: {handle}"],
            ),
            totals=Totals(
                public_repos=12,
                private_repos=3,
                stars=32,
                followers=10,
                following=5,
                commits=sum(contributions.values()),
                total_languages=3,
                current_streak=current,
                longest_streak=longest,
                joined_ago="3 years ago",
            ),
            activity=Activity(
                contributions_per_day=contributions,
                top_languages=[
                    LanguageStat("Go", 70.0, "#00ADD8"),
                    LanguageStat("TypeScript", 20.0, "#3178c6"),
                    LanguageStat("Lua", 10.0, "#000080"),
                ],
            ),
        )
