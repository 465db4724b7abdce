"""Merge per-provider DevStats into a single consistent record."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from functools import reduce

from .models import Activity, DevStats, Identity, IssueStats, LanguageStat, PRStats, Totals
from .streaks import compute_streaks

DEFAULT_LANGUAGE_COLOR = "#586069"


def language_sort_key(lang: LanguageStat) -> tuple[float, str]:
    return (-lang.percentage, lang.name)


def merge_languages(a: list[LanguageStat], b: list[LanguageStat]) -> list[LanguageStat]:
    """Sum percentages by language name and renormalize them to 100.

    Colors from ``a`` win over ``b``; languages with no color on either side
    get ``DEFAULT_LANGUAGE_COLOR``. The result is ordered by percentage
    descending, then by name.
    """
    merged: dict[str, LanguageStat] = {}
    for lang in [*a, *b]:
        existing = merged.get(lang.name)
        if existing is None:
            merged[lang.name] = LanguageStat(lang.name, lang.percentage, lang.color)
        else:
            existing.percentage += lang.percentage
            existing.color = existing.color or lang.color

    total = sum(lang.percentage for lang in merged.values())
    for lang in merged.values():
        if total > 0:
            lang.percentage = lang.percentage / total * 100.0
        lang.color = lang.color or DEFAULT_LANGUAGE_COLOR

    return sorted(merged.values(), key=language_sort_key)


def merge_contributions(
    a: dict[date, int] | None,
    b: dict[date, int] | None,
) -> dict[date, int] | None:
    """Union two day-keyed mappings, adding counts on shared days.

    Returns None when neither side has any data.
    """
    if not a and not b:
        return None
    merged = dict(a or {})
    for day, count in (b or {}).items():
        merged[day] = merged.get(day, 0) + count
    return merged


def merge_stats(primary: DevStats, secondary: DevStats) -> DevStats:
    """Combine two records; identity fields and join date come from ``primary``.

    Neither input is modified.
    """
    p, s = primary.totals, secondary.totals

    contributions = merge_contributions(
        primary.activity.contributions_per_day,
        secondary.activity.contributions_per_day,
    )
    languages = merge_languages(primary.activity.top_languages, secondary.activity.top_languages)
    current, longest = compute_streaks(contributions)

    identity = Identity(
        name=primary.identity.name,
        username=primary.identity.username,
        avatar=primary.identity.avatar,
        handles=[*primary.identity.handles, *secondary.identity.handles],
    )
    totals = Totals(
        public_repos=p.public_repos + s.public_repos,
        private_repos=p.private_repos + s.private_repos,
        stars=p.stars + s.stars,
        followers=p.followers + s.followers,
        following=p.following + s.following,
        contributed_repos=p.contributed_repos + s.contributed_repos,
        commits=p.commits + s.commits,
        total_languages=len(languages),
        current_streak=current,
        longest_streak=longest,
        joined_ago=p.joined_ago,
    )
    pi, si = primary.activity.issues, secondary.activity.issues
    pp, sp = primary.activity.pull_requests, secondary.activity.pull_requests
    activity = Activity(
        contributions_per_day=contributions,
        top_languages=languages,
        issues=IssueStats(open=pi.open + si.open, closed=pi.closed + si.closed),
        pull_requests=PRStats(
            open=pp.open + sp.open,
            merged=pp.merged + sp.merged,
            closed=pp.closed + sp.closed,
        ),
    )
    return DevStats(identity=identity, totals=totals, activity=activity)


def merge_all(records: Iterable[DevStats]) -> DevStats:
    """Fold records left to right: ``merge_stats(merge_stats(a, b), c)``."""
    return reduce(merge_stats, records)
