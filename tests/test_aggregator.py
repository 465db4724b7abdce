"""Tests for the aggregator module."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from devmetrics.aggregator import (
    DEFAULT_LANGUAGE_COLOR,
    merge_all,
    merge_contributions,
    merge_languages,
    merge_stats,
)
from devmetrics.models import (
    Activity,
    DevStats,
    Identity,
    IssueStats,
    LanguageStat,
    PRStats,
    Totals,
)
from devmetrics.streaks import utc_today


def _make_stats(**kwargs) -> DevStats:
    identity = Identity(
        name=kwargs.pop("name", "Alice"),
        username=kwargs.pop("username", "alice"),
        avatar=kwargs.pop("avatar", ""),
        handles=kwargs.pop("handles", ["github: alice"]),
    )
    activity = Activity(
        contributions_per_day=kwargs.pop("contributions", None),
        top_languages=kwargs.pop("languages", []),
        issues=kwargs.pop("issues", IssueStats()),
        pull_requests=kwargs.pop("prs", PRStats()),
    )
    return DevStats(identity=identity, totals=Totals(**kwargs), activity=activity)


def test_merge_scenario_go_rust():
    a = _make_stats(stars=10, languages=[LanguageStat("Go", 100.0)])
    b = _make_stats(stars=5, languages=[LanguageStat("Go", 50.0), LanguageStat("Rust", 50.0)])

    merged = merge_stats(a, b)

    assert merged.totals.stars == 15
    assert [lang.name for lang in merged.activity.top_languages] == ["Go", "Rust"]
    assert merged.activity.top_languages[0].percentage == pytest.approx(75.0)
    assert merged.activity.top_languages[1].percentage == pytest.approx(25.0)
    assert merged.totals.total_languages == 2


def test_merge_sums_counters():
    a = _make_stats(
        public_repos=3, private_repos=1, stars=2, followers=4, following=5,
        contributed_repos=6, commits=7,
        issues=IssueStats(open=1, closed=2), prs=PRStats(open=1, merged=2, closed=3),
    )
    b = _make_stats(
        public_repos=10, private_repos=10, stars=10, followers=10, following=10,
        contributed_repos=10, commits=10,
        issues=IssueStats(open=10, closed=20), prs=PRStats(open=10, merged=20, closed=30),
    )

    t = merge_stats(a, b).totals
    assert (t.public_repos, t.private_repos, t.stars) == (13, 11, 12)
    assert (t.followers, t.following, t.contributed_repos, t.commits) == (14, 15, 16, 17)

    activity = merge_stats(a, b).activity
    assert activity.issues == IssueStats(open=11, closed=22)
    assert activity.pull_requests == PRStats(open=11, merged=22, closed=33)


def test_merge_keeps_primary_identity_and_appends_handles():
    a = _make_stats(name="Alice", username="alice", avatar="data:x", joined_ago="2 years ago")
    b = _make_stats(
        name="Someone Else", username="else", avatar="data:y",
        handles=["gitlab: else"], joined_ago="1 month ago",
    )

    merged = merge_stats(a, b)

    assert merged.identity.name == "Alice"
    assert merged.identity.username == "alice"
    assert merged.identity.avatar == "data:x"
    assert merged.identity.handles == ["github: alice", "gitlab: else"]
    assert merged.totals.joined_ago == "2 years ago"


def test_merge_with_empty_secondary_leaves_primary_unchanged():
    a = _make_stats(stars=3, public_repos=2, languages=[LanguageStat("Python", 100.0, "#3572A5")])
    empty = DevStats()

    merged = merge_stats(a, empty)

    assert merged.identity.name == a.identity.name
    assert merged.identity.handles == ["github: alice"]
    assert merged.totals.stars == 3
    assert merged.totals.public_repos == 2
    assert merged.activity.top_languages == [LanguageStat("Python", 100.0, "#3572A5")]


def test_merge_does_not_mutate_inputs():
    a = _make_stats(languages=[LanguageStat("Go", 100.0)], contributions={date(2024, 1, 1): 1})
    b = _make_stats(languages=[LanguageStat("Go", 50.0)], contributions={date(2024, 1, 1): 2})

    merge_stats(a, b)

    assert a.activity.top_languages == [LanguageStat("Go", 100.0)]
    assert a.activity.contributions_per_day == {date(2024, 1, 1): 1}
    assert a.identity.handles == ["github: alice"]


def test_merge_is_associative_for_counters():
    a, b, c = _make_stats(stars=1), _make_stats(stars=2), _make_stats(stars=4)
    assert merge_stats(merge_stats(a, b), c).totals.stars == 7
    assert merge_all([a, b, c]).totals.stars == 7
    assert merge_all([a, b, c]).identity.handles == ["github: alice"] * 3


def test_merge_languages_sums_to_100():
    a = [LanguageStat("Python", 60.0), LanguageStat("C", 40.0)]
    b = [LanguageStat("Go", 33.3), LanguageStat("Python", 33.3), LanguageStat("Rust", 33.4)]

    merged = merge_languages(a, b)

    assert sum(lang.percentage for lang in merged) == pytest.approx(100.0, abs=1e-9)
    assert len(merged) == 4


def test_merge_languages_both_empty():
    assert merge_languages([], []) == []
    assert merge_stats(DevStats(), DevStats()).totals.total_languages == 0


def test_merge_languages_zero_total_is_not_divided():
    merged = merge_languages([LanguageStat("Go", 0.0)], [])
    assert merged == [LanguageStat("Go", 0.0, DEFAULT_LANGUAGE_COLOR)]


def test_merge_languages_colors():
    a = [LanguageStat("Go", 50.0, "#00ADD8"), LanguageStat("C", 50.0, "")]
    b = [LanguageStat("Go", 50.0, "#000000"), LanguageStat("Rust", 50.0, "#dea584"), LanguageStat("C", 0.0)]

    colors = {lang.name: lang.color for lang in merge_languages(a, b)}

    assert colors["Go"] == "#00ADD8"
    assert colors["Rust"] == "#dea584"
    assert colors["C"] == DEFAULT_LANGUAGE_COLOR


def test_merge_languages_ties_ordered_by_name():
    merged = merge_languages(
        [LanguageStat("Zig", 50.0), LanguageStat("Ada", 50.0)],
        [LanguageStat("Go", 50.0), LanguageStat("Ada", 0.0), LanguageStat("Zig", 0.0)],
    )
    assert [lang.name for lang in merged] == ["Ada", "Go", "Zig"]


def test_merge_contributions_absent_on_both_sides():
    assert merge_contributions(None, None) is None
    assert merge_contributions({}, None) is None
    assert merge_stats(DevStats(), DevStats()).activity.contributions_per_day is None


def test_merge_contributions_union_adds_overlaps():
    a = {date(2024, 1, 1): 1, date(2024, 1, 2): 2}
    b = {date(2024, 1, 2): 3, date(2024, 1, 3): 4}

    assert merge_contributions(a, b) == {
        date(2024, 1, 1): 1,
        date(2024, 1, 2): 5,
        date(2024, 1, 3): 4,
    }
    assert merge_contributions(None, b) == b


def test_merge_recomputes_streaks_from_merged_days():
    today = utc_today()
    a = _make_stats(
        contributions={today: 1, today - timedelta(days=2): 1},
        current_streak=1, longest_streak=1,
    )
    b = _make_stats(
        contributions={today - timedelta(days=1): 5},
        current_streak=0, longest_streak=1,
    )

    merged = merge_stats(a, b)

    assert merged.totals.current_streak == 3
    assert merged.totals.longest_streak == 3


def test_merge_streaks_zero_without_contributions():
    a = _make_stats(current_streak=4, longest_streak=9)
    merged = merge_stats(a, _make_stats())
    assert merged.totals.current_streak == 0
    assert merged.totals.longest_streak == 0
