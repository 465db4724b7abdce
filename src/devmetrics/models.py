"""Data models for devmetrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class Identity:
    name: str = ""
    username: str = ""
    avatar: str = ""
    handles: list[str] = field(default_factory=list)


@dataclass
class Totals:
    public_repos: int = 0
    private_repos: int = 0
    stars: int = 0
    followers: int = 0
    following: int = 0
    contributed_repos: int = 0
    commits: int = 0
    total_languages: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    joined_ago: str = ""


@dataclass
class LanguageStat:
    name: str
    percentage: float
    color: str = ""


@dataclass
class IssueStats:
    open: int = 0
    closed: int = 0


@dataclass
class PRStats:
    open: int = 0
    merged: int = 0
    closed: int = 0


@dataclass
class Activity:
    # None means the provider has no daily data, as opposed to zero activity.
    contributions_per_day: dict[date, int] | None = None
    top_languages: list[LanguageStat] = field(default_factory=list)
    issues: IssueStats = field(default_factory=IssueStats)
    pull_requests: PRStats = field(default_factory=PRStats)


@dataclass
class DevStats:
    identity: Identity = field(default_factory=Identity)
    totals: Totals = field(default_factory=Totals)
    activity: Activity = field(default_factory=Activity)
