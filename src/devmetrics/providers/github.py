"""GitHub REST/GraphQL provider."""

from __future__ import annotations

import base64
import logging
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from ..config import GitHubConfig
from ..errors import FetchError
from ..models import Activity, DevStats, Identity, IssueStats, PRStats, Totals
from ..streaks import compute_streaks
from .base import Provider
from .languages import LANGUAGE_COLORS, rank_languages
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

CONTRIBUTIONS_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      totalCommitContributions
      contributionCalendar {
        weeks { contributionDays { date contributionCount } }
      }
    }
  }
}
"""


def format_joined_ago(created: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    days = (now - created).total_seconds() / 86400
    if days < 365:
        months = int(days / 30)
        if months < 1:
            return "this month"
        if months == 1:
            return "1 month ago"
        return f"{months} months ago"
    years = int(days / 365)
    if years == 1:
        return "1 year ago"
    return f"{years} years ago"


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubProvider(Provider):
    name = "github"

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: GitHubConfig,
        user_agent: str = "devmetrics",
        rate_limit: RateLimitMonitor | None = None,
    ) -> None:
        super().__init__(client, user_agent)
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._rate_limit = rate_limit or RateLimitMonitor()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self._user_agent,
        }
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        await self._rate_limit.wait_if_needed()
        resp = await super()._request(method, url, **kwargs)
        self._rate_limit.update(resp)
        return resp

    async def _collect(self, handle: str) -> DevStats:
        user = await self._fetch_user(handle)
        repos = await self._fetch_repos(handle)

        contributed = await self._search_or_zero(
            f"author:{handle} type:pr is:merged -user:{handle}", "contributed repos"
        )
        issues = IssueStats(
            open=await self._search_or_zero(f"involves:{handle} type:issue is:open", "open issues"),
            closed=await self._search_or_zero(f"involves:{handle} type:issue is:closed", "closed issues"),
        )
        prs = PRStats(
            open=await self._search_or_zero(f"involves:{handle} type:pr is:open", "open PRs"),
            merged=await self._search_or_zero(f"involves:{handle} type:pr is:merged", "merged PRs"),
            closed=await self._search_or_zero(
                f"involves:{handle} type:pr is:closed -is:merged", "closed PRs"
            ),
        )
        logger.debug("github: issues=%s prs=%s for %s", issues, prs, handle)

        contributions, commits = await self._fetch_contributions(handle)
        current, longest = compute_streaks(contributions)

        counts = Counter(r["language"] for r in repos if r.get("language"))
        languages = rank_languages(counts, colors=LANGUAGE_COLORS)

        login = user.get("login") or handle
        created_at = user.get("created_at")
        totals = Totals(
            public_repos=user.get("public_repos", 0),
            private_repos=sum(1 for r in repos if r.get("private")),
            stars=sum(r.get("stargazers_count", 0) for r in repos),
            followers=user.get("followers", 0),
            following=user.get("following", 0),
            contributed_repos=contributed,
            commits=commits,
            total_languages=len(counts),
            current_streak=current,
            longest_streak=longest,
            joined_ago=format_joined_ago(_parse_timestamp(created_at)) if created_at else "",
        )
        return DevStats(
            identity=Identity(
                name=user.get("name") or login,
                username=login,
                avatar=await self._fetch_avatar(user.get("avatar_url")),
                handles=[f"github: {login}"],
            ),
            totals=totals,
            activity=Activity(
                contributions_per_day=contributions,
                top_languages=languages,
                issues=issues,
                pull_requests=prs,
            ),
        )

    async def _fetch_user(self, handle: str) -> dict[str, Any]:
        resp = await self._request("GET", f"{self._base_url}/users/{quote(handle, safe='')}")
        if resp.status_code == 404:
            raise FetchError(self.name, f"user {handle!r} not found")
        self._check(resp)
        return self._decode(resp)

    async def _fetch_repos(self, handle: str) -> list[dict[str, Any]]:
        repos: list[dict[str, Any]] = []
        url: str | None = f"{self._base_url}/users/{quote(handle, safe='')}/repos"
        params: dict[str, Any] | None = {"per_page": 100, "sort": "updated"}
        while url:
            resp = await self._request("GET", url, params=params)
            self._check(resp)
            repos.extend(self._decode(resp))
            # The next link already carries the query string.
            url = resp.links.get("next", {}).get("url")
            params = None
        return repos

    async def search_count(self, query: str) -> int:
        data = await self._get_json(
            f"{self._base_url}/search/issues",
            params={"q": query, "per_page": 1},
        )
        return int(data.get("total_count", 0))

    async def _search_or_zero(self, query: str, label: str) -> int:
        try:
            return await self.search_count(query)
        except FetchError as exc:
            logger.warning("github: could not count %s: %s", label, exc)
            return 0

    async def _fetch_contributions(self, handle: str) -> tuple[dict[date, int] | None, int]:
        """Read the contribution calendar; GraphQL requires a token."""
        if not self._config.token:
            logger.info("github: no token, skipping contribution calendar")
            return None, 0
        try:
            resp = await self._request(
                "POST",
                f"{self._base_url}/graphql",
                json={"query": CONTRIBUTIONS_QUERY, "variables": {"login": handle}},
            )
            self._check(resp)
            data = self._decode(resp)
        except FetchError as exc:
            logger.warning("github: contribution calendar unavailable: %s", exc)
            return None, 0

        if not isinstance(data, dict) or data.get("errors") or not (data.get("data") or {}).get("user"):
            logger.warning("github: contribution calendar query failed: %s", data)
            return None, 0

        try:
            collection = data["data"]["user"]["contributionsCollection"]
            days: dict[date, int] = {}
            for week in collection["contributionCalendar"]["weeks"]:
                for day in week["contributionDays"]:
                    days[date.fromisoformat(day["date"])] = int(day["contributionCount"])
            commits = int(collection.get("totalCommitContributions", 0))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("github: contribution calendar could not be parsed: %r", exc)
            return None, 0
        return days, commits

    async def _fetch_avatar(self, avatar_url: str | None) -> str:
        if not avatar_url:
            return ""
        try:
            resp = await self._client.get(avatar_url)
        except httpx.HTTPError as exc:
            logger.warning("github: avatar download failed: %s", exc)
            return ""
        if not resp.is_success:
            logger.warning("github: avatar download returned %d", resp.status_code)
            return ""
        content_type = resp.headers.get("Content-Type", "image/png")
        encoded = base64.b64encode(resp.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"
