"""GitLab provider."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx

from ..config import GitLabConfig
from ..errors import FetchError
from ..models import Activity, DevStats, Identity, Totals
from ..streaks import compute_streaks
from .base import Provider
from .languages import LANGUAGE_COLORS, rank_languages

logger = logging.getLogger(__name__)


class GitLabProvider(Provider):
    name = "gitlab"

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: GitLabConfig,
        user_agent: str = "devmetrics",
    ) -> None:
        super().__init__(client, user_agent)
        self._config = config
        self._site_url = config.base_url.rstrip("/")
        self._api_url = f"{self._site_url}/api/v4"

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        if self._config.token:
            headers["PRIVATE-TOKEN"] = self._config.token
        return headers

    async def _collect(self, handle: str) -> DevStats:
        user = await self._fetch_user(handle)
        projects = await self._fetch_projects(user["id"])

        public = sum(1 for p in projects if p.get("visibility") == "public")
        private = sum(1 for p in projects if p.get("visibility") in ("private", "internal"))
        weights = await self._language_weights(projects)
        contributions = await self._fetch_calendar(user.get("username") or handle)
        current, longest = compute_streaks(contributions)

        return DevStats(
            identity=Identity(
                name=user.get("name") or user.get("username", handle),
                username=user.get("username", handle),
                handles=[f"gitlab: {handle}"],
            ),
            totals=Totals(
                public_repos=public,
                private_repos=private,
                stars=sum(p.get("star_count", 0) for p in projects),
                total_languages=len(weights),
                current_streak=current,
                longest_streak=longest,
            ),
            activity=Activity(
                contributions_per_day=contributions,
                top_languages=rank_languages(weights, colors=LANGUAGE_COLORS),
            ),
        )

    async def _fetch_user(self, handle: str) -> dict[str, Any]:
        users = await self._get_json(f"{self._api_url}/users", params={"username": handle})
        if not users:
            raise FetchError(self.name, f"user {handle!r} not found")
        return users[0]

    async def _fetch_projects(self, user_id: int) -> list[dict[str, Any]]:
        projects: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = await self._get_json(
                f"{self._api_url}/users/{user_id}/projects",
                params={
                    "per_page": 100,
                    "page": page,
                    "simple": "true",
                    "order_by": "last_activity_at",
                    "sort": "desc",
                },
            )
            if not batch:
                return projects
            projects.extend(batch)
            page += 1

    async def _language_weights(self, projects: list[dict[str, Any]]) -> dict[str, float]:
        weights: dict[str, float] = defaultdict(float)
        for project in projects:
            try:
                langs = await self._fetch_project_languages(project["id"])
            except FetchError as exc:
                logger.warning(
                    "gitlab: languages unavailable for %s: %s",
                    project.get("path_with_namespace", project["id"]),
                    exc,
                )
                continue
            for name, share in langs.items():
                weights[name] += share
        return dict(weights)

    async def _fetch_project_languages(self, project_id: int) -> dict[str, float]:
        resp = await self._request("GET", f"{self._api_url}/projects/{project_id}/languages")
        if resp.status_code == 404:
            return {}
        self._check(resp)
        return self._decode(resp)

    async def _fetch_calendar(self, username: str) -> dict[date, int] | None:
        """Daily contribution counts from the public profile calendar."""
        try:
            data = await self._get_json(f"{self._site_url}/users/{quote(username, safe='')}/calendar.json")
        except FetchError as exc:
            logger.warning("gitlab: contribution calendar unavailable: %s", exc)
            return None
        if not isinstance(data, dict):
            logger.warning("gitlab: contribution calendar has unexpected type %s", type(data).__name__)
            return None
        try:
            return {date.fromisoformat(day): int(count) for day, count in data.items()}
        except (TypeError, ValueError) as exc:
            logger.warning("gitlab: contribution calendar could not be parsed: %s", exc)
            return None
