"""Bitbucket Cloud provider."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any
from urllib.parse import quote

import httpx

from ..config import BitbucketConfig
from ..errors import FetchError
from ..models import Activity, DevStats, Identity, Totals
from .base import Provider
from .languages import LANGUAGE_COLORS, rank_languages

logger = logging.getLogger(__name__)


class BitbucketProvider(Provider):
    """Reads the authenticated account and the repositories of a workspace.

    Bitbucket has no public profile lookup by name, so the ``handle`` passed to
    ``fetch`` is only used as the label in the card's handle list.
    """

    name = "bitbucket"

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: BitbucketConfig,
        user_agent: str = "devmetrics",
    ) -> None:
        super().__init__(client, user_agent)
        self._config = config
        self._base_url = config.base_url.rstrip("/")

    def _auth(self) -> httpx.BasicAuth | None:
        if not (self._config.email and self._config.token):
            return None
        return httpx.BasicAuth(self._config.email, self._config.token)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(
                method, url, headers=self._headers(), auth=self._auth(), **kwargs
            )
        except httpx.HTTPError as exc:
            raise FetchError(self.name, f"request to {url} failed: {exc}") from exc
        logger.debug("bitbucket %s %s -> %d", method, url, resp.status_code)
        return resp

    async def _collect(self, handle: str) -> DevStats:
        user = await self._fetch_user()
        repos = await self._fetch_repos(self._config.workspace or handle)

        private = sum(1 for r in repos if r.get("is_private"))
        counts = Counter(r["language"] for r in repos if r.get("language"))
        logger.info(
            "bitbucket: fetched %r repos=%d private=%d",
            user.get("nickname"),
            len(repos),
            private,
        )

        return DevStats(
            identity=Identity(
                name=user.get("display_name", ""),
                username=user.get("nickname", ""),
                handles=[f"bitbucket: {handle}"],
            ),
            totals=Totals(
                public_repos=len(repos) - private,
                private_repos=private,
                total_languages=len(counts),
            ),
            activity=Activity(top_languages=rank_languages(counts, colors=_bitbucket_colors(counts))),
        )

    async def _fetch_user(self) -> dict[str, Any]:
        resp = await self._request("GET", f"{self._base_url}/user")
        if resp.status_code == 401:
            raise FetchError(self.name, "unauthorized (401), check the Bitbucket email and API token")
        self._check(resp)
        return self._decode(resp)

    async def _fetch_repos(self, workspace: str) -> list[dict[str, Any]]:
        repos: list[dict[str, Any]] = []
        url: str | None = f"{self._base_url}/repositories/{quote(workspace, safe='')}"
        params: dict[str, Any] | None = {"pagelen": 100}
        while url:
            resp = await self._request("GET", url, params=params)
            self._check(resp)
            page = self._decode(resp)
            repos.extend(page.get("values", []))
            url = page.get("next")
            params = None
        return repos


def _bitbucket_colors(counts: Counter[str]) -> dict[str, str]:
    # Bitbucket reports language names in lower case.
    by_lower = {name.lower(): color for name, color in LANGUAGE_COLORS.items()}
    return {name: by_lower[name.lower()] for name in counts if name.lower() in by_lower}
