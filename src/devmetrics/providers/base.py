"""Common provider interface and HTTP helpers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..errors import FetchError
from ..models import DevStats

logger = logging.getLogger(__name__)


class Provider(ABC):
    """A source-control host that can describe one account as DevStats.

    Providers share the run's ``httpx.AsyncClient`` and know nothing about
    each other; merging is the caller's job.
    """

    name: str = ""

    def __init__(self, client: httpx.AsyncClient, user_agent: str = "devmetrics") -> None:
        self._client = client
        self._user_agent = user_agent

    async def fetch(self, handle: str) -> DevStats:
        """Return stats for ``handle`` or raise FetchError.

        A payload that does not have the shape the provider expects is
        reported as a FetchError like any other failed request.
        """
        try:
            return await self._collect(handle)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise FetchError(self.name, f"unexpected response shape: {exc!r}") from exc

    @abstractmethod
    async def _collect(self, handle: str) -> DevStats:
        """Build DevStats for ``handle`` from the host's API."""

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent, "Accept": "application/json"}

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged = self._headers()
        if headers:
            merged.update(headers)
        try:
            resp = await self._client.request(method, url, params=params, json=json, headers=merged)
        except httpx.HTTPError as exc:
            raise FetchError(self.name, f"request to {url} failed: {exc}") from exc
        logger.debug("%s %s %s -> %d", self.name, method, url, resp.status_code)
        return resp

    def _check(self, resp: httpx.Response) -> None:
        if not resp.is_success:
            raise FetchError(
                self.name,
                f"unexpected status {resp.status_code} from {resp.request.url}",
            )

    def _decode(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(self.name, f"invalid JSON from {resp.request.url}") from exc

    async def _get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        resp = await self._request("GET", url, params=params)
        self._check(resp)
        return self._decode(resp)
