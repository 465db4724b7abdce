"""Fetch from every configured provider, merge, render and write the card."""

from __future__ import annotations

import asyncio
import logging

import httpx
from rich.console import Console

from .aggregator import merge_all
from .config import Config
from .errors import FetchError
from .models import DevStats
from .providers import BitbucketProvider, DemoProvider, GitHubProvider, GitLabProvider, Provider
from .renderer import render_json, render_summary, render_svg, write_output

logger = logging.getLogger(__name__)


def build_providers(
    user: str,
    config: Config,
    client: httpx.AsyncClient,
    demo: bool = False,
) -> list[tuple[Provider, str]]:
    """Return ``(provider, handle)`` pairs in merge order, primary first."""
    if demo:
        return [(DemoProvider(client, config.user_agent), user)]

    providers: list[tuple[Provider, str]] = [
        (GitHubProvider(client, config.github, config.user_agent), user),
    ]
    if not config.github.token:
        logger.warning("no GitHub token set, using the unauthenticated API (rate limited)")

    if config.bitbucket.enabled:
        providers.append(
            (BitbucketProvider(client, config.bitbucket, config.user_agent), config.bitbucket.display_handle)
        )
    else:
        logger.info("Bitbucket settings missing or incomplete; skipping Bitbucket provider")

    if config.gitlab.enabled:
        providers.append((GitLabProvider(client, config.gitlab, config.user_agent), config.gitlab.user))
    else:
        logger.info("GitLab user not set; skipping GitLab provider")

    return providers


async def _fetch(provider: Provider, handle: str, timeout: float) -> DevStats:
    try:
        return await asyncio.wait_for(provider.fetch(handle), timeout)
    except asyncio.TimeoutError as exc:
        raise FetchError(provider.name, f"timed out after {timeout:g}s") from exc


async def collect_stats(
    providers: list[tuple[Provider, str]],
    timeout: float,
) -> tuple[DevStats, list[str]]:
    """Fetch all providers concurrently and fold the results in order.

    The first provider is the primary: its failure is raised. Secondary
    providers that fail are logged and left out of the merge.
    """
    results = await asyncio.gather(
        *(_fetch(provider, handle, timeout) for provider, handle in providers),
        return_exceptions=True,
    )

    records: list[DevStats] = []
    used: list[str] = []
    for i, ((provider, _), result) in enumerate(zip(providers, results)):
        if isinstance(result, BaseException):
            if i == 0 or not isinstance(result, FetchError):
                raise result
            logger.warning("provider %s failed: %s", provider.name, result)
            continue
        records.append(result)
        used.append(provider.name)

    return merge_all(records), used


async def run(
    user: str,
    config: Config,
    output_file: str = "devmetrics.svg",
    output_format: str = "svg",
    demo: bool = False,
    show_summary: bool = False,
) -> DevStats:
    async with httpx.AsyncClient(timeout=config.timeout, follow_redirects=True) as client:
        providers = build_providers(user, config, client, demo=demo)
        stats, used = await collect_stats(providers, config.timeout)

    if show_summary:
        render_summary(stats)

    if output_format == "json":
        write_output(render_json(stats), output_file)
    else:
        write_output(render_svg(stats), output_file)

    Console().print(
        f"devmetrics: generated {output_file} for user {user!r} via providers: {', '.join(used)}",
        markup=False,
    )
    return stats
