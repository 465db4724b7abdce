"""Command-line entry point for devmetrics."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import DEFAULT_TIMEOUT, BitbucketConfig, Config, GitHubConfig, GitLabConfig
from .errors import DevMetricsError
from .orchestrator import run

logger = logging.getLogger("devmetrics")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    logger.handlers[:] = [handler]
    logger.setLevel(level)


@click.command()
@click.argument("user")
@click.option("--out", "-o", "output_file", default="devmetrics.svg", show_default=True, help="Output file path.")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["svg", "json"]), default="svg", show_default=True,
    help="Write the SVG card or the merged stats as JSON.",
)
@click.option("--token", envvar="DEV_METRICS_TOKEN", default=None, help="GitHub token.")
@click.option("--gitlab-user", envvar="DEV_METRICS_GITLAB_USER", default=None, help="GitLab username.")
@click.option("--gitlab-token", envvar="DEV_METRICS_GITLAB_TOKEN", default=None, help="GitLab access token.")
@click.option("--bitbucket-email", envvar="DEV_METRICS_BITBUCKET_EMAIL", default=None, help="Bitbucket account email.")
@click.option("--bitbucket-token", envvar="DEV_METRICS_BITBUCKET_TOKEN", default=None, help="Bitbucket API token.")
@click.option("--bitbucket-workspace", envvar="DEV_METRICS_BITBUCKET_WORKSPACE", default=None, help="Bitbucket workspace.")
@click.option("--bitbucket-user", envvar="DEV_METRICS_BITBUCKET_USER", default=None, help="Bitbucket handle shown on the card.")
@click.option(
    "--timeout", type=click.FloatRange(min=0, min_open=True), default=DEFAULT_TIMEOUT,
    show_default=True, help="Deadline in seconds for fetching from providers.",
)
@click.option("--demo", is_flag=True, default=False, help="Use built-in sample data instead of the network.")
@click.option("--summary", is_flag=True, default=False, help="Print a summary of the merged stats.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only log warnings and errors.")
@click.version_option(version=__version__)
def main(
    user: str,
    output_file: str,
    output_format: str,
    token: str | None,
    gitlab_user: str | None,
    gitlab_token: str | None,
    bitbucket_email: str | None,
    bitbucket_token: str | None,
    bitbucket_workspace: str | None,
    bitbucket_user: str | None,
    timeout: float,
    demo: bool,
    summary: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Generate a developer card for USER from GitHub, GitLab and Bitbucket."""
    _setup_logging(verbose, quiet)

    config = Config(
        github=GitHubConfig(token=token or None),
        gitlab=GitLabConfig(user=gitlab_user or None, token=gitlab_token or None),
        bitbucket=BitbucketConfig(
            email=bitbucket_email or None,
            token=bitbucket_token or None,
            workspace=bitbucket_workspace or None,
            user=bitbucket_user or None,
        ),
        timeout=timeout,
    )

    try:
        asyncio.run(run(
            user=user,
            config=config,
            output_file=output_file,
            output_format=output_format,
            demo=demo,
            show_summary=summary,
        ))
    except DevMetricsError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
