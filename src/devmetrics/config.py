"""Run configuration passed explicitly to providers."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import __version__

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"devmetrics/{__version__}"


@dataclass(frozen=True)
class GitHubConfig:
    token: str | None = None
    base_url: str = "https://api.github.com"


@dataclass(frozen=True)
class GitLabConfig:
    user: str | None = None
    token: str | None = None
    base_url: str = "https://gitlab.com"

    @property
    def enabled(self) -> bool:
        return bool(self.user)


@dataclass(frozen=True)
class BitbucketConfig:
    email: str | None = None
    token: str | None = None
    workspace: str | None = None
    # Label shown in the card's handle list; defaults to the workspace.
    user: str | None = None
    base_url: str = "https://api.bitbucket.org/2.0"

    @property
    def enabled(self) -> bool:
        return bool(self.email and self.token and self.workspace)

    @property
    def display_handle(self) -> str:
        return self.user or self.workspace or ""


@dataclass(frozen=True)
class Config:
    github: GitHubConfig = field(default_factory=GitHubConfig)
    gitlab: GitLabConfig = field(default_factory=GitLabConfig)
    bitbucket: BitbucketConfig = field(default_factory=BitbucketConfig)
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
