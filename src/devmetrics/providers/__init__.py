"""Source-control host adapters."""

from .base import Provider
from .bitbucket import BitbucketProvider
from .demo import DemoProvider
from .github import GitHubProvider
from .gitlab import GitLabProvider

__all__ = [
    "BitbucketProvider",
    "DemoProvider",
    "GitHubProvider",
    "GitLabProvider",
    "Provider",
]
