"""Services for GitHub data collection."""

from extractum.services.github_rest_client import GitHubRestClient

__all__ = [
    "GitHubRestClient",
]
