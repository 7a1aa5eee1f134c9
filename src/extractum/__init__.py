"""extractum - Extract issues, pull requests and comments from GitHub repositories.

This package provides a rate-limit-aware async client for the GitHub REST API:
- Repository metadata
- Issues (pull requests filtered out) and pull requests
- Issue comments
- Code blocks and error messages parsed from issue and comment bodies

Example usage:
    ```python
    from extractum import GitHubRestClient, parse_repo_url

    owner, repo = parse_repo_url("https://github.com/octocat/hello-world")
    async with GitHubRestClient(token="ghp_xxx") as client:
        issues = await client.fetch_issues(owner, repo)
        print(f"Issues: {len(issues)}")
    ```
"""

__version__ = "1.0.0"

from extractum.config import Config
from extractum.exceptions import (
    ConfigError,
    DecodeError,
    ExtractumError,
    GitHubAPIError,
    GitHubNotFoundError,
    InvalidRepositoryURLError,
    RequestCancelledError,
    TransportError,
)
from extractum.models import (
    CodeBlock,
    Comment,
    Issue,
    IssueDetails,
    Label,
    PullRequest,
    Repository,
    User,
)
from extractum.services.github_rest_client import GitHubRestClient
from extractum.utils.rate_limiter import RateLimiter, RateLimitState
from extractum.utils.repo_url import parse_repo_url

__all__ = [
    # Client
    "GitHubRestClient",
    "RateLimiter",
    "RateLimitState",
    "parse_repo_url",
    # Configuration
    "Config",
    # Exceptions
    "ExtractumError",
    "TransportError",
    "GitHubAPIError",
    "GitHubNotFoundError",
    "DecodeError",
    "RequestCancelledError",
    "InvalidRepositoryURLError",
    "ConfigError",
    # Models
    "Repository",
    "Issue",
    "PullRequest",
    "Comment",
    "IssueDetails",
    "CodeBlock",
    "User",
    "Label",
]
