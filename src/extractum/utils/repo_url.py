"""Repository URL parsing."""

import re

from extractum.exceptions import InvalidRepositoryURLError

# https://github.com/owner/repo(.git) or git@github.com:owner/repo(.git)
REPO_URL_PATTERN = re.compile(r"github\.com[/:]([^/]+)/([^/]+?)(?:\.git)?$")


def parse_repo_url(url: str) -> tuple[str, str]:
    """Extract ``(owner, repo)`` from a GitHub repository URL.

    Raises:
        InvalidRepositoryURLError: If the URL does not end in ``owner/repo``
    """
    match = REPO_URL_PATTERN.search(url.strip())
    if match is None:
        raise InvalidRepositoryURLError(url)
    return match.group(1), match.group(2)
