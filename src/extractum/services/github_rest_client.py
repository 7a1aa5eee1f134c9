"""GitHub REST API client."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from functools import lru_cache, partial
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_never

from extractum.config import Config, get_config
from extractum.exceptions import (
    DecodeError,
    GitHubAPIError,
    GitHubNotFoundError,
    TransportError,
)
from extractum.models import Comment, Issue, IssueDetails, PullRequest, Repository
from extractum.utils.pagination import PAGE_SIZE, build_page_params, is_last_page
from extractum.utils.rate_limiter import (
    RateLimiter,
    format_reset_time,
    format_time_remaining,
    run_cancellable,
)

logger = logging.getLogger(__name__)


class _RateLimitExhausted(Exception):
    """A 403 arrived while zero requests remain; wait for the reset and resend."""

    pass


@lru_cache(maxsize=None)
def _type_adapter(response_model: Any) -> TypeAdapter:
    return TypeAdapter(response_model)


class GitHubRestClient:
    """Async client for GitHub REST API.

    Every call goes through ``get``, which waits when the rate limit is
    nearly used up and resends once per rate-limit exhaustion. List calls
    page through results 100 at a time.

    A client instance supports one call chain at a time; see ``RateLimiter``.

    Example:
        ```python
        async with GitHubRestClient(config) as client:
            repo = await client.fetch_repository("octocat", "hello-world")
            issues = await client.fetch_issues("octocat", "hello-world")
        ```
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rate_limiter: Optional[RateLimiter] = None,
        *,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_config()
        if token is not None:
            config = replace(config, github_token=token)
        self.config = config.with_overrides(
            base_url=base_url,
            user_agent=user_agent,
            timeout=timeout,
        )
        self.rate_limiter = rate_limiter or RateLimiter(
            low_remaining_threshold=self.config.low_remaining_threshold
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.config.user_agent,
        }
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.github_api_url,
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubRestClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _send(
        self,
        endpoint: str,
        params: Optional[Mapping[str, str]],
        cancel: Optional[asyncio.Event],
    ) -> httpx.Response:
        """Send one GET request after the rate limit allows it.

        Setting ``cancel`` during the round trip abandons the request.
        """
        await self.rate_limiter.acquire(cancel)

        client = await self._get_client()
        logger.debug("GET %s params=%s", endpoint, dict(params or {}))
        try:
            response = await run_cancellable(client.get(endpoint, params=params), cancel)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {endpoint} failed: {e}") from e

        self.rate_limiter.update_from_headers(response.headers)

        if response.status_code == 403 and self.rate_limiter.state.is_exhausted:
            raise _RateLimitExhausted(endpoint)
        elif response.status_code == 404:
            raise GitHubNotFoundError(
                f"Resource not found: {endpoint}",
                body=response.text,
            )
        elif response.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        return response

    def _wait_for_reset(self, retry_state: RetryCallState) -> float:
        return self.rate_limiter.seconds_until_reset()

    def _log_exhausted(self, retry_state: RetryCallState) -> None:
        wait_time = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Rate limit exceeded. Waiting %s (until %s) before retrying",
            format_time_remaining(wait_time),
            format_reset_time(self.rate_limiter.clock() + wait_time),
        )

    async def _request(
        self,
        endpoint: str,
        params: Optional[Mapping[str, str]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        """Make an API request, resending after each rate-limit exhaustion."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(_RateLimitExhausted),
            stop=stop_never,
            wait=self._wait_for_reset,
            sleep=partial(self.rate_limiter.wait, cancel=cancel),
            before_sleep=self._log_exhausted,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._send(endpoint, params, cancel)
        return response

    async def get(
        self,
        endpoint: str,
        params: Optional[Mapping[str, str]] = None,
        *,
        response_model: Any = Any,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        """Make a GET request and decode the JSON response.

        Args:
            endpoint: API path relative to the base URL
            params: Query parameters, sent in order
            response_model: Type to decode into (pydantic model, ``list[...]``, ``Any``)
            cancel: Event that aborts any rate-limit wait when set

        Raises:
            TransportError: The request could not be sent
            GitHubAPIError: The server answered with an error status
            DecodeError: The body is not JSON of the expected shape
            RequestCancelledError: ``cancel`` fired before the request was sent
        """
        response = await self._request(endpoint, params, cancel)
        try:
            return _type_adapter(response_model).validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"Failed to decode response from {endpoint}: {e}") from e

    async def get_paginated(
        self,
        endpoint: str,
        params: Optional[Mapping[str, str]] = None,
        *,
        item_model: Any = Any,
        keep: Optional[Callable[[Any], bool]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> list[Any]:
        """Fetch all pages of a paginated endpoint.

        Pages are requested until one comes back empty or shorter than the
        page size. A full final page therefore costs one extra request.

        Args:
            endpoint: API endpoint
            params: Query parameters added to every page request
            item_model: Type of each item in a page
            keep: Optional predicate; items for which it is false are dropped
            cancel: Event that aborts any rate-limit wait when set

        Returns:
            List of all kept items across all pages
        """
        all_items: list[Any] = []
        page = 1

        while True:
            items = await self.get(
                endpoint,
                params=build_page_params(params, page, PAGE_SIZE),
                response_model=list[item_model],
                cancel=cancel,
            )
            if not items:
                break

            all_items.extend(item for item in items if keep is None or keep(item))

            if is_last_page(items, PAGE_SIZE):
                break
            page += 1

        logger.debug("Fetched %d items from %s in %d page(s)", len(all_items), endpoint, page)
        return all_items

    # Fetch operations

    async def fetch_repository(
        self,
        owner: str,
        repo: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> Repository:
        """Get repository details."""
        return await self.get(
            f"/repos/{owner}/{repo}",
            response_model=Repository,
            cancel=cancel,
        )

    async def fetch_issues(
        self,
        owner: str,
        repo: str,
        state: str = "all",
        cancel: Optional[asyncio.Event] = None,
    ) -> list[Issue]:
        """Get repository issues, excluding pull requests.

        The issues listing also returns pull requests; entries that carry a
        ``pull_request`` object are dropped.
        """
        return await self.get_paginated(
            f"/repos/{owner}/{repo}/issues",
            {"state": state},
            item_model=Issue,
            keep=lambda issue: not issue.is_pull_request,
            cancel=cancel,
        )

    async def fetch_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "closed",
        merged: bool = False,
        cancel: Optional[asyncio.Event] = None,
    ) -> list[PullRequest]:
        """Get repository pull requests.

        Args:
            owner: Repository owner
            repo: Repository name
            state: ``open``, ``closed`` or ``all``
            merged: Keep only pull requests with a merge timestamp
            cancel: Event that aborts any rate-limit wait when set
        """
        keep = (lambda pr: pr.is_merged) if merged else None
        return await self.get_paginated(
            f"/repos/{owner}/{repo}/pulls",
            {"state": state},
            item_model=PullRequest,
            keep=keep,
            cancel=cancel,
        )

    async def fetch_issue_comments(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        cancel: Optional[asyncio.Event] = None,
    ) -> list[Comment]:
        """Get all comments on an issue or pull request."""
        return await self.get_paginated(
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            item_model=Comment,
            cancel=cancel,
        )

    async def fetch_issue_details(
        self,
        owner: str,
        repo: str,
        issue: Issue,
        cancel: Optional[asyncio.Event] = None,
    ) -> IssueDetails:
        """Get an issue together with its comments."""
        comments = await self.fetch_issue_comments(owner, repo, issue.number, cancel=cancel)
        return IssueDetails(issue=issue, comments=comments)

    async def fetch_rate_limit(self, cancel: Optional[asyncio.Event] = None) -> dict[str, Any]:
        """Query ``/rate_limit`` and return the client's updated view of it."""
        await self.get("/rate_limit", cancel=cancel)
        return self.rate_limiter.get_status()
