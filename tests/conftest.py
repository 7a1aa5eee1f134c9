"""Pytest configuration and fixtures."""

from collections.abc import Callable
from typing import Any, Optional, Union

import httpx
import pytest

from extractum.config import Config, set_config
from extractum.services.github_rest_client import GitHubRestClient
from extractum.utils.rate_limiter import RateLimiter

API_URL = "https://api.github.test"
START_TIME = 1_700_000_000.0


class FakeClock:
    """Clock whose sleep advances time instantly."""

    def __init__(self, now: float = START_TIME):
        self.now = now
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeGitHub:
    """Serves queued responses through httpx.MockTransport and records requests."""

    def __init__(
        self,
        responses: list[Union[httpx.Response, Exception]],
        clock: Optional[FakeClock] = None,
    ):
        self.responses = list(responses)
        self.clock = clock
        self.requests: list[httpx.Request] = []
        self.sent_at: list[float] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.clock is not None:
            self.sent_at.append(self.clock.time())
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def pages(self) -> list[str]:
        return [r.url.params.get("page") for r in self.requests]


def rate_headers(remaining: int, reset: float) -> dict[str, str]:
    """Build GitHub rate limit headers."""
    return {
        "X-RateLimit-Remaining": str(remaining),
        "X-RateLimit-Reset": str(int(reset)),
    }


def json_response(
    body: Any,
    status_code: int = 200,
    headers: Optional[dict[str, str]] = None,
) -> httpx.Response:
    return httpx.Response(status_code, json=body, headers=headers)


def make_items(count: int, start: int = 1, **extra: Any) -> list[dict[str, Any]]:
    """Build a page of issue-like API items."""
    return [
        {"id": n, "number": n, "title": f"Item {n}", **extra}
        for n in range(start, start + count)
    ]


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global state before each test."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def test_config():
    """Create a test configuration."""
    config = Config(github_token="test_token", github_api_url=API_URL)
    set_config(config)
    return config


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_client(test_config, fake_clock) -> Callable[[FakeGitHub], GitHubRestClient]:
    """Build a client wired to a FakeGitHub server and the fake clock."""

    def _make(server: FakeGitHub, **kwargs: Any) -> GitHubRestClient:
        if server.clock is None:
            server.clock = fake_clock
        limiter = RateLimiter(clock=fake_clock.time, sleep=fake_clock.sleep)
        return GitHubRestClient(
            config=test_config,
            rate_limiter=limiter,
            transport=server.transport,
            **kwargs,
        )

    return _make
