"""Rate limiter for GitHub API requests."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, TypeVar

from extractum.exceptions import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Wait for the reset when fewer requests than this remain
LOW_REMAINING_THRESHOLD = 5

# Seconds added on top of the reported reset time
RESET_GRACE_SECONDS = 1.0


def format_time_remaining(seconds: float) -> str:
    """Format seconds into a human-friendly string."""
    if seconds <= 0:
        return "now"

    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        if secs > 0:
            return f"{minutes} min {secs} sec"
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        if minutes > 0:
            return f"{hours} hr {minutes} min"
        return f"{hours} hour{'s' if hours != 1 else ''}"


def format_reset_time(reset_timestamp: float) -> str:
    """Format reset timestamp to a human-readable local time."""
    reset_dt = datetime.fromtimestamp(reset_timestamp)
    return reset_dt.strftime("%H:%M:%S")


def _parse_int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass
class RateLimitState:
    """Last observed rate limit values.

    Both fields start unknown and only change when a response carries a
    valid header. The values are a local estimate; the server may still
    reject a request that looked safe.
    """

    remaining: Optional[int] = None
    reset_time: Optional[float] = None  # Unix timestamp

    @property
    def is_exhausted(self) -> bool:
        """Check if the last response reported zero remaining requests."""
        return self.remaining == 0

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """Update state from GitHub API response headers.

        Missing or non-integer headers leave the corresponding field unchanged.
        """
        remaining = _parse_int_header(headers, "x-ratelimit-remaining")
        if remaining is not None:
            self.remaining = remaining

        reset = _parse_int_header(headers, "x-ratelimit-reset")
        if reset is not None:
            self.reset_time = float(reset)


@dataclass
class RateLimiter:
    """Per-client rate limiter for the REST API.

    One client call chain at a time is assumed. The state is mutated in
    place after every response without locking, so a client shared between
    concurrently running tasks needs external synchronisation or one
    client per task.
    """

    low_remaining_threshold: int = LOW_REMAINING_THRESHOLD
    state: RateLimitState = field(default_factory=RateLimitState)

    # Injectable for tests
    clock: Callable[[], float] = time.time
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def should_wait(self) -> bool:
        """Check whether the next request has to wait for the reset."""
        remaining = self.state.remaining
        reset_time = self.state.reset_time
        if remaining is None or reset_time is None:
            return False
        return remaining < self.low_remaining_threshold and self.clock() < reset_time

    def seconds_until_reset(self) -> float:
        """Seconds to wait so that the reset time plus a grace second has passed.

        Zero once that point is behind us. Without a known reset time the
        wait is one grace second.
        """
        if self.state.reset_time is None:
            return RESET_GRACE_SECONDS
        wait = self.state.reset_time + RESET_GRACE_SECONDS - self.clock()
        return max(wait, 0.0)

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        """Update state from response headers."""
        self.state.update_from_headers(headers)

    async def acquire(self, cancel: Optional[asyncio.Event] = None) -> None:
        """Wait for the reset if the remaining budget is nearly used up."""
        check_cancelled(cancel)
        if not self.should_wait():
            return

        wait_time = self.seconds_until_reset()
        logger.warning(
            "Rate limit almost exceeded (%s requests left). Waiting %s (until %s)",
            self.state.remaining,
            format_time_remaining(wait_time),
            format_reset_time(self.clock() + wait_time),
        )
        await self.wait(wait_time, cancel)

    async def wait(self, seconds: float, cancel: Optional[asyncio.Event] = None) -> None:
        """Sleep for ``seconds`` unless ``cancel`` is set first.

        Raises:
            RequestCancelledError: If the cancel event fires before the sleep ends
        """
        await run_cancellable(self.sleep(seconds), cancel)

    def get_status(self) -> dict:
        """Get current rate limit status."""
        reset_in = None
        if self.state.reset_time is not None:
            reset_in = max(0.0, self.state.reset_time - self.clock())
        return {
            "remaining": self.state.remaining,
            "reset_time": self.state.reset_time,
            "reset_in": reset_in,
        }


def check_cancelled(cancel: Optional[asyncio.Event]) -> None:
    """Raise RequestCancelledError if the cancel event is set."""
    if cancel is not None and cancel.is_set():
        raise RequestCancelledError("Request cancelled")


async def run_cancellable(
    coro: Coroutine[Any, Any, T],
    cancel: Optional[asyncio.Event] = None,
) -> T:
    """Await ``coro`` unless ``cancel`` is set first.

    The coroutine is raced against the event. Whichever finishes second is
    cancelled, so a cancelled sleep or request stops right away.

    Raises:
        RequestCancelledError: If the cancel event is set before or while
            the coroutine runs
    """
    if cancel is None:
        return await coro

    if cancel.is_set():
        coro.close()
        check_cancelled(cancel)

    task = asyncio.ensure_future(coro)
    canceller = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({task, canceller}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        task.cancel()
        canceller.cancel()

    if cancel.is_set():
        if task.done() and not task.cancelled():
            # Consume the outcome so it is not reported as unretrieved
            task.exception()
        check_cancelled(cancel)
    return task.result()
