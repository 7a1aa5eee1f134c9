"""Configuration management for extractum."""

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from extractum.exceptions import ConfigError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "extractum/1.0"


def _parse_timeout(value: str | None) -> float:
    """Parse EXTRACTUM_TIMEOUT as a positive number of seconds."""
    if not value:
        return 30.0
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(
            f"EXTRACTUM_TIMEOUT must be a number of seconds, got {value!r}"
        ) from None
    if timeout <= 0:
        raise ConfigError(f"EXTRACTUM_TIMEOUT must be greater than zero, got {value!r}")
    return timeout


@dataclass(frozen=True)
class Config:
    """Client configuration.

    Instances are immutable; use ``with_overrides`` to derive a new one.
    """

    github_token: str | None = None
    github_api_url: str = DEFAULT_API_URL
    user_agent: str = DEFAULT_USER_AGENT

    # Timeouts
    request_timeout: float = 30.0

    # Rate limits
    low_remaining_threshold: int = 5  # wait for reset below this many requests

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        # override=False ensures environment variables take precedence over .env
        load_dotenv(override=False)

        # Support both EXTRACTUM_TOKEN (preferred) and GITHUB_TOKEN (fallback)
        token = os.getenv("EXTRACTUM_TOKEN") or os.getenv("GITHUB_TOKEN")
        timeout = _parse_timeout(os.getenv("EXTRACTUM_TIMEOUT"))

        return cls(
            github_token=token or None,
            github_api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
            user_agent=os.getenv("EXTRACTUM_USER_AGENT", DEFAULT_USER_AGENT),
            request_timeout=timeout,
        )

    def with_overrides(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ) -> "Config":
        """Return a copy with the base URL, user agent and timeout overridden, in that order."""
        config = self
        if base_url is not None:
            config = replace(config, github_api_url=base_url)
        if user_agent is not None:
            config = replace(config, user_agent=user_agent)
        if timeout is not None:
            config = replace(config, request_timeout=timeout)
        return config

    @property
    def is_authenticated(self) -> bool:
        """Check if a GitHub token is configured."""
        return bool(self.github_token)


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_config(config: Config | None) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config
