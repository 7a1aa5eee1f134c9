"""Exceptions for extractum.

Exception Hierarchy:
    ExtractumError (base)
    ├── TransportError (network, DNS, TLS or timeout failure)
    ├── GitHubAPIError (HTTP responses with error status codes)
    │   └── GitHubNotFoundError (404 not found)
    ├── DecodeError (response body is not the expected JSON shape)
    ├── RequestCancelledError (caller cancelled a rate-limit wait or an in-flight request)
    ├── InvalidRepositoryURLError (repository URL could not be parsed)
    └── ConfigError (environment holds an unusable setting)

Usage:
    - A 403 with zero remaining requests is never raised to callers: the client
      waits for the rate limit to reset and sends the request again.
    - Every other error aborts the whole fetch, including paginated ones.
"""

__all__ = [
    "ExtractumError",
    "TransportError",
    "GitHubAPIError",
    "GitHubNotFoundError",
    "DecodeError",
    "RequestCancelledError",
    "InvalidRepositoryURLError",
    "ConfigError",
]


class ExtractumError(Exception):
    """Base exception for all extractum errors."""

    pass


class TransportError(ExtractumError):
    """Raised when a request could not be sent or no response was received."""

    pass


class GitHubAPIError(ExtractumError):
    """Raised for HTTP error responses other than rate-limit exhaustion.

    The raw status code and response body are kept for diagnostics.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GitHubNotFoundError(GitHubAPIError):
    """Raised when a GitHub resource is not found (HTTP 404)."""

    def __init__(self, message: str, status_code: int = 404, body: str = ""):
        super().__init__(message, status_code=status_code, body=body)


class DecodeError(ExtractumError):
    """Raised when a response body cannot be decoded into the requested type."""

    pass


class RequestCancelledError(ExtractumError):
    """Raised when the caller's cancel event fires before or during a request.

    No request is sent once this has been raised.
    """

    pass


class InvalidRepositoryURLError(ExtractumError):
    """Raised when a string is not a recognisable GitHub repository URL."""

    def __init__(self, url: str):
        super().__init__(f"Invalid GitHub repository URL: {url}")
        self.url = url


class ConfigError(ExtractumError):
    """Raised when a configuration value from the environment is invalid."""

    pass
