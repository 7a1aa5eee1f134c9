"""Utility modules for extractum."""

from extractum.utils.pagination import PAGE_SIZE, build_page_params, is_last_page
from extractum.utils.rate_limiter import RateLimiter, RateLimitState
from extractum.utils.repo_url import parse_repo_url
from extractum.utils.text import extract_code_blocks, extract_error_messages, with_parsed_body

__all__ = [
    "RateLimiter",
    "RateLimitState",
    "PAGE_SIZE",
    "build_page_params",
    "is_last_page",
    "parse_repo_url",
    "extract_code_blocks",
    "extract_error_messages",
    "with_parsed_body",
]
