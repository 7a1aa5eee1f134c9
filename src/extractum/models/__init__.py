"""Data models for extractum."""

from extractum.models.issue import (
    CodeBlock,
    Comment,
    Issue,
    IssueDetails,
    PullRequest,
)
from extractum.models.repository import Repository
from extractum.models.user import Label, User

__all__ = [
    "Repository",
    "Issue",
    "PullRequest",
    "Comment",
    "IssueDetails",
    "CodeBlock",
    "User",
    "Label",
]
