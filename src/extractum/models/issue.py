"""Issue, pull request and comment data models."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from extractum.models.user import Label, User


class CodeBlock(BaseModel):
    """Code snippet extracted from a markdown body."""

    language: str = ""
    code: str


class Issue(BaseModel):
    """GitHub issue from the issues listing.

    The listing also returns pull requests; those carry a ``pull_request``
    object and are filtered out by the client.
    """

    id: int
    number: int
    title: str = ""
    body: str | None = None
    state: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    url: str = Field(default="", validation_alias=AliasChoices("html_url", "url"))
    labels: list[Label] = Field(default_factory=list)
    author: User | None = Field(default=None, validation_alias=AliasChoices("user", "author"))
    pull_request: dict[str, Any] | None = None

    # Parsed from body
    code_blocks: list[CodeBlock] = Field(default_factory=list)
    error_messages: list[str] = Field(default_factory=list)

    @property
    def is_pull_request(self) -> bool:
        """Check if this entry is a pull request listed as an issue."""
        return self.pull_request is not None


class PullRequest(BaseModel):
    """GitHub pull request from the pulls listing."""

    id: int
    number: int
    title: str = ""
    body: str | None = None
    state: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    merged_at: datetime | None = None
    url: str = Field(default="", validation_alias=AliasChoices("html_url", "url"))
    author: User | None = Field(default=None, validation_alias=AliasChoices("user", "author"))
    labels: list[Label] = Field(default_factory=list)

    @property
    def is_merged(self) -> bool:
        """Check if the pull request has a merge timestamp."""
        return self.merged_at is not None


class Comment(BaseModel):
    """Comment on an issue or pull request."""

    id: int
    body: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: User | None = Field(default=None, validation_alias=AliasChoices("user", "author"))
    url: str = Field(default="", validation_alias=AliasChoices("html_url", "url"))

    # Parsed from body
    code_blocks: list[CodeBlock] = Field(default_factory=list)
    error_messages: list[str] = Field(default_factory=list)


class IssueDetails(BaseModel):
    """An issue together with all of its comments."""

    issue: Issue
    comments: list[Comment] = Field(default_factory=list)
