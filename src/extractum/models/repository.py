"""Repository data models."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class Repository(BaseModel):
    """GitHub repository data.

    Decoded from the ``GET /repos/{owner}/{repo}`` response; GitHub's count
    fields are exposed under shorter names.
    """

    name: str
    full_name: str
    description: str | None = None
    language: str | None = None
    stars: int = Field(default=0, validation_alias=AliasChoices("stargazers_count", "stars"))
    forks: int = Field(default=0, validation_alias=AliasChoices("forks_count", "forks"))
    open_issues: int = Field(
        default=0, validation_alias=AliasChoices("open_issues_count", "open_issues")
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None
    url: str = Field(default="", validation_alias=AliasChoices("html_url", "url"))
