"""User and label data models."""

from pydantic import AliasChoices, BaseModel, Field


class User(BaseModel):
    """GitHub user as embedded in issues, pull requests and comments."""

    id: int = 0
    username: str = Field(default="", validation_alias=AliasChoices("login", "username"))
    type: str = ""  # User, Bot, Organization


class Label(BaseModel):
    """GitHub issue/PR label."""

    name: str
    color: str = ""
