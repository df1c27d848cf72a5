from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """GitHub user, as returned by /users/{login} and follower listings."""

    model_config = ConfigDict(frozen=True)

    id: int
    login: str
    name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    followers: int | None = None
    following: int | None = None
    public_repos: int | None = None
    location: str | None = None
    company: str | None = None
    blog: str | None = None
    html_url: str | None = None


class RepositoryOwner(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str
    avatar_url: str | None = None


class Repository(BaseModel):
    """GitHub repository with the wire names mapped to Python ones."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    full_name: str
    description: str | None = None
    language: str | None = None
    stars: int = Field(alias="stargazers_count")
    forks: int
    watchers: int
    open_issues: int = Field(alias="open_issues_count")
    is_private: bool = Field(alias="private")
    is_fork: bool = Field(alias="fork")
    created_at: datetime
    updated_at: datetime
    pushed_at: datetime | None = None
    html_url: str
    owner: RepositoryOwner


class RepositorySearchResponse(BaseModel):
    """Envelope of /search/repositories."""

    model_config = ConfigDict(frozen=True)

    total_count: int
    items: list[Repository]
