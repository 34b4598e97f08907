"""Pydantic schema for the dependency graph handed over by the collection subsystem.

Every entity carries the identifier assigned by its provider in ``id``. Issues
embed the entities they reference, so a single issue is enough to reach its
repository, provider, labels, milestone, author and assignees.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ProviderModel(BaseModel):
    """Pydantic model for a provider (e.g. a GitHub or GitLab instance)."""

    id: str = Field(min_length=1)
    url: str | None = None
    driver: str | None = None


class AccountModel(BaseModel):
    """Pydantic model for a user or organization account."""

    id: str = Field(min_length=1)
    url: str | None = None
    login: str | None = None
    full_name: str | None = None
    type: str | None = None
    location: str | None = None
    company: str | None = None
    blog: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    provider: ProviderModel | None = None


class RepositoryModel(BaseModel):
    """Pydantic model for a repository."""

    id: str = Field(min_length=1)
    url: str | None = None
    title: str | None = None
    description: str | None = None
    homepage: str | None = None
    pushed_at: datetime | None = None
    is_fork: bool = False
    provider: ProviderModel
    owner: AccountModel | None = None


class LabelModel(BaseModel):
    """Pydantic model for an issue label."""

    id: str = Field(min_length=1)
    url: str | None = None
    name: str
    color: str | None = None
    description: str | None = None
    repository: RepositoryModel | None = None


class MilestoneModel(BaseModel):
    """Pydantic model for a milestone."""

    id: str = Field(min_length=1)
    url: str | None = None
    title: str
    description: str | None = None
    closed_at: datetime | None = None
    due_on: datetime | None = None
    creator: AccountModel | None = None
    repository: RepositoryModel | None = None


class IssueModel(BaseModel):
    """Pydantic model for an issue or pull request."""

    id: str = Field(min_length=1)
    url: str | None = None
    title: str
    body: str | None = None
    state: str = "open"
    is_pr: bool = False
    is_locked: bool = False
    comments: int = 0
    upvotes: int = 0
    downvotes: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    repository: RepositoryModel
    milestone: MilestoneModel | None = None
    author: AccountModel
    assignees: list[AccountModel] = []
    labels: list[LabelModel] = []


class GraphYAMLModel(BaseModel):
    """Pydantic model for a dependency graph file."""

    issues: list[IssueModel]


Feature = ProviderModel | AccountModel | RepositoryModel | LabelModel | MilestoneModel | IssueModel
"""Any domain entity that is projected into a table."""
