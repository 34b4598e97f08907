"""Builds the desired state of every table from the issues of the dependency graph."""

import structlog

from depviz_airtable.schemas.graph import (
    AccountModel,
    Feature,
    IssueModel,
    LabelModel,
    MilestoneModel,
    ProviderModel,
    RepositoryModel,
)
from depviz_airtable.synchronize.models import TableKind

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DesiredSets = dict[TableKind, dict[str, Feature]]


class FeatureDeduplicator:
    """Collects the entities reachable from issues into one map per kind.

    An entity discovered more than once is stored once, keyed by its external ID;
    the attributes of the latest discovery win. Entities referenced by collected
    entities are collected as well, so every reference has a target.
    """

    def __init__(self) -> None:
        """Initialize an empty map for every kind."""
        self.features: DesiredSets = {kind: {} for kind in TableKind.in_dependency_order()}

    def add_provider(self, provider: ProviderModel) -> None:
        self.features[TableKind.PROVIDER][provider.id] = provider

    def add_account(self, account: AccountModel) -> None:
        if account.provider is not None:
            self.add_provider(account.provider)
        self.features[TableKind.ACCOUNT][account.id] = account

    def add_repository(self, repository: RepositoryModel) -> None:
        self.add_provider(repository.provider)
        if repository.owner is not None:
            self.add_account(repository.owner)
        self.features[TableKind.REPOSITORY][repository.id] = repository

    def add_label(self, label: LabelModel) -> None:
        if label.repository is not None:
            self.add_repository(label.repository)
        self.features[TableKind.LABEL][label.id] = label

    def add_milestone(self, milestone: MilestoneModel) -> None:
        if milestone.creator is not None:
            self.add_account(milestone.creator)
        if milestone.repository is not None:
            self.add_repository(milestone.repository)
        self.features[TableKind.MILESTONE][milestone.id] = milestone

    def add_issue(self, issue: IssueModel) -> None:
        self.add_repository(issue.repository)
        for label in issue.labels:
            self.add_label(label)
        self.add_account(issue.author)
        for assignee in issue.assignees:
            self.add_account(assignee)
        if issue.milestone is not None:
            self.add_milestone(issue.milestone)
        self.features[TableKind.ISSUE][issue.id] = issue


def build_desired_sets(issues: list[IssueModel]) -> DesiredSets:
    """Return the deduplicated desired entities of every kind."""
    deduplicator = FeatureDeduplicator()
    for issue in issues:
        deduplicator.add_issue(issue)
    logger.debug(
        "Built desired state from dependency graph",
        issue_count=len(issues),
        **{f"{kind.value}_count": len(features) for kind, features in deduplicator.features.items()},
    )
    return deduplicator.features
