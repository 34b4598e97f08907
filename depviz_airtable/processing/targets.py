"""Selects the issues of the graph that belong to the requested targets."""

from dataclasses import dataclass
from urllib.parse import urlparse

import structlog

from depviz_airtable.processing.exceptions import InvalidTargetError
from depviz_airtable.schemas.graph import IssueModel, RepositoryModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Target:
    """An account or repository selector, optionally pinned to a host."""

    owner: str
    repo: str | None = None
    host: str | None = None

    def matches(self, host: str | None, owner: str, repo: str) -> bool:
        """Return True if the given repository coordinates are selected by this target."""
        if self.host is not None and host is not None and self.host != host.lower():
            return False
        if self.owner != owner.lower():
            return False
        return self.repo is None or self.repo == repo.lower()


def parse_target(raw_target: str) -> Target:
    """Parse 'owner', 'owner/repo' or a repository URL into a Target."""
    value = raw_target.strip()
    host: str | None = None
    if "://" in value:
        parsed = urlparse(value)
        host = parsed.netloc.lower() or None
        value = parsed.path
    parts = [part for part in value.strip("/").split("/") if part]
    if not parts or len(parts) > 2:
        raise InvalidTargetError(raw_target)
    owner = parts[0].lower()
    repo = parts[1].lower().removesuffix(".git") if len(parts) == 2 else None
    return Target(owner=owner, repo=repo, host=host)


def parse_targets(raw_targets: list[str]) -> list[Target]:
    """Parse a list of target selectors."""
    return [parse_target(raw_target) for raw_target in raw_targets]


def repository_coordinates(repository: RepositoryModel) -> tuple[str | None, str, str] | None:
    """Return (host, owner, name) for a repository, or None if they cannot be derived."""
    if repository.url:
        parsed = urlparse(repository.url)
        parts = [part for part in parsed.path.strip("/").split("/") if part]
        if len(parts) >= 2:
            return parsed.netloc or None, parts[0], parts[1].removesuffix(".git")
    if repository.owner is not None and repository.owner.login and repository.title:
        return None, repository.owner.login, repository.title
    return None


def filter_issues_by_targets(issues: list[IssueModel], targets: list[Target]) -> list[IssueModel]:
    """Keep only the issues whose repository is selected by at least one target.

    An empty target list keeps every issue.
    """
    if not targets:
        return list(issues)
    filtered: list[IssueModel] = []
    for issue in issues:
        coordinates = repository_coordinates(issue.repository)
        if coordinates is None:
            logger.warning("Cannot determine repository of issue, skipping", issue_id=issue.id, repository_id=issue.repository.id)
            continue
        if any(target.matches(*coordinates) for target in targets):
            filtered.append(issue)
    logger.info("Filtered issues by targets", target_count=len(targets), issue_count=len(issues), filtered_issue_count=len(filtered))
    return filtered
