"""Converts desired entities into Airtable record bodies.

Every table stores the provider-assigned identifier in its ``ID`` column. Links to
other tables are Airtable link fields, i.e. lists of remote record IDs, which only
exist once the referenced records have been created.
"""

from datetime import datetime, timezone
from typing import Any, Callable

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
from depviz_airtable.synchronize.cache import RemoteCache
from depviz_airtable.synchronize.exceptions import ReferenceOrderError, UnresolvedReferenceError
from depviz_airtable.synchronize.models import TableKind
from depviz_airtable.utils.constants import EXTERNAL_ID_FIELD

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

Links = dict[str, tuple[TableKind, list[str]]]
FieldBuilder = Callable[[Any], tuple[dict[str, Any], Links]]


def format_datetime(value: datetime | None) -> str | None:
    """Format a date-time the way Airtable returns it (UTC, millisecond precision)."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}Z"


def _ids(*features: Feature | None) -> list[str]:
    """External IDs of the given features, skipping missing ones and duplicates."""
    return list(dict.fromkeys(feature.id for feature in features if feature is not None))


def provider_fields(provider: ProviderModel) -> tuple[dict[str, Any], Links]:
    return {
        EXTERNAL_ID_FIELD: provider.id,
        "URL": provider.url,
        "Driver": provider.driver,
    }, {}


def account_fields(account: AccountModel) -> tuple[dict[str, Any], Links]:
    return {
        EXTERNAL_ID_FIELD: account.id,
        "URL": account.url,
        "Login": account.login,
        "Full name": account.full_name,
        "Type": account.type,
        "Location": account.location,
        "Company": account.company,
        "Blog": account.blog,
        "Email": account.email,
        "Avatar URL": account.avatar_url,
    }, {
        "Provider": (TableKind.PROVIDER, _ids(account.provider)),
    }


def repository_fields(repository: RepositoryModel) -> tuple[dict[str, Any], Links]:
    return {
        EXTERNAL_ID_FIELD: repository.id,
        "URL": repository.url,
        "Title": repository.title,
        "Description": repository.description,
        "Homepage": repository.homepage,
        "Pushed at": format_datetime(repository.pushed_at),
        "Is fork": repository.is_fork,
    }, {
        "Provider": (TableKind.PROVIDER, _ids(repository.provider)),
        "Owner": (TableKind.ACCOUNT, _ids(repository.owner)),
    }


def label_fields(label: LabelModel) -> tuple[dict[str, Any], Links]:
    return {
        EXTERNAL_ID_FIELD: label.id,
        "URL": label.url,
        "Name": label.name,
        "Color": label.color,
        "Description": label.description,
    }, {
        "Repository": (TableKind.REPOSITORY, _ids(label.repository)),
    }


def milestone_fields(milestone: MilestoneModel) -> tuple[dict[str, Any], Links]:
    return {
        EXTERNAL_ID_FIELD: milestone.id,
        "URL": milestone.url,
        "Title": milestone.title,
        "Description": milestone.description,
        "Closed at": format_datetime(milestone.closed_at),
        "Due on": format_datetime(milestone.due_on),
    }, {
        "Creator": (TableKind.ACCOUNT, _ids(milestone.creator)),
        "Repository": (TableKind.REPOSITORY, _ids(milestone.repository)),
    }


def issue_fields(issue: IssueModel) -> tuple[dict[str, Any], Links]:
    return {
        EXTERNAL_ID_FIELD: issue.id,
        "URL": issue.url,
        "Title": issue.title,
        "Body": issue.body,
        "State": issue.state,
        "Is PR": issue.is_pr,
        "Is locked": issue.is_locked,
        "Comments": issue.comments,
        "Upvotes": issue.upvotes,
        "Downvotes": issue.downvotes,
        "Created at": format_datetime(issue.created_at),
        "Updated at": format_datetime(issue.updated_at),
        "Completed at": format_datetime(issue.completed_at),
    }, {
        "Provider": (TableKind.PROVIDER, _ids(issue.repository.provider)),
        "Repository": (TableKind.REPOSITORY, _ids(issue.repository)),
        "Milestone": (TableKind.MILESTONE, _ids(issue.milestone)),
        "Author": (TableKind.ACCOUNT, _ids(issue.author)),
        "Assignees": (TableKind.ACCOUNT, _ids(*issue.assignees)),
        "Labels": (TableKind.LABEL, _ids(*issue.labels)),
    }


FIELD_BUILDERS: dict[TableKind, FieldBuilder] = {
    TableKind.PROVIDER: provider_fields,
    TableKind.ACCOUNT: account_fields,
    TableKind.REPOSITORY: repository_fields,
    TableKind.LABEL: label_fields,
    TableKind.MILESTONE: milestone_fields,
    TableKind.ISSUE: issue_fields,
}


class RecordBuilder:
    """Builds record bodies, resolving links through the records already in the cache."""

    def __init__(self, cache: RemoteCache) -> None:
        """Initialize the builder with the cache of the current run."""
        self.cache = cache

    def build(self, kind: TableKind, feature: Feature) -> dict[str, Any]:
        """Return the Airtable fields of a feature.

        Raises:
            ReferenceOrderError: If a link targets a kind not ordered before ``kind``.
            UnresolvedReferenceError: If a referenced entity has no remote record yet.
        """
        fields, links = FIELD_BUILDERS[kind](feature)
        for field_name, (referenced_kind, external_ids) in links.items():
            if referenced_kind not in kind.dependencies:
                raise ReferenceOrderError(kind, referenced_kind)
            referenced_table = self.cache[referenced_kind]
            record_ids: list[str] = []
            for external_id in external_ids:
                record_id = referenced_table.record_id_for(external_id)
                if record_id is None:
                    raise UnresolvedReferenceError(kind, feature.id, referenced_kind, external_id)
                record_ids.append(record_id)
            fields[field_name] = record_ids
        return fields

    def build_table(self, kind: TableKind, features: dict[str, Feature]) -> tuple[dict[str, dict[str, Any]], list[UnresolvedReferenceError]]:
        """Build the bodies of every desired entity of a kind.

        Entities whose links cannot be resolved are left out of the returned bodies
        and reported through the returned errors.
        """
        bodies: dict[str, dict[str, Any]] = {}
        unresolved: list[UnresolvedReferenceError] = []
        for external_id, feature in features.items():
            try:
                bodies[external_id] = self.build(kind, feature)
            except UnresolvedReferenceError as exc:
                logger.warning(
                    "Skipping record with unresolved reference",
                    kind=kind.value,
                    external_id=external_id,
                    referenced_kind=exc.referenced_kind.value,
                    referenced_external_id=exc.referenced_external_id,
                )
                unresolved.append(exc)
        return bodies, unresolved
