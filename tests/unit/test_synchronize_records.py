"""Contains unit tests for building Airtable record bodies."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from depviz_airtable.schemas.graph import AccountModel, IssueModel, ProviderModel, RepositoryModel
from depviz_airtable.synchronize import records
from depviz_airtable.synchronize.cache import RemoteCache, RemoteRecord, RemoteTable
from depviz_airtable.synchronize.exceptions import ReferenceOrderError, UnresolvedReferenceError
from depviz_airtable.synchronize.models import TableKind
from depviz_airtable.synchronize.records import RecordBuilder, format_datetime


def make_cache(**seeded: dict[str, str]) -> RemoteCache:
    """Build a cache whose tables hold records keyed by external ID, e.g. account={"acc-1": "rec1"}."""
    tables = {kind: RemoteTable(kind, kind.value) for kind in TableKind}
    for kind_value, record_ids in seeded.items():
        for external_id, record_id in record_ids.items():
            tables[TableKind(kind_value)].append(RemoteRecord({"ID": external_id}, record_id=record_id))
    return RemoteCache(tables)


@pytest.mark.parametrize(
    "value,expected",
    [
        pytest.param(None, None, id="none"),
        pytest.param(datetime(2019, 4, 1, 12, 30, 5, 123456, tzinfo=timezone.utc), "2019-04-01T12:30:05.123Z", id="utc"),
        pytest.param(datetime(2019, 4, 1, 14, 30, 5, tzinfo=timezone(timedelta(hours=2))), "2019-04-01T12:30:05.000Z", id="offset"),
        pytest.param(datetime(2019, 4, 1, 12, 30, 5), "2019-04-01T12:30:05.000Z", id="naive"),
    ],
)
def test_format_datetime(value: datetime | None, expected: str | None) -> None:
    """Date-times are rendered in UTC with millisecond precision."""
    assert format_datetime(value) == expected


def test_build_account_resolves_provider_link() -> None:
    """Links hold the remote record IDs of the referenced entities."""
    builder = RecordBuilder(make_cache(provider={"github.com": "recProvider"}))
    account = AccountModel(id="acc-1", login="alice", provider=ProviderModel(id="github.com"))

    fields = builder.build(TableKind.ACCOUNT, account)

    assert fields["ID"] == "acc-1"
    assert fields["Login"] == "alice"
    assert fields["Provider"] == ["recProvider"]
    assert fields["Company"] is None


def test_build_issue_links(graph_issues: list[IssueModel]) -> None:
    """Issue bodies link to their provider, repository, milestone, author, assignees and labels."""
    builder = RecordBuilder(
        make_cache(
            provider={"github.com": "recP"},
            account={"acc-moul": "recM", "acc-alice": "recA", "acc-bob": "recB"},
            repository={"repo-depviz": "recR"},
            label={"label-bug": "recL"},
            milestone={"ms-v1": "recV"},
        )
    )

    fields = builder.build(TableKind.ISSUE, graph_issues[0])

    assert fields["Title"] == "First issue"
    assert fields["State"] == "open"
    assert fields["Comments"] == 0
    assert fields["Provider"] == ["recP"]
    assert fields["Repository"] == ["recR"]
    assert fields["Milestone"] == ["recV"]
    assert fields["Author"] == ["recA"]
    assert fields["Assignees"] == ["recB"]
    assert fields["Labels"] == ["recL"]


def test_build_missing_optional_reference_is_empty_link() -> None:
    """An absent optional reference becomes an empty link."""
    builder = RecordBuilder(make_cache(provider={"github.com": "recP"}))
    repository = RepositoryModel(id="repo-1", title="repo", provider=ProviderModel(id="github.com"))

    fields = builder.build(TableKind.REPOSITORY, repository)

    assert fields["Owner"] == []
    assert fields["Is fork"] is False


def test_build_unresolved_reference_raises() -> None:
    """A reference to an entity without a remote record cannot be built."""
    builder = RecordBuilder(make_cache(provider={"github.com": "recP"}))
    repository = RepositoryModel(id="repo-1", provider=ProviderModel(id="github.com"), owner=AccountModel(id="acc-ghost"))

    with pytest.raises(UnresolvedReferenceError) as exc_info:
        builder.build(TableKind.REPOSITORY, repository)

    assert exc_info.value.external_id == "repo-1"
    assert exc_info.value.referenced_kind == TableKind.ACCOUNT
    assert exc_info.value.referenced_external_id == "acc-ghost"


def test_build_rejects_links_against_dependency_order(monkeypatch: pytest.MonkeyPatch) -> None:
    """A kind cannot link to a kind that is synchronized after it."""

    def provider_linking_issues(provider: ProviderModel) -> tuple[dict[str, Any], records.Links]:
        return {"ID": provider.id}, {"Issues": (TableKind.ISSUE, [])}

    monkeypatch.setitem(records.FIELD_BUILDERS, TableKind.PROVIDER, provider_linking_issues)
    builder = RecordBuilder(make_cache())

    with pytest.raises(ReferenceOrderError):
        builder.build(TableKind.PROVIDER, ProviderModel(id="github.com"))


def test_build_table_separates_unresolved_records() -> None:
    """Buildable bodies are returned, the others are reported."""
    builder = RecordBuilder(make_cache(provider={"github.com": "recP"}))
    github = ProviderModel(id="github.com")
    gitlab = ProviderModel(id="gitlab.com")
    features = {
        "acc-1": AccountModel(id="acc-1", provider=github),
        "acc-2": AccountModel(id="acc-2", provider=gitlab),
    }

    bodies, unresolved = builder.build_table(TableKind.ACCOUNT, features)  # type: ignore[arg-type]

    assert list(bodies) == ["acc-1"]
    assert [error.external_id for error in unresolved] == ["acc-2"]
