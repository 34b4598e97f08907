"""Fixtures for unit tests."""

import itertools
from typing import Any, Generator

import pytest
import structlog

from depviz_airtable.airtable.abc import RecordStoreBase
from depviz_airtable.schemas.graph import AccountModel, IssueModel, LabelModel, MilestoneModel, ProviderModel, RepositoryModel
from depviz_airtable.synchronize.models import TableKind


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


class FakeRecordStore(RecordStoreBase):
    """In-memory record store behaving like an Airtable base.

    Like Airtable, empty cells are not stored and not returned. Operations listed in
    ``failures`` raise instead of being applied; keys are ``(operation, external ID)``
    for creates and ``(operation, record ID)`` for updates and deletes, or
    ``("list", table name)`` for fetches.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self._record_ids = itertools.count(1)

    @staticmethod
    def _stored(fields: dict[str, Any]) -> dict[str, Any]:
        return {k: (list(v) if isinstance(v, list) else v) for k, v in fields.items() if not (v is None or v is False or v == "" or v == [])}

    def _raise_if_failing(self, operation: str, key: str | None) -> None:
        if key is not None and (operation, key) in self.failures:
            raise self.failures[(operation, key)]

    def seed(self, table_name: str, record_id: str, fields: dict[str, Any]) -> None:
        """Store a record as if it already existed before the run."""
        self.tables.setdefault(table_name, {})[record_id] = self._stored(fields)

    def records(self, table_name: str) -> dict[str, dict[str, Any]]:
        return self.tables.get(table_name, {})

    def record_by_external_id(self, table_name: str, external_id: str) -> tuple[str, dict[str, Any]]:
        matches = [(record_id, fields) for record_id, fields in self.records(table_name).items() if fields.get("ID") == external_id]
        assert len(matches) == 1, f"expected exactly one {external_id!r} record in {table_name!r}, found {len(matches)}"
        return matches[0]

    def mutating_calls(self) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] != "list"]

    async def list_records(self, table_name: str) -> list[dict[str, Any]]:
        self.calls.append(("list", table_name))
        self._raise_if_failing("list", table_name)
        return [{"id": record_id, "fields": dict(fields)} for record_id, fields in self.records(table_name).items()]

    async def create_record(self, table_name: str, fields: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", table_name, dict(fields)))
        self._raise_if_failing("create", fields.get("ID"))
        record_id = f"rec{next(self._record_ids):04d}"
        self.tables.setdefault(table_name, {})[record_id] = self._stored(fields)
        return {"id": record_id, "fields": dict(self.tables[table_name][record_id])}

    async def update_record(self, table_name: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("update", table_name, record_id, dict(fields)))
        self._raise_if_failing("update", record_id)
        merged = {**self.tables[table_name][record_id], **fields}
        self.tables[table_name][record_id] = self._stored(merged)
        return {"id": record_id, "fields": dict(self.tables[table_name][record_id])}

    async def delete_record(self, table_name: str, record_id: str) -> None:
        self.calls.append(("delete", table_name, record_id))
        self._raise_if_failing("delete", record_id)
        del self.tables[table_name][record_id]


@pytest.fixture
def fake_store() -> FakeRecordStore:
    """An empty in-memory record store."""
    return FakeRecordStore()


@pytest.fixture
def table_names() -> dict[TableKind, str]:
    """Default Airtable table names."""
    return {
        TableKind.PROVIDER: "Providers",
        TableKind.ACCOUNT: "Accounts",
        TableKind.REPOSITORY: "Repositories",
        TableKind.LABEL: "Labels",
        TableKind.MILESTONE: "Milestones",
        TableKind.ISSUE: "Issues and PRs",
    }


@pytest.fixture
def graph_issues() -> list[IssueModel]:
    """Two issues of one repository sharing a label, a milestone and some accounts."""
    github = ProviderModel(id="github.com", url="https://github.com", driver="github")
    moul = AccountModel(id="acc-moul", login="moul", url="https://github.com/moul", provider=github)
    alice = AccountModel(id="acc-alice", login="alice", full_name="Alice", provider=github)
    bob = AccountModel(id="acc-bob", login="bob", provider=github)
    depviz = RepositoryModel(id="repo-depviz", url="https://github.com/moul/depviz", title="depviz", provider=github, owner=moul)
    bug = LabelModel(id="label-bug", name="bug", color="ff0000", repository=depviz)
    v1 = MilestoneModel(id="ms-v1", title="v1", creator=moul, repository=depviz)
    return [
        IssueModel(
            id="issue-1",
            url="https://github.com/moul/depviz/issues/1",
            title="First issue",
            body="Depends on #2",
            repository=depviz,
            author=alice,
            assignees=[bob],
            labels=[bug],
            milestone=v1,
        ),
        IssueModel(
            id="issue-2",
            url="https://github.com/moul/depviz/issues/2",
            title="Second issue",
            repository=depviz,
            author=bob,
            labels=[bug],
        ),
    ]
