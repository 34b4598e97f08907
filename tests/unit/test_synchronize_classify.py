"""Contains unit tests for classifying remote records."""

import pytest

from depviz_airtable.synchronize.cache import RemoteRecord, RemoteTable
from depviz_airtable.synchronize.classify import classify_table, decide_record_sync_state
from depviz_airtable.synchronize.models import SyncState, TableKind


def make_table(*records: RemoteRecord) -> RemoteTable:
    """Build an accounts table holding the given records."""
    table = RemoteTable(TableKind.ACCOUNT, "Accounts")
    for record in records:
        table.append(record)
    return table


@pytest.mark.asyncio
async def test_decide_new_without_remote_record() -> None:
    """A desired record without a remote counterpart is new."""
    assert await decide_record_sync_state({"ID": "acc-1"}) == SyncState.NEW


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "remote_fields,expected",
    [
        pytest.param({"ID": "acc-1", "Login": "alice"}, SyncState.UNCHANGED, id="equal"),
        pytest.param({"ID": "acc-1", "Login": "alice", "Notes": "kept"}, SyncState.UNCHANGED, id="extra-column"),
        pytest.param({"ID": "acc-1", "Login": "alicia"}, SyncState.CHANGED, id="different"),
        pytest.param({"ID": "acc-1"}, SyncState.CHANGED, id="missing"),
    ],
)
async def test_decide_matched_record(remote_fields: dict[str, str], expected: SyncState) -> None:
    """Matched records are changed only if a synchronized field differs."""
    remote_record = RemoteRecord(remote_fields, record_id="rec1")
    assert await decide_record_sync_state({"ID": "acc-1", "Login": "alice", "Email": None}, remote_record) == expected


@pytest.mark.asyncio
async def test_classify_table() -> None:
    """Every record gets exactly one state and changed records get the desired fields staged."""
    unchanged = RemoteRecord({"ID": "acc-1", "Login": "alice"}, record_id="rec1")
    changed = RemoteRecord({"ID": "acc-2", "Login": "bobby", "Notes": "kept"}, record_id="rec2")
    unmatched = RemoteRecord({"ID": "acc-ghost"}, record_id="rec3")
    table = make_table(unchanged, changed, unmatched)
    bodies = {
        "acc-1": {"ID": "acc-1", "Login": "alice"},
        "acc-2": {"ID": "acc-2", "Login": "bob"},
        "acc-3": {"ID": "acc-3", "Login": "carol"},
    }

    new_records = await classify_table(table, bodies)

    assert unchanged.state == SyncState.UNCHANGED
    assert changed.state == SyncState.CHANGED
    assert changed.staged_fields == {"ID": "acc-2", "Login": "bob"}
    assert changed.fields == {"ID": "acc-2", "Login": "bob", "Notes": "kept"}
    assert unmatched.state == SyncState.UNMATCHED
    assert [(record.external_id, record.state, record.record_id) for record in new_records] == [("acc-3", SyncState.NEW, None)]
    assert len(table) == 3


@pytest.mark.asyncio
async def test_classify_table_marks_skipped_records() -> None:
    """Records of entities that could not be built are neither updated nor deleted."""
    skipped = RemoteRecord({"ID": "acc-1", "Login": "alice"}, record_id="rec1")
    table = make_table(skipped)

    new_records = await classify_table(table, {}, skipped_external_ids={"acc-1", "acc-unknown"})

    assert new_records == []
    assert skipped.state == SyncState.SKIPPED
