"""Applies the create, update and delete calls of one table."""

import asyncio

import structlog

from depviz_airtable.airtable.abc import RecordStoreBase
from depviz_airtable.synchronize.cache import RemoteRecord, RemoteTable
from depviz_airtable.synchronize.models import SyncState
from depviz_airtable.synchronize.results import RecordSynchronizationResult
from depviz_airtable.synchronize.utils import omit_null_fields

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def create_remote_record(store: RecordStoreBase, table: RemoteTable, record: RemoteRecord) -> RecordSynchronizationResult:
    """Create a new record and add it to the table so later tables can link to it."""
    try:
        created = await store.create_record(table.name, omit_null_fields(record.fields))
    except Exception as exc:
        logger.error("Failed to create Airtable record", table=table.name, external_id=record.external_id, error=str(exc))
        return RecordSynchronizationResult(table.kind, record.external_id, None, record.state, operation="create", error=str(exc))
    record.record_id = created["id"]
    table.append(record)
    logger.info("Created Airtable record", table=table.name, external_id=record.external_id, record_id=record.record_id)
    return RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state)


async def update_remote_record(store: RecordStoreBase, table: RemoteTable, record: RemoteRecord) -> RecordSynchronizationResult:
    """Push the staged fields of a changed record."""
    if record.record_id is None or record.staged_fields is None:
        raise ValueError(f"Record {record!r} has nothing to update")
    try:
        await store.update_record(table.name, record.record_id, record.staged_fields)
    except Exception as exc:
        logger.error(
            "Failed to update Airtable record", table=table.name, external_id=record.external_id, record_id=record.record_id, error=str(exc)
        )
        return RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state, operation="update", error=str(exc))
    record.staged_fields = None
    logger.info("Updated Airtable record", table=table.name, external_id=record.external_id, record_id=record.record_id)
    return RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state)


async def delete_remote_record(
    store: RecordStoreBase, table: RemoteTable, record: RemoteRecord, destroy_invalid_records: bool
) -> RecordSynchronizationResult:
    """Delete an unmatched record, unless destructive actions are disabled."""
    if record.record_id is None:
        raise ValueError(f"Record {record!r} has never been created")
    if not destroy_invalid_records:
        logger.info(
            "Keeping unmatched Airtable record, deletion is disabled",
            table=table.name,
            external_id=record.external_id,
            record_id=record.record_id,
        )
        return RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state)
    try:
        await store.delete_record(table.name, record.record_id)
    except Exception as exc:
        logger.error(
            "Failed to delete Airtable record", table=table.name, external_id=record.external_id, record_id=record.record_id, error=str(exc)
        )
        return RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state, operation="delete", error=str(exc))
    record.state = SyncState.DELETED
    logger.info("Deleted Airtable record", table=table.name, external_id=record.external_id, record_id=record.record_id)
    return RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state)


async def apply_table_changes(
    store: RecordStoreBase,
    table: RemoteTable,
    new_records: list[RemoteRecord],
    destroy_invalid_records: bool = False,
) -> list[RecordSynchronizationResult]:
    """Create, update and delete the records of a classified table.

    Calls for distinct records are issued concurrently; a failing call is reported
    in its result and does not affect the others. Unchanged records are reported
    without any call; skipped records are left to the caller.
    """
    changed_records = table.records_in_state(SyncState.CHANGED)
    unmatched_records = table.records_in_state(SyncState.UNMATCHED)
    idle_results = [
        RecordSynchronizationResult(table.kind, record.external_id, record.record_id, record.state)
        for record in table.records
        if record.state == SyncState.UNCHANGED
    ]
    for result in idle_results:
        logger.debug("Unchanged Airtable record", table=table.name, external_id=result.external_id, record_id=result.record_id)

    results = await asyncio.gather(
        *(create_remote_record(store, table, record) for record in new_records),
        *(update_remote_record(store, table, record) for record in changed_records),
        *(delete_remote_record(store, table, record, destroy_invalid_records) for record in unmatched_records),
    )
    return idle_results + list(results)
