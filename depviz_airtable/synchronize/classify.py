"""Matches desired record bodies against the records fetched from Airtable."""

from typing import Any

import structlog

from depviz_airtable.synchronize.cache import RemoteRecord, RemoteTable
from depviz_airtable.synchronize.models import SyncState
from depviz_airtable.synchronize.utils import changed_fields

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def decide_record_sync_state(desired_fields: dict[str, Any], remote_record: RemoteRecord | None = None) -> SyncState:
    """Compare a desired record body and an Airtable record, and decide whether it is new, changed or unchanged.

    Key is the external ID.
    """
    if remote_record is None:
        return SyncState.NEW

    differing_fields = await changed_fields(desired_fields, remote_record.fields)
    if differing_fields:
        logger.debug(
            "Record needs to be updated",
            record_id=remote_record.record_id,
            external_id=remote_record.external_id,
            fields=differing_fields,
        )
        return SyncState.CHANGED
    return SyncState.UNCHANGED


async def classify_table(table: RemoteTable, bodies: dict[str, dict[str, Any]], skipped_external_ids: set[str] | None = None) -> list[RemoteRecord]:
    """Assign a synchronization state to the records of a table.

    Matched records become unchanged or changed; changed records get the desired
    fields staged onto them. Records of entities that were skipped while building
    their bodies are marked skipped so they are neither updated nor deleted. Every
    other fetched record stays unmatched.

    Returns:
        The records to create, in state NEW. They are not part of the table until created.
    """
    new_records: list[RemoteRecord] = []
    for external_id, fields in bodies.items():
        remote_record = table.get(external_id)
        state = await decide_record_sync_state(fields, remote_record)
        if remote_record is None:
            new_records.append(RemoteRecord(fields, state=SyncState.NEW))
            continue
        remote_record.state = state
        if state == SyncState.CHANGED:
            remote_record.staged_fields = fields
            remote_record.fields.update(fields)

    for external_id in skipped_external_ids or set():
        remote_record = table.get(external_id)
        if remote_record is not None:
            remote_record.state = SyncState.SKIPPED

    logger.info(
        "Classified records",
        table=table.name,
        new=len(new_records),
        changed=len(table.records_in_state(SyncState.CHANGED)),
        unchanged=len(table.records_in_state(SyncState.UNCHANGED)),
        unmatched=len(table.records_in_state(SyncState.UNMATCHED)),
        skipped=len(table.records_in_state(SyncState.SKIPPED)),
    )
    return new_records
