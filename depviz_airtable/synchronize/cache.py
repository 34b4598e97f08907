"""In-memory copy of the remote tables for the duration of one run."""

import time
from typing import Any, Iterator

import structlog

from depviz_airtable.airtable.abc import RecordStoreBase
from depviz_airtable.synchronize.exceptions import RemoteFetchError
from depviz_airtable.synchronize.models import SyncState, TableKind
from depviz_airtable.utils.constants import EXTERNAL_ID_FIELD

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class RemoteRecord:
    """A row of a remote table, or a row about to be created."""

    def __init__(
        self,
        fields: dict[str, Any],
        record_id: str | None = None,
        state: SyncState = SyncState.UNMATCHED,
    ) -> None:
        """Initialize the record with its fields, remote ID and synchronization state."""
        self.fields = fields
        self.record_id = record_id
        self.state = state
        self.staged_fields: dict[str, Any] | None = None

    @classmethod
    def from_airtable(cls, data: dict[str, Any]) -> "RemoteRecord":
        """Build a record from an Airtable API record object."""
        return cls(fields=dict(data.get("fields") or {}), record_id=data["id"])

    @property
    def external_id(self) -> str | None:
        """Provider-assigned identifier stored in the record, if any."""
        value = self.fields.get(EXTERNAL_ID_FIELD)
        return str(value) if value not in (None, "") else None

    def __repr__(self) -> str:
        return f"RemoteRecord(record_id={self.record_id!r}, external_id={self.external_id!r}, state={self.state.name})"


class RemoteTable:
    """Records of one table plus an index from external ID to position."""

    def __init__(self, kind: TableKind, name: str) -> None:
        """Initialize an empty table."""
        self.kind = kind
        self.name = name
        self.records: list[RemoteRecord] = []
        self._index: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[RemoteRecord]:
        return iter(self.records)

    def append(self, record: RemoteRecord) -> None:
        """Add a record, indexing it unless its external ID is already taken.

        A record whose external ID is already indexed is kept but never matched,
        so it stays unmatched and becomes a deletion candidate.
        """
        external_id = record.external_id
        if external_id is not None:
            if external_id in self._index:
                logger.warning(
                    "Duplicate external ID in remote table",
                    table=self.name,
                    external_id=external_id,
                    record_id=record.record_id,
                    kept_record_id=self.records[self._index[external_id]].record_id,
                )
            else:
                self._index[external_id] = len(self.records)
        self.records.append(record)

    def get(self, external_id: str) -> RemoteRecord | None:
        """Return the record indexed under the given external ID."""
        position = self._index.get(external_id)
        if position is None:
            return None
        return self.records[position]

    def record_id_for(self, external_id: str) -> str | None:
        """Return the remote record ID of a live record with the given external ID."""
        record = self.get(external_id)
        if record is None or record.record_id is None or record.state == SyncState.DELETED:
            return None
        return record.record_id

    def records_in_state(self, state: SyncState) -> list[RemoteRecord]:
        """Return the records currently in the given state."""
        return [record for record in self.records if record.state == state]


class RemoteCache:
    """Per-run context owning one RemoteTable per kind."""

    def __init__(self, tables: dict[TableKind, RemoteTable]) -> None:
        """Initialize the cache with already-populated tables."""
        self.tables = tables

    def __getitem__(self, kind: TableKind) -> RemoteTable:
        return self.tables[kind]

    @classmethod
    async def fetch(cls, store: RecordStoreBase, table_names: dict[TableKind, str]) -> "RemoteCache":
        """Fetch every record of every table.

        Raises:
            RemoteFetchError: If any table cannot be fetched. The run cannot continue
                without the complete remote state.
        """
        tables: dict[TableKind, RemoteTable] = {}
        for kind in TableKind.in_dependency_order():
            table_name = table_names[kind]
            start_time = time.time()
            logger.info("Fetching existing records from Airtable", table=table_name, kind=kind.value)
            try:
                raw_records = await store.list_records(table_name)
            except Exception as exc:
                logger.error("Failed to fetch records from Airtable", table=table_name, kind=kind.value, error=str(exc))
                raise RemoteFetchError(kind, table_name) from exc
            table = RemoteTable(kind, table_name)
            for raw_record in raw_records:
                table.append(RemoteRecord.from_airtable(raw_record))
            tables[kind] = table
            logger.info(
                "Fetched existing records from Airtable",
                table=table_name,
                kind=kind.value,
                record_count=len(table),
                duration=round(time.time() - start_time, 2),
            )
        return cls(tables)
