"""Contains results of application execution."""

from typing import Any

from depviz_airtable.synchronize.models import SyncState, TableKind


class RecordSynchronizationResult:
    """Contains the final state of one record after synchronization."""

    def __init__(
        self,
        kind: TableKind,
        external_id: str | None,
        record_id: str | None,
        state: SyncState,
        operation: str | None = None,
        error: str | None = None,
    ) -> None:
        """Initialize the result with the record identity, its final state and the failed operation's error, if any."""
        self.kind = kind
        self.external_id = external_id
        self.record_id = record_id
        self.state = state
        self.operation = operation
        self.error = error

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_error(self, table_name: str) -> dict[str, Any]:
        """Describe a failed result the way errors are reported."""
        return {
            "table": table_name,
            "kind": self.kind.value,
            "external_id": self.external_id,
            "record_id": self.record_id,
            "operation": self.operation,
            "error": self.error,
        }


class TableSynchronizationResult:
    """Contains results of the synchronization of one table."""

    def __init__(self, kind: TableKind, table_name: str, results: list[RecordSynchronizationResult]) -> None:
        """Initialize the result with the table identity and the per-record results."""
        self.kind = kind
        self.table_name = table_name
        self.results = results

    def count(self, state: SyncState) -> int:
        """Number of records that ended in the given state."""
        return sum(1 for result in self.results if result.state == state)

    @property
    def errors(self) -> list[dict[str, Any]]:
        return [result.to_error(self.table_name) for result in self.results if result.failed]


class AirtableSyncResult:
    """Contains results of the sync workflow.

    ``errors`` holds the errors that prevented the run from starting (e.g. an invalid
    graph file); per-record failures are available through ``record_errors``.
    """

    def __init__(self, table_results: list[TableSynchronizationResult], errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize the result with per-table results and errors."""
        self.table_results = table_results
        self.errors = errors or []

    @property
    def record_errors(self) -> list[dict[str, Any]]:
        return [error for table_result in self.table_results for error in table_result.errors]

    def report_lines(self) -> list[str]:
        """Render a human readable per-table, per-record report."""
        lines: list[str] = []
        for table_result in self.table_results:
            lines.append(f"------- {table_result.table_name}")
            for result in table_result.results:
                state = result.state.label if not result.failed else f"{result.state.label} (failed {result.operation})"
                lines.append(f"{result.record_id or '-'} {state} {result.external_id or '-'}")
        lines.append("-------")
        return lines
