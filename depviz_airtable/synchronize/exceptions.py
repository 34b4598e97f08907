"""Custom exceptions for the synchronize module."""

from depviz_airtable.synchronize.models import TableKind


class RemoteFetchError(Exception):
    """Raised when the records of a table cannot be fetched.

    Without the complete remote state of every table no reconciliation can take place,
    so this error aborts the run.
    """

    def __init__(self, kind: TableKind, table_name: str) -> None:
        super().__init__(f"Failed to fetch records of table {table_name!r} ({kind.value})")
        self.kind = kind
        self.table_name = table_name


class UnresolvedReferenceError(Exception):
    """Raised when a reference cannot be resolved to a remote record ID."""

    def __init__(self, kind: TableKind, external_id: str, referenced_kind: TableKind, referenced_external_id: str) -> None:
        super().__init__(
            f"{kind.value} {external_id!r} references {referenced_kind.value} {referenced_external_id!r} which has no remote record"
        )
        self.kind = kind
        self.external_id = external_id
        self.referenced_kind = referenced_kind
        self.referenced_external_id = referenced_external_id


class ReferenceOrderError(Exception):
    """Raised when a kind declares a link to a kind that is not ordered before it."""

    def __init__(self, kind: TableKind, referenced_kind: TableKind) -> None:
        super().__init__(f"{kind.value} records cannot link to {referenced_kind.value} records")
        self.kind = kind
        self.referenced_kind = referenced_kind
