"""Internal data models of the synchronization engine."""

from enum import Enum


class TableKind(str, Enum):
    """Categories of entities synchronized into Airtable, one table each.

    Declaration order is the dependency order: a kind may only hold links to
    kinds declared before it, so iterating over the enum visits every kind after
    all of the kinds it references.
    """

    PROVIDER = "provider"
    ACCOUNT = "account"
    REPOSITORY = "repository"
    LABEL = "label"
    MILESTONE = "milestone"
    ISSUE = "issue"

    @property
    def rank(self) -> int:
        """Position of the kind in the dependency order."""
        return list(TableKind).index(self)

    @property
    def dependencies(self) -> frozenset["TableKind"]:
        """Kinds this kind may hold links to."""
        return TABLE_KIND_DEPENDENCIES[self]

    @classmethod
    def in_dependency_order(cls) -> list["TableKind"]:
        """Return every kind, referenced kinds first."""
        return list(cls)


TABLE_KIND_DEPENDENCIES: dict[TableKind, frozenset[TableKind]] = {
    TableKind.PROVIDER: frozenset(),
    TableKind.ACCOUNT: frozenset({TableKind.PROVIDER}),
    TableKind.REPOSITORY: frozenset({TableKind.PROVIDER, TableKind.ACCOUNT}),
    TableKind.LABEL: frozenset({TableKind.REPOSITORY}),
    TableKind.MILESTONE: frozenset({TableKind.REPOSITORY, TableKind.ACCOUNT}),
    TableKind.ISSUE: frozenset(
        {TableKind.PROVIDER, TableKind.ACCOUNT, TableKind.REPOSITORY, TableKind.LABEL, TableKind.MILESTONE}
    ),
}


class SyncState(Enum):
    """Synchronization state of a remote record within a run."""

    UNMATCHED = "unmatched"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    NEW = "new"
    DELETED = "deleted"
    SKIPPED = "skipped"

    @property
    def label(self) -> str:
        """Human readable name used in reports."""
        return self.value.capitalize()
