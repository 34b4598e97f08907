"""Base ABC for remote record stores."""

from abc import ABC, abstractmethod
from typing import Any


class RecordStoreBase(ABC):
    """Base ABC for tabular record stores.

    Records are plain dictionaries shaped like Airtable records:
    ``{"id": <record id>, "fields": {<field name>: <value>}}``.
    """

    @abstractmethod
    async def list_records(self, table_name: str) -> list[dict[str, Any]]:
        """List every record of a table."""
        pass

    @abstractmethod
    async def create_record(self, table_name: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Create a record and return it with its assigned record ID."""
        pass

    @abstractmethod
    async def update_record(self, table_name: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Update the given fields of a record."""
        pass

    @abstractmethod
    async def delete_record(self, table_name: str, record_id: str) -> None:
        """Delete a record."""
        pass
