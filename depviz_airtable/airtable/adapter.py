"""Airtable REST API adapter built on httpx."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar
from urllib.parse import quote

import httpx
import structlog

from depviz_airtable.utils.constants import DEFAULT_AIRTABLE_API_URL, DEFAULT_REQUESTS_PER_SECOND
from depviz_airtable.utils.rate_limit import RateLimiter
from depviz_airtable.utils.retry import RATE_LIMIT_STATUS_CODES, retry_on_rate_limit

from .abc import RecordStoreBase
from .client import get_airtable_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

PAGE_SIZE = 100


def handle_airtable_422(func: F) -> F:
    """Decorator to handle Airtable 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 422:
                try:
                    error_data = exc.response.json().get("error", {})
                except ValueError:
                    error_data = {}
                if isinstance(error_data, str):
                    error_data = {"type": error_data}
                error_type = error_data.get("type", "UNPROCESSABLE_ENTITY")
                message = error_data.get("message", "Unprocessable Entity")
                logger.error(
                    "Airtable 422 Unprocessable Entity",
                    function=func.__name__,
                    error_type=error_type,
                    message=message,
                    url=str(exc.request.url),
                    status_code=422,
                )
                raise ValueError(f"Airtable 422 error in {func.__name__}: {error_type}: {message} | url: {exc.request.url}") from exc
            raise

    return wrapper  # type: ignore


class AirtableAdapter(RecordStoreBase):
    """Record store adapter for one Airtable base."""

    def __init__(self, client: httpx.AsyncClient, rate_limiter: RateLimiter | None = None) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.rate_limiter = rate_limiter or RateLimiter()

    @classmethod
    async def create(
        cls,
        airtable_token: str,
        airtable_base_id: str,
        airtable_api_url: str = DEFAULT_AIRTABLE_API_URL,
        requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND,
    ) -> Self:
        """Create a new Airtable adapter.

        Args:
            airtable_token: Personal access token or API key
            airtable_base_id: ID of the base holding the tables
            airtable_api_url: Airtable API URL (defaults to https://api.airtable.com/v0)
            requests_per_second: Maximum number of requests started per second

        Returns:
            Configured AirtableAdapter instance
        """
        logger.info(
            "Creating client for Airtable base",
            airtable_api_url=airtable_api_url,
            airtable_base_id=airtable_base_id,
            requests_per_second=requests_per_second,
        )
        client = await get_airtable_client(
            airtable_token=airtable_token,
            airtable_base_id=airtable_base_id,
            airtable_api_url=airtable_api_url,
        )
        return cls(client, RateLimiter(requests_per_second))

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    @staticmethod
    def _table_path(table_name: str, record_id: str | None = None) -> str:
        path = quote(table_name, safe="")
        if record_id is not None:
            path = f"{path}/{quote(record_id, safe='')}"
        return path

    async def _send(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        await self.rate_limiter.acquire()
        response = await self.client.request(method, path, **kwargs)
        response.raise_for_status()
        return response.json()  # type: ignore[no-any-return]

    @retry_on_rate_limit()
    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        return await self._send(method, path, **kwargs)

    # Only rate limits are retried: a gateway error may follow a completed write.
    @retry_on_rate_limit(retryable_status_codes=RATE_LIMIT_STATUS_CODES)
    async def _request_non_idempotent(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        return await self._send(method, path, **kwargs)

    # Record CRUD
    async def list_records(self, table_name: str) -> list[dict[str, Any]]:
        """List every record of a table, following pagination offsets."""
        records: list[dict[str, Any]] = []
        params: dict[str, Any] = {"pageSize": PAGE_SIZE}
        while True:
            page = await self._request("GET", self._table_path(table_name), params=params)
            records.extend(page.get("records", []))
            offset = page.get("offset")
            if not offset:
                break
            params = {"pageSize": PAGE_SIZE, "offset": offset}
        logger.debug("Listed Airtable records", table=table_name, record_count=len(records))
        return records

    @handle_airtable_422
    async def create_record(self, table_name: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Create a record and return it with its assigned record ID."""
        return await self._request_non_idempotent("POST", self._table_path(table_name), json={"fields": fields})

    @handle_airtable_422
    async def update_record(self, table_name: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Update the given fields of a record, leaving other fields untouched."""
        return await self._request("PATCH", self._table_path(table_name, record_id), json={"fields": fields})

    async def delete_record(self, table_name: str, record_id: str) -> None:
        """Delete a record."""
        await self._request("DELETE", self._table_path(table_name, record_id))
