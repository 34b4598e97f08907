"""Unit tests for the retry decorator."""

from typing import Any, Awaitable, Callable
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from depviz_airtable.utils.retry import RATE_LIMIT_STATUS_CODES, retry_on_rate_limit


def status_error(status_code: int, headers: dict[str, str] | None = None) -> httpx.HTTPStatusError:
    """Build the error raised by raise_for_status for the given status."""
    request = httpx.Request("GET", "https://api.airtable.com/v0/appBase/Accounts")
    response = httpx.Response(status_code, headers=headers, request=request)
    return httpx.HTTPStatusError(f"status {status_code}", request=request, response=response)


def scripted(*outcomes: Any) -> tuple[Callable[[], Awaitable[Any]], list[int]]:
    """Return a coroutine function raising or returning the outcomes in turn, and its call log."""
    calls: list[int] = []

    async def list_records() -> Any:
        calls.append(len(calls))
        outcome = outcomes[min(len(calls), len(outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return list_records, calls


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [429, 502, 503, 504])
async def test_retries_transient_errors(status_code: int) -> None:
    """Rate limits and gateway errors are retried with exponential backoff."""
    func, calls = scripted(status_error(status_code), status_error(status_code), "ok")

    with patch("depviz_airtable.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        result = await retry_on_rate_limit(initial_delay=1.0)(func)()

    assert result == "ok"
    assert len(calls) == 3
    assert [call.args[0] for call in mock_sleep.await_args_list] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_uses_retry_after_header() -> None:
    """The delay requested by the server wins over the backoff delay."""
    func, _ = scripted(status_error(429, {"retry-after": "7"}), "ok")

    with patch("depviz_airtable.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await retry_on_rate_limit()(func)()

    mock_sleep.assert_awaited_once_with(7.0)


@pytest.mark.asyncio
async def test_reraises_after_max_retries() -> None:
    """The last error is raised once the retries are exhausted."""
    func, calls = scripted(status_error(429))

    with patch("depviz_airtable.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        with pytest.raises(httpx.HTTPStatusError):
            await retry_on_rate_limit(max_retries=2, initial_delay=1.0, max_delay=1.5)(func)()

    assert len(calls) == 3
    assert [call.args[0] for call in mock_sleep.await_args_list] == [1.0, 1.5]


@pytest.mark.asyncio
async def test_does_not_retry_client_errors() -> None:
    """Other HTTP errors are raised on the first attempt."""
    func, calls = scripted(status_error(403))

    with pytest.raises(httpx.HTTPStatusError):
        await retry_on_rate_limit()(func)()

    assert len(calls) == 1


def test_rejects_sync_functions() -> None:
    """Only coroutine functions can be decorated."""

    @retry_on_rate_limit()
    def sync_func() -> str:
        return "ok"

    with pytest.raises(RuntimeError):
        sync_func()


@pytest.mark.asyncio
async def test_restricted_status_codes() -> None:
    """Statuses outside the configured set are raised on the first attempt."""
    func, calls = scripted(status_error(504), "ok")

    with patch("depviz_airtable.utils.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        with pytest.raises(httpx.HTTPStatusError):
            await retry_on_rate_limit(retryable_status_codes=RATE_LIMIT_STATUS_CODES)(func)()

    assert len(calls) == 1
    mock_sleep.assert_not_awaited()
