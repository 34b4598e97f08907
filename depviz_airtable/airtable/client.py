"""Sets up the authenticated httpx client for the Airtable REST API."""

import httpx

from depviz_airtable.utils.constants import DEFAULT_AIRTABLE_API_URL, DEFAULT_REQUEST_TIMEOUT


async def get_airtable_client(
    airtable_token: str,
    airtable_base_id: str,
    airtable_api_url: str = DEFAULT_AIRTABLE_API_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> httpx.AsyncClient:
    """Returns an HTTP client authenticated against one Airtable base.

    Request paths are relative to the base, e.g. ``"Accounts"`` or ``"Accounts/rec123"``.
    Raises RuntimeError if the token or base ID is missing.
    """
    if not airtable_token:
        raise RuntimeError("Airtable authentication requires airtable_token in config.")
    if not airtable_base_id:
        raise RuntimeError("Airtable authentication requires airtable_base_id in config.")
    return httpx.AsyncClient(
        base_url=f"{airtable_api_url.rstrip('/')}/{airtable_base_id}/",
        headers={"Authorization": f"Bearer {airtable_token}"},
        timeout=httpx.Timeout(timeout, connect=10.0),
    )
