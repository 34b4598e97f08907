"""Contains utility functions for synchronization decisions."""

from typing import Any


async def value_is_noney(value: Any) -> bool:
    """Check if a value is one Airtable stores as an empty cell.

    Airtable leaves empty cells out of API responses, and an unchecked checkbox is
    an empty cell too, so None, False, and empty strings, lists and dicts are all
    equivalent.
    """
    if value is None or value is False:
        return True
    elif isinstance(value, list) and value == []:
        return True
    elif isinstance(value, str) and value == "":
        return True
    elif isinstance(value, dict) and not value:
        return True
    return False


async def field_values_equal(desired_value: Any, remote_value: Any) -> bool:
    """Compare a desired field value with the value stored in Airtable."""
    desired_value_is_noney = await value_is_noney(desired_value)
    remote_value_is_noney = await value_is_noney(remote_value)
    if desired_value_is_noney or remote_value_is_noney:
        return desired_value_is_noney and remote_value_is_noney
    return bool(desired_value == remote_value)


async def changed_fields(desired_fields: dict[str, Any], remote_fields: dict[str, Any]) -> list[str]:
    """Return the names of the synchronized fields whose remote value differs.

    Only the fields present in ``desired_fields`` are compared; columns maintained
    by Airtable itself (formulas, created time, ...) are ignored.
    """
    return [name for name, desired_value in desired_fields.items() if not await field_values_equal(desired_value, remote_fields.get(name))]


def omit_null_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Omit fields that are None."""
    return {k: v for k, v in fields.items() if v is not None}
