"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio

from depviz_airtable.configuration import reconcile
from depviz_airtable.configuration.models import AirtableSyncConfig


def get_airtable_sync_config(
    debug: bool | None = None,
    airtable_api_url: str | None = None,
    airtable_token: str | None = None,
    airtable_base_id: str | None = None,
    airtable_requests_per_second: float | None = None,
    airtable_destroy_invalid_records: bool | None = None,
    providers_table_name: str | None = None,
    accounts_table_name: str | None = None,
    repositories_table_name: str | None = None,
    labels_table_name: str | None = None,
    milestones_table_name: str | None = None,
    issues_table_name: str | None = None,
    targets: list[str] | None = None,
) -> AirtableSyncConfig:
    """Synchronously get the reconciled sync configuration."""
    return asyncio.run(
        reconcile.reconcile_airtable_sync_configuration(
            cli_debug=debug,
            cli_airtable_api_url=airtable_api_url,
            cli_airtable_token=airtable_token,
            cli_airtable_base_id=airtable_base_id,
            cli_airtable_requests_per_second=airtable_requests_per_second,
            cli_airtable_destroy_invalid_records=airtable_destroy_invalid_records,
            cli_providers_table_name=providers_table_name,
            cli_accounts_table_name=accounts_table_name,
            cli_repositories_table_name=repositories_table_name,
            cli_labels_table_name=labels_table_name,
            cli_milestones_table_name=milestones_table_name,
            cli_issues_table_name=issues_table_name,
            cli_targets=targets,
        )
    )
