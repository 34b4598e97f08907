"""Reconciles configuration between CLI arguments and environment variables."""

import structlog

from depviz_airtable.configuration.env import Settings
from depviz_airtable.configuration.exceptions import InvalidConfigurationElementError, RequiredConfigurationElementError
from depviz_airtable.configuration.models import AirtableSyncConfig
from depviz_airtable.synchronize.models import TableKind

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def reconcile_table_names(
    settings: Settings,
    cli_providers_table_name: str | None = None,
    cli_accounts_table_name: str | None = None,
    cli_repositories_table_name: str | None = None,
    cli_labels_table_name: str | None = None,
    cli_milestones_table_name: str | None = None,
    cli_issues_table_name: str | None = None,
) -> dict[TableKind, str]:
    """Resolve the Airtable table name of every kind, preferring CLI values over environment values."""
    return {
        TableKind.PROVIDER: cli_providers_table_name or settings.AIRTABLE_PROVIDERS_TABLE_NAME,
        TableKind.ACCOUNT: cli_accounts_table_name or settings.AIRTABLE_ACCOUNTS_TABLE_NAME,
        TableKind.REPOSITORY: cli_repositories_table_name or settings.AIRTABLE_REPOSITORIES_TABLE_NAME,
        TableKind.LABEL: cli_labels_table_name or settings.AIRTABLE_LABELS_TABLE_NAME,
        TableKind.MILESTONE: cli_milestones_table_name or settings.AIRTABLE_MILESTONES_TABLE_NAME,
        TableKind.ISSUE: cli_issues_table_name or settings.AIRTABLE_ISSUES_TABLE_NAME,
    }


async def reconcile_airtable_sync_configuration(
    cli_debug: bool | None = None,
    cli_airtable_api_url: str | None = None,
    cli_airtable_token: str | None = None,
    cli_airtable_base_id: str | None = None,
    cli_airtable_requests_per_second: float | None = None,
    cli_airtable_destroy_invalid_records: bool | None = None,
    cli_providers_table_name: str | None = None,
    cli_accounts_table_name: str | None = None,
    cli_repositories_table_name: str | None = None,
    cli_labels_table_name: str | None = None,
    cli_milestones_table_name: str | None = None,
    cli_issues_table_name: str | None = None,
    cli_targets: list[str] | None = None,
    settings: Settings | None = None,
) -> AirtableSyncConfig:
    """Reconcile the sync command configuration.

    Values given on the command line win over environment variables.

    Raises:
        RequiredConfigurationElementError: If the Airtable token or base ID is missing.
        InvalidConfigurationElementError: If the request rate is not a positive number.
    """
    if settings is None:
        settings = Settings()

    airtable_token = cli_airtable_token or settings.AIRTABLE_TOKEN
    if not airtable_token:
        raise RequiredConfigurationElementError(name="Airtable token", cli_name="--airtable-token", env_name="AIRTABLE_TOKEN")

    airtable_base_id = cli_airtable_base_id or settings.AIRTABLE_BASE_ID
    if not airtable_base_id:
        raise RequiredConfigurationElementError(name="Airtable base ID", cli_name="--airtable-base-id", env_name="AIRTABLE_BASE_ID")

    requests_per_second = (
        cli_airtable_requests_per_second if cli_airtable_requests_per_second is not None else settings.AIRTABLE_REQUESTS_PER_SECOND
    )
    if requests_per_second <= 0:
        raise InvalidConfigurationElementError("airtable_requests_per_second", requests_per_second, "must be greater than zero")

    destroy_invalid_records = (
        cli_airtable_destroy_invalid_records
        if cli_airtable_destroy_invalid_records is not None
        else settings.AIRTABLE_DESTROY_INVALID_RECORDS
    )

    table_names = await reconcile_table_names(
        settings,
        cli_providers_table_name=cli_providers_table_name,
        cli_accounts_table_name=cli_accounts_table_name,
        cli_repositories_table_name=cli_repositories_table_name,
        cli_labels_table_name=cli_labels_table_name,
        cli_milestones_table_name=cli_milestones_table_name,
        cli_issues_table_name=cli_issues_table_name,
    )

    config = AirtableSyncConfig(
        debug=cli_debug if cli_debug is not None else settings.DEBUG,
        airtable_api_url=cli_airtable_api_url or settings.AIRTABLE_API_URL,
        airtable_token=airtable_token,
        airtable_base_id=airtable_base_id,
        airtable_requests_per_second=requests_per_second,
        table_names=table_names,
        destroy_invalid_records=destroy_invalid_records,
        targets=list(cli_targets or []),
    )
    logger.debug(
        "Reconciled sync configuration",
        airtable_api_url=config.airtable_api_url,
        airtable_base_id=config.airtable_base_id,
        destroy_invalid_records=config.destroy_invalid_records,
        table_names={kind.value: name for kind, name in table_names.items()},
    )
    return config
