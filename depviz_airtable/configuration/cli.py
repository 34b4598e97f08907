"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from depviz_airtable.configuration.driver import get_airtable_sync_config
from depviz_airtable.configuration.exceptions import InvalidConfigurationElementError, RequiredConfigurationElementError
from depviz_airtable.processing.exceptions import InvalidTargetError
from depviz_airtable.synchronize.driver import run_airtable_sync_workflow
from depviz_airtable.synchronize.exceptions import RemoteFetchError
from depviz_airtable.utils.log import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Synchronize a depviz dependency graph into Airtable.")


@typer_app.callback()
def main_callback() -> None:
    """Synchronize a depviz dependency graph into Airtable."""


@typer_app.command(name="sync")
def sync_cli(
    graph_path: Annotated[Path, Argument(envvar="GRAPH_PATH", help="Path to the YAML or JSON dependency graph file.")],
    targets: Annotated[list[str] | None, Argument(help="Targets to synchronize ('owner', 'owner/repo' or a repository URL).")] = None,
    airtable_token: Annotated[str | None, Option(envvar="AIRTABLE_TOKEN", help="Airtable token.")] = None,
    airtable_base_id: Annotated[str | None, Option(envvar="AIRTABLE_BASE_ID", help="Airtable base ID.")] = None,
    airtable_api_url: Annotated[str | None, Option(envvar="AIRTABLE_API_URL", help="Airtable API URL.")] = None,
    airtable_requests_per_second: Annotated[
        float | None, Option(envvar="AIRTABLE_REQUESTS_PER_SECOND", help="Maximum number of Airtable requests per second.")
    ] = None,
    airtable_destroy_invalid_records: Annotated[
        bool, Option(envvar="AIRTABLE_DESTROY_INVALID_RECORDS", help="Delete Airtable records that are not part of the graph.")
    ] = False,
    airtable_providers_table_name: Annotated[
        str | None, Option(envvar="AIRTABLE_PROVIDERS_TABLE_NAME", help="Airtable providers table name.")
    ] = None,
    airtable_accounts_table_name: Annotated[str | None, Option(envvar="AIRTABLE_ACCOUNTS_TABLE_NAME", help="Airtable accounts table name.")] = None,
    airtable_repositories_table_name: Annotated[
        str | None, Option(envvar="AIRTABLE_REPOSITORIES_TABLE_NAME", help="Airtable repositories table name.")
    ] = None,
    airtable_labels_table_name: Annotated[str | None, Option(envvar="AIRTABLE_LABELS_TABLE_NAME", help="Airtable labels table name.")] = None,
    airtable_milestones_table_name: Annotated[
        str | None, Option(envvar="AIRTABLE_MILESTONES_TABLE_NAME", help="Airtable milestones table name.")
    ] = None,
    airtable_issues_table_name: Annotated[str | None, Option(envvar="AIRTABLE_ISSUES_TABLE_NAME", help="Airtable issues table name.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Synchronizes the issues of a dependency graph, and everything they reference, into Airtable tables.

    Records that are no longer part of the graph are only reported unless
    --airtable-destroy-invalid-records is given.
    """
    configure_logging(debug)
    try:
        config = get_airtable_sync_config(
            debug=debug or None,
            airtable_api_url=airtable_api_url,
            airtable_token=airtable_token,
            airtable_base_id=airtable_base_id,
            airtable_requests_per_second=airtable_requests_per_second,
            airtable_destroy_invalid_records=airtable_destroy_invalid_records or None,
            providers_table_name=airtable_providers_table_name,
            accounts_table_name=airtable_accounts_table_name,
            repositories_table_name=airtable_repositories_table_name,
            labels_table_name=airtable_labels_table_name,
            milestones_table_name=airtable_milestones_table_name,
            issues_table_name=airtable_issues_table_name,
            targets=targets,
        )
    except (RequiredConfigurationElementError, InvalidConfigurationElementError) as e:
        typer.echo(str(e), err=True)
        sys.exit(1)

    if not graph_path.exists():
        typer.echo(f"Dependency graph file not found: {graph_path.absolute()}", err=True)
        sys.exit(1)

    if config.destroy_invalid_records:
        typer.echo("Destroying invalid records is enabled - Airtable records missing from the graph will be deleted")

    try:
        result = asyncio.run(run_airtable_sync_workflow(config, [graph_path]))
    except InvalidTargetError as e:
        typer.echo(str(e), err=True)
        sys.exit(1)
    except RemoteFetchError as e:
        typer.echo(f"{e}: {e.__cause__}", err=True)
        sys.exit(1)

    if result.errors:
        typer.echo("Error(s) encountered while processing the dependency graph:", err=True)
        for err in result.errors:
            typer.echo(str(err), err=True)
        sys.exit(1)

    for line in result.report_lines():
        typer.echo(line)

    if result.record_errors:
        typer.echo(f"{len(result.record_errors)} record(s) could not be synchronized:", err=True)
        for err in result.record_errors:
            typer.echo(str(err), err=True)
