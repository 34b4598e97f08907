"""Orchestrates the synchronization of the dependency graph into Airtable."""

import time
from pathlib import Path

import structlog

from depviz_airtable.airtable.abc import RecordStoreBase
from depviz_airtable.airtable.adapter import AirtableAdapter
from depviz_airtable.configuration.models import AirtableSyncConfig
from depviz_airtable.processing.exceptions import GraphProcessingError
from depviz_airtable.processing.graph_processor import GraphProcessor
from depviz_airtable.processing.targets import filter_issues_by_targets, parse_targets
from depviz_airtable.synchronize.cache import RemoteCache
from depviz_airtable.synchronize.classify import classify_table
from depviz_airtable.synchronize.features import DesiredSets, build_desired_sets
from depviz_airtable.synchronize.models import SyncState, TableKind
from depviz_airtable.synchronize.records import RecordBuilder
from depviz_airtable.synchronize.results import AirtableSyncResult, RecordSynchronizationResult, TableSynchronizationResult
from depviz_airtable.synchronize.tables import apply_table_changes

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def sync_airtable_tables(
    store: RecordStoreBase,
    desired_sets: DesiredSets,
    table_names: dict[TableKind, str],
    destroy_invalid_records: bool = False,
) -> AirtableSyncResult:
    """Reconcile every table with the desired state.

    All tables are fetched first. Tables are then reconciled one at a time in
    dependency order, so the records created for a table are known before the
    bodies of the tables linking to it are built.

    Raises:
        RemoteFetchError: If any table cannot be fetched.
    """
    cache = await RemoteCache.fetch(store, table_names)
    builder = RecordBuilder(cache)

    table_results: list[TableSynchronizationResult] = []
    for kind in TableKind.in_dependency_order():
        table = cache[kind]
        start_time = time.time()
        logger.info("Synchronizing table", table=table.name, kind=kind.value, desired_count=len(desired_sets.get(kind, {})))

        bodies, unresolved = builder.build_table(kind, desired_sets.get(kind, {}))
        skipped_external_ids = {error.external_id for error in unresolved}
        new_records = await classify_table(table, bodies, skipped_external_ids)
        results = await apply_table_changes(store, table, new_records, destroy_invalid_records)
        for error in unresolved:
            skipped_record = table.get(error.external_id)
            results.append(
                RecordSynchronizationResult(
                    kind,
                    error.external_id,
                    skipped_record.record_id if skipped_record is not None else None,
                    SyncState.SKIPPED,
                    operation="build",
                    error=str(error),
                )
            )

        table_result = TableSynchronizationResult(kind, table.name, results)
        table_results.append(table_result)
        logger.info(
            "Synchronized table",
            table=table.name,
            kind=kind.value,
            duration=round(time.time() - start_time, 2),
            **{state.value: table_result.count(state) for state in SyncState},
            error_count=len(table_result.errors),
        )
    return AirtableSyncResult(table_results)


async def run_airtable_sync_workflow(
    config: AirtableSyncConfig,
    graph_paths: list[Path],
) -> AirtableSyncResult:
    """Run the sync workflow: load the graph, select the targets and reconcile Airtable with it.

    An invalid graph file stops the workflow before Airtable is contacted, since
    synchronizing a partial graph would prune the records of the invalid entries.
    """
    processor = GraphProcessor(raise_on_error=True)
    try:
        graph_model = processor.load_graph_model(graph_paths)
    except GraphProcessingError as e:
        return AirtableSyncResult([], errors=e.errors)

    issues = filter_issues_by_targets(graph_model.issues, parse_targets(config.targets))
    desired_sets = build_desired_sets(issues)

    adapter = await AirtableAdapter.create(
        airtable_token=config.airtable_token,
        airtable_base_id=config.airtable_base_id,
        airtable_api_url=config.airtable_api_url,
        requests_per_second=config.airtable_requests_per_second,
    )
    start_time = time.time()
    logger.info("Synchronizing dependency graph into Airtable", start_time=start_time, issue_count=len(issues))
    try:
        result = await sync_airtable_tables(adapter, desired_sets, config.table_names, config.destroy_invalid_records)
    finally:
        await adapter.aclose()
    end_time = time.time()
    logger.info(
        "Synchronized dependency graph into Airtable",
        start_time=start_time,
        end_time=end_time,
        duration=round(end_time - start_time, 2),
        request_count=adapter.rate_limiter.operation_count,
        error_count=len(result.record_errors),
    )
    return result
