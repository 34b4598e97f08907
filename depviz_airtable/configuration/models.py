"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass, field

from depviz_airtable.synchronize.models import TableKind


@dataclass
class BaseConfig:
    """Configuration class for the depviz Airtable CLI."""

    debug: bool
    airtable_api_url: str
    airtable_token: str
    airtable_base_id: str
    airtable_requests_per_second: float


@dataclass
class AirtableSyncConfig(BaseConfig):
    """Configuration class for the sync command."""

    table_names: dict[TableKind, str]
    destroy_invalid_records: bool
    targets: list[str] = field(default_factory=list)
