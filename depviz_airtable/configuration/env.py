"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from depviz_airtable.utils.constants import (
    DEFAULT_ACCOUNTS_TABLE_NAME,
    DEFAULT_AIRTABLE_API_URL,
    DEFAULT_ISSUES_TABLE_NAME,
    DEFAULT_LABELS_TABLE_NAME,
    DEFAULT_MILESTONES_TABLE_NAME,
    DEFAULT_PROVIDERS_TABLE_NAME,
    DEFAULT_REPOSITORIES_TABLE_NAME,
    DEFAULT_REQUESTS_PER_SECOND,
)


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(case_sensitive=True)

    # Generic application-wide settings
    DEBUG: bool = False

    # Airtable API settings
    AIRTABLE_API_URL: str = DEFAULT_AIRTABLE_API_URL
    AIRTABLE_TOKEN: str | None = None
    AIRTABLE_BASE_ID: str | None = None
    AIRTABLE_REQUESTS_PER_SECOND: float = DEFAULT_REQUESTS_PER_SECOND
    AIRTABLE_DESTROY_INVALID_RECORDS: bool = False

    # Airtable table names
    AIRTABLE_PROVIDERS_TABLE_NAME: str = DEFAULT_PROVIDERS_TABLE_NAME
    AIRTABLE_ACCOUNTS_TABLE_NAME: str = DEFAULT_ACCOUNTS_TABLE_NAME
    AIRTABLE_REPOSITORIES_TABLE_NAME: str = DEFAULT_REPOSITORIES_TABLE_NAME
    AIRTABLE_LABELS_TABLE_NAME: str = DEFAULT_LABELS_TABLE_NAME
    AIRTABLE_MILESTONES_TABLE_NAME: str = DEFAULT_MILESTONES_TABLE_NAME
    AIRTABLE_ISSUES_TABLE_NAME: str = DEFAULT_ISSUES_TABLE_NAME
