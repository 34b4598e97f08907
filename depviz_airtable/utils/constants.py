"""Shared constants used across the application."""

# Airtable API Constants
# ----------------------

DEFAULT_AIRTABLE_API_URL = "https://api.airtable.com/v0"
"""Default base URL of the Airtable REST API."""

DEFAULT_REQUESTS_PER_SECOND = 5.0
"""Airtable's documented request ceiling per base."""

DEFAULT_REQUEST_TIMEOUT = 30.0
"""Timeout in seconds for a single HTTP request."""

RATE_LIMIT_COOLDOWN = 30.0
"""Airtable asks clients to wait 30 seconds after a 429 response."""

EXTERNAL_ID_FIELD = "ID"
"""Name of the column holding the provider-assigned identifier in every table."""

# Default Table Names
# -------------------

DEFAULT_PROVIDERS_TABLE_NAME = "Providers"
DEFAULT_ACCOUNTS_TABLE_NAME = "Accounts"
DEFAULT_REPOSITORIES_TABLE_NAME = "Repositories"
DEFAULT_LABELS_TABLE_NAME = "Labels"
DEFAULT_MILESTONES_TABLE_NAME = "Milestones"
DEFAULT_ISSUES_TABLE_NAME = "Issues and PRs"
