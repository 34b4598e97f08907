"""Custom exceptions for the processing module."""

from typing import Any


class GraphProcessingError(Exception):
    """Raised when errors are encountered during dependency graph processing."""

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__("Errors encountered during dependency graph processing.")
        self.errors = errors


class InvalidTargetError(ValueError):
    """Raised when a target selector cannot be parsed."""

    def __init__(self, target: str) -> None:
        super().__init__(f"Invalid target: {target!r} (expected 'owner', 'owner/repo' or a repository URL)")
        self.target = target
