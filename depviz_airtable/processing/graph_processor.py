"""Handles reading and validating dependency graph files.

This module provides the GraphProcessor class, which loads issues from one or more
YAML or JSON files and validates them against the graph schema. It merges issues
from multiple files, logs extra fields, and collects validation errors. All logging
is performed using structlog.
"""

from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from depviz_airtable.processing.exceptions import GraphProcessingError
from depviz_airtable.schemas.graph import GraphYAMLModel, IssueModel
from depviz_airtable.utils.yaml import load_yaml_file

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


class GraphProcessor:
    """Loads and validates the issues of a dependency graph from one or more files.

    Each file must be a mapping with a top-level 'issues' key containing a list of
    issue dictionaries with their related entities embedded.
    """

    def __init__(self, raise_on_error: bool = True) -> None:
        """Initialize GraphProcessor.

        Args:
            raise_on_error (bool): Whether to raise a GraphProcessingError on validation errors.
        """
        self.raise_on_error = raise_on_error

    def load_graph_model(self, graph_paths: list[Path]) -> GraphYAMLModel:
        """Load and validate issues from one or more graph files, returning a GraphYAMLModel."""
        all_issues: list[IssueModel] = []
        errors: list[dict[str, Any]] = []
        for path in graph_paths:
            data = self._load_graph_file(path, errors)
            if data is None:
                continue
            for idx, issue_dict in enumerate(self._extract_issues(data, path, errors)):
                if not isinstance(issue_dict, dict):
                    logger.warning(
                        "Issue entry is not a dict and will be skipped",
                        file=str(path),
                        issue_index=idx,
                        actual_type=type(issue_dict).__name__,
                    )
                    errors.append({"file": str(path), "issue_index": idx, "error": "Issue entry is not a dict"})
                    continue
                extra_fields = set(issue_dict.keys()) - set(IssueModel.model_fields.keys())
                if extra_fields:
                    logger.warning(
                        "Extra fields in issue will be ignored",
                        file=str(path),
                        issue_index=idx,
                        extra_fields=sorted(extra_fields),
                    )
                try:
                    all_issues.append(IssueModel.model_validate(issue_dict))
                except ValidationError as ve:
                    logger.error("Validation error for issue", file=str(path), issue_index=idx, error=ve.errors())
                    errors.append({"file": str(path), "issue_index": idx, "error": ve.errors()})
        if errors:
            logger.error("One or more errors occurred during graph processing", errors=errors)
            if self.raise_on_error:
                raise GraphProcessingError(errors)
        return GraphYAMLModel(issues=all_issues)

    def _load_graph_file(self, path: Path, errors: list[dict[str, Any]]) -> dict[str, Any] | None:
        try:
            data = load_yaml_file(path)
        except Exception as e:
            logger.error("Failed to parse graph file", path=str(path), error=str(e))
            errors.append({"file": str(path), "error": str(e)})
            return None
        if not isinstance(data, dict):
            logger.error("Graph file is not a dictionary", path=str(path))
            errors.append({"file": str(path), "error": "Graph file is not a dictionary"})
            return None
        return data

    def _extract_issues(self, data: dict[str, Any], path: Path, errors: list[dict[str, Any]]) -> list[Any]:
        if "issues" not in data:
            logger.error("Graph file missing top-level 'issues' key", path=str(path))
            errors.append({"file": str(path), "error": "Missing top-level 'issues' key"})
            return []
        issues = data["issues"] or []
        if not isinstance(issues, list):
            logger.error("Top-level 'issues' key is not a list", path=str(path))
            errors.append({"file": str(path), "error": "Top-level 'issues' key is not a list"})
            return []
        return issues
