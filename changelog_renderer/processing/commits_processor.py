"""Handles reading commit records from YAML or JSON input files.

This module provides the CommitsProcessor class, which loads commit records
written by an external version-control log reader and validates them against
the Commit model. It supports merging commits from multiple files, logging
extra fields, and collecting validation errors. All logging is performed using
structlog.
"""

from typing import Any

import structlog
from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from changelog_renderer.processing.exceptions import CommitInputError
from changelog_renderer.processing.models import Commit
from changelog_renderer.utils.yaml import load_yaml_file

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore

INPUT_FIELDS = {"id", "message", "scope", "breaking", "timestamp", "tag", "author"}


class CommitsProcessor:
    """Loads and validates commit records from one or more YAML/JSON files.

    Each file is expected to have a top-level 'commits' key containing a list
    of commit dictionaries, oldest first.
    """

    def __init__(self, raise_on_error: bool = True) -> None:
        """Initialize CommitsProcessor.

        Args:
            raise_on_error (bool): Whether to raise a CommitInputError on validation errors.
        """
        self.raise_on_error = raise_on_error

    def load_commits(self, paths: list[str]) -> list[Commit]:
        """Load and validate commits from one or more files, in file order."""
        commits: list[Commit] = []
        errors: list[dict[str, Any]] = []
        for path in paths:
            data = self._load_file(path, errors)
            if data is None:
                continue
            for idx, entry in enumerate(self._extract_commits(data, path, errors)):
                if not isinstance(entry, dict):
                    logger.warning(
                        "Commit entry is not a dict and will be skipped",
                        file=path,
                        commit_index=idx,
                        actual_type=type(entry).__name__,
                    )
                    errors.append({"file": path, "commit_index": idx, "error": "Commit entry is not a dict"})
                    continue
                extra_fields = set(entry.keys()) - INPUT_FIELDS
                if extra_fields:
                    logger.warning(
                        "Extra fields in commit will be ignored",
                        file=path,
                        commit_index=idx,
                        extra_fields=sorted(extra_fields),
                    )
                filtered = {k: v for k, v in entry.items() if k in INPUT_FIELDS}
                if filtered.get("id") is not None:
                    filtered["id"] = str(filtered["id"])
                try:
                    commits.append(Commit(**filtered))
                except ValidationError as ve:
                    logger.error(
                        "Validation error for commit",
                        file=path,
                        commit_index=idx,
                        error=ve.errors(include_url=False),
                    )
                    errors.append({"file": path, "commit_index": idx, "error": ve.errors(include_url=False)})
        if errors:
            logger.error("One or more errors occurred while loading commits", errors=errors)
            if self.raise_on_error:
                raise CommitInputError(errors)
        logger.info("Loaded commits", count=len(commits), files=len(paths))
        return commits

    def _load_file(self, path: str, errors: list[dict[str, Any]]) -> dict[str, Any] | None:
        try:
            data = load_yaml_file(path)
        except Exception as e:
            logger.error("Failed to parse commits file", path=path, error=str(e))
            errors.append({"file": path, "error": str(e)})
            return None
        if not isinstance(data, dict):
            logger.error("Commits file is not a dictionary", path=path)
            errors.append({"file": path, "error": "Commits file is not a dictionary"})
            return None
        return data

    def _extract_commits(self, data: dict[str, Any], path: str, errors: list[dict[str, Any]]) -> list[Any]:
        if "commits" not in data:
            logger.error("Commits file missing top-level 'commits' key", path=path)
            errors.append({"file": path, "error": "Missing top-level 'commits' key"})
            return []
        commits = data["commits"]
        if commits is None:
            return []
        if not isinstance(commits, list):
            logger.error("Top-level 'commits' key is not a list", path=path)
            errors.append({"file": path, "error": "Top-level 'commits' key is not a list"})
            return []
        return commits
