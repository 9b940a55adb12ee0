"""Custom exceptions for the processing module."""

from typing import Any


class CommitInputError(Exception):
    """Raised when errors are encountered while loading commit records."""

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__("Errors encountered while loading commit records.")
        self.errors = errors
