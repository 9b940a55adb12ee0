"""Contains exceptions raised when loading changelog configuration."""

from pathlib import Path
from typing import Any


class ParserPatternError(ValueError):
    """Raised when a configured regular expression fails to compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initializes the exception with the offending pattern."""
        super().__init__(f"Invalid regular expression {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class ConfigurationLoadError(Exception):
    """Raised when a configuration file cannot be read, parsed or validated."""

    def __init__(self, path: Path | str, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        """Initializes the exception with the config path and validation errors."""
        super().__init__(f"Failed to load configuration from {path}: {message}")
        self.path = path
        self.errors = errors or []


class ConflictingOptionsError(Exception):
    """Raised when mutually exclusive options are given together."""

    def __init__(self, first: str, second: str) -> None:
        """Initializes the exception with the names of the conflicting options."""
        super().__init__(f"Options {first} and {second} cannot be used together")
        self.first = first
        self.second = second
