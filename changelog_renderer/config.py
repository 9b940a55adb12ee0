"""Resolved settings for the CLI commands."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class BaseConfig:
    """Configuration class for the changelog renderer CLI."""

    debug: bool
    config_path: Path | None


@dataclass
class RenderConfig(BaseConfig):
    """Configuration class for the render command."""

    commits_paths: list[Path]
    output_path: Path | None
    prepend_path: Path | None
    unreleased_only: bool
    latest_only: bool
    tag: str | None
