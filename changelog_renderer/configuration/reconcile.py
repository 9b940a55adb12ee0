"""Reconciles configuration between CLI arguments and environment variables."""

from pathlib import Path

import structlog
from structlog.stdlib import BoundLogger

from changelog_renderer.config import RenderConfig
from changelog_renderer.configuration.env import Settings
from changelog_renderer.configuration.exceptions import ConflictingOptionsError
from changelog_renderer.configuration.loader import find_config_file

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


def reconcile_config_path(cli_config_path: Path | None, settings: Settings, search_directory: Path | None = None) -> Path | None:
    """Resolve the configuration file path.

    The command line option wins over the CHANGELOG_CONFIG environment
    variable. When neither is set, well-known file names are looked up in the
    search directory (the working directory by default). None means the
    built-in default configuration.
    """
    if cli_config_path is not None:
        return cli_config_path
    if settings.CHANGELOG_CONFIG is not None:
        return settings.CHANGELOG_CONFIG
    found = find_config_file(search_directory or Path.cwd())
    if found is not None:
        logger.debug("Found configuration file", path=str(found))
    return found


def reconcile_render_configuration(
    cli_commits_paths: list[Path],
    cli_debug: bool = False,
    cli_config_path: Path | None = None,
    cli_output_path: Path | None = None,
    cli_prepend_path: Path | None = None,
    cli_unreleased_only: bool = False,
    cli_latest_only: bool = False,
    cli_tag: str | None = None,
    search_directory: Path | None = None,
) -> RenderConfig:
    """Reconcile the render command configuration.

    Raises:
        ConflictingOptionsError: If both --unreleased and --latest are given.
    """
    if cli_unreleased_only and cli_latest_only:
        raise ConflictingOptionsError("--unreleased", "--latest")

    settings = Settings()
    return RenderConfig(
        debug=cli_debug or settings.DEBUG,
        config_path=reconcile_config_path(cli_config_path, settings, search_directory),
        commits_paths=cli_commits_paths,
        output_path=cli_output_path if cli_output_path is not None else settings.CHANGELOG_OUTPUT,
        prepend_path=cli_prepend_path,
        unreleased_only=cli_unreleased_only,
        latest_only=cli_latest_only,
        tag=cli_tag,
    )
