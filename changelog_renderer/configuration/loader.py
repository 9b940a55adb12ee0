"""Loads the changelog configuration from TOML or YAML files.

Configuration files follow the `cliff.toml` layout: a `[changelog]` table with
the header, body and footer templates, and a `[git]` table with the commit
parsing options. YAML files use the same two top-level keys. All values are
validated by the Pydantic models in `changelog_renderer.configuration.models`,
so regular expressions that do not compile fail here, at load time.
"""

import tomllib
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError
from structlog.stdlib import BoundLogger

from changelog_renderer.configuration.exceptions import ConfigurationLoadError
from changelog_renderer.configuration.models import ChangelogConfig, Config, GitConfig, default_config
from changelog_renderer.utils.constants import DEFAULT_CONFIG_FILENAMES
from changelog_renderer.utils.yaml import load_yaml_file

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore

TOML_SUFFIXES = {".toml"}
YAML_SUFFIXES = {".yaml", ".yml", ".json"}


def find_config_file(directory: Path) -> Path | None:
    """Return the first well-known config file present in a directory."""
    for filename in DEFAULT_CONFIG_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Read the raw configuration mapping from a TOML or YAML file."""
    suffix = path.suffix.lower()
    try:
        if suffix in TOML_SUFFIXES:
            with open(path, "rb") as f:
                data: Any = tomllib.load(f)
        elif suffix in YAML_SUFFIXES:
            data = load_yaml_file(path)
        else:
            raise ConfigurationLoadError(path, f"Unsupported configuration file type '{suffix}'")
    except (OSError, tomllib.TOMLDecodeError, YAMLError) as exc:
        logger.error("Failed to parse configuration file", path=str(path), error=str(exc))
        raise ConfigurationLoadError(path, str(exc)) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.error("Configuration file is not a mapping", path=str(path))
        raise ConfigurationLoadError(path, "Configuration file is not a mapping")
    return data


def warn_unknown_keys(data: dict[str, Any], path: Path) -> None:
    """Log a warning for every configuration key that will be ignored."""
    known_sections = {"changelog": ChangelogConfig, "git": GitConfig}
    for section, value in data.items():
        if section not in known_sections:
            logger.warning("Unknown configuration section will be ignored", path=str(path), section=section)
            continue
        if not isinstance(value, dict):
            continue
        extra_fields = set(value.keys()) - set(known_sections[section].model_fields.keys())
        if extra_fields:
            logger.warning(
                "Unknown configuration keys will be ignored",
                path=str(path),
                section=section,
                extra_fields=sorted(extra_fields),
            )


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate a configuration file.

    Args:
        path: Path to a TOML or YAML configuration file. When None, the
            built-in default configuration is returned.

    Raises:
        ConfigurationLoadError: If the file cannot be read or parsed, or if
            any option (including a regular expression) is invalid.

    Returns:
        The validated configuration.
    """
    if path is None:
        logger.debug("No configuration file given, using built-in defaults")
        return default_config()

    path = Path(path)
    if not path.is_file():
        raise ConfigurationLoadError(path, "File not found")

    data = read_config_data(path)
    warn_unknown_keys(data, path)
    try:
        config = Config.model_validate(data)
    except ValidationError as exc:
        logger.error("Invalid configuration", path=str(path), errors=exc.errors(include_url=False))
        raise ConfigurationLoadError(path, str(exc), errors=exc.errors(include_url=False)) from exc  # type: ignore[arg-type]

    logger.info(
        "Loaded configuration",
        path=str(path),
        commit_parsers=len(config.git.commit_parsers),
        link_parsers=len(config.git.link_parsers),
    )
    return config
