"""Fixtures for unit tests."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog

from changelog_renderer.configuration.models import Config, default_config
from changelog_renderer.processing.models import Commit

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding configuration and commit fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def config() -> Config:
    """The built-in default configuration."""
    return default_config()


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory for commit records with sensible defaults."""
    counter = {"value": 0}

    def _make_commit(message: str, **kwargs: object) -> Commit:
        counter["value"] += 1
        defaults: dict[str, object] = {
            "id": f"{counter['value']:07d}" + "f" * 33,
            "timestamp": datetime(2024, 1, counter["value"] % 28 + 1, tzinfo=timezone.utc),
        }
        defaults.update(kwargs)
        return Commit(message=message, **defaults)  # type: ignore[arg-type]

    return _make_commit
