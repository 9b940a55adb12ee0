"""Pydantic models for the declarative changelog configuration."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from changelog_renderer.configuration.exceptions import ParserPatternError
from changelog_renderer.utils.constants import (
    DEFAULT_BODY,
    DEFAULT_COMMIT_PARSERS,
    DEFAULT_FOOTER,
    DEFAULT_HEADER,
    DEFAULT_LINK_PARSERS,
)


def compile_pattern(value: Any) -> re.Pattern[str]:
    """Compile a configured regular expression, raising ParserPatternError on failure."""
    if isinstance(value, re.Pattern):
        return value
    try:
        return re.compile(value)
    except re.error as exc:
        raise ParserPatternError(str(value), str(exc)) from exc


class SortOrder(str, Enum):
    """Order of commits inside a release."""

    OLDEST = "oldest"
    NEWEST = "newest"


class TextProcessor(BaseModel):
    """Regex substitution applied to commit messages or rendered output."""

    model_config = ConfigDict(extra="ignore")

    pattern: re.Pattern[str]
    replace: str = ""

    @field_validator("pattern", mode="before")
    @classmethod
    def _compile_pattern(cls, value: Any) -> re.Pattern[str]:
        return compile_pattern(value)


class CommitParserRule(BaseModel):
    """Ordered commit classification rule; the first matching rule wins."""

    model_config = ConfigDict(extra="ignore")

    message: re.Pattern[str]
    group: str | None = None
    default_scope: str | None = None
    scope: str | None = None
    skip: bool = False

    @field_validator("message", mode="before")
    @classmethod
    def _compile_message(cls, value: Any) -> re.Pattern[str]:
        return compile_pattern(value)


class LinkParserRule(BaseModel):
    """Rewrites substrings of commit messages (e.g. issue references) into links."""

    model_config = ConfigDict(extra="ignore")

    pattern: re.Pattern[str]
    href: str
    text: str | None = None

    @field_validator("pattern", mode="before")
    @classmethod
    def _compile_pattern(cls, value: Any) -> re.Pattern[str]:
        return compile_pattern(value)


class ChangelogConfig(BaseModel):
    """The [changelog] table: templates and output post-processing."""

    model_config = ConfigDict(extra="ignore")

    header: str = DEFAULT_HEADER
    body: str = DEFAULT_BODY
    footer: str = DEFAULT_FOOTER
    trim: bool = True
    postprocessors: list[TextProcessor] = Field(default_factory=list)

    @field_validator("header", "footer", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class GitConfig(BaseModel):
    """The [git] table: commit parsing, filtering and ordering options."""

    model_config = ConfigDict(extra="ignore")

    conventional_commits: bool = True
    filter_unconventional: bool = False
    split_commits: bool = False
    commit_preprocessors: list[TextProcessor] = Field(default_factory=list)
    commit_parsers: list[CommitParserRule] = Field(default_factory=list)
    protect_breaking_commits: bool = False
    filter_commits: bool = False
    ignore_tags: re.Pattern[str] | None = None
    topo_order: bool = False
    sort_commits: SortOrder = SortOrder.OLDEST
    link_parsers: list[LinkParserRule] = Field(default_factory=list)

    @field_validator("ignore_tags", mode="before")
    @classmethod
    def _compile_ignore_tags(cls, value: Any) -> re.Pattern[str] | None:
        if value is None or value == "":
            return None
        return compile_pattern(value)


class Config(BaseModel):
    """Complete changelog configuration."""

    model_config = ConfigDict(extra="ignore")

    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    git: GitConfig = Field(default_factory=GitConfig)


def default_config() -> Config:
    """Return the built-in configuration used when no config file is given."""
    return Config(
        changelog=ChangelogConfig(),
        git=GitConfig.model_validate(
            {
                "commit_parsers": DEFAULT_COMMIT_PARSERS,
                "link_parsers": DEFAULT_LINK_PARSERS,
            }
        ),
    )
