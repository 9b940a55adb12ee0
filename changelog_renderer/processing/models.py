"""Data models for commits and releases."""

from datetime import datetime

from pydantic import BaseModel, Field

from changelog_renderer.utils.constants import SHORT_ID_LENGTH


class Link(BaseModel):
    """Hyperlink extracted from a commit message by a link parser."""

    text: str
    href: str


class Footer(BaseModel):
    """Conventional commit footer (e.g. `Refs: #123`)."""

    token: str
    separator: str
    value: str
    breaking: bool = False


class Commit(BaseModel):
    """Commit record consumed by the changelog renderer.

    Records are produced by an external version-control log reader. `group`,
    `links`, `conventional`, `body` and `footers` are derived during
    classification; `raw_message` keeps the message as it was received.
    """

    id: str
    message: str
    scope: str | None = None
    group: str | None = None
    breaking: bool = False
    timestamp: datetime | None = None
    raw_message: str | None = None
    body: str | None = None
    footers: list[Footer] = Field(default_factory=list)
    conventional: bool = False
    links: list[Link] = Field(default_factory=list)
    tag: str | None = None
    author: str | None = None

    @property
    def short_id(self) -> str:
        """Abbreviated commit id."""
        return self.id[:SHORT_ID_LENGTH]


class Release(BaseModel):
    """A tagged release, or the unreleased section when `version` is None."""

    version: str | None = None
    timestamp: datetime | None = None
    commits: list[Commit] = Field(default_factory=list)
    previous: str | None = None

    @property
    def is_unreleased(self) -> bool:
        """Whether this release collects commits after the last tag."""
        return self.version is None
