"""Assembles commit records into releases using their version tags."""

from datetime import datetime, timezone
from typing import Sequence

import structlog
from structlog.stdlib import BoundLogger

from changelog_renderer.configuration.models import GitConfig, SortOrder
from changelog_renderer.processing.models import Commit, Release

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


def _timestamp_key(commit: Commit) -> float:
    if commit.timestamp is None:
        return float("-inf")
    if commit.timestamp.tzinfo is None:
        return commit.timestamp.replace(tzinfo=timezone.utc).timestamp()
    return commit.timestamp.timestamp()


def order_commits(commits: Sequence[Commit], topo_order: bool) -> list[Commit]:
    """Order commits oldest first.

    With `topo_order` the given order is taken as ancestry order. Otherwise
    commits are sorted by timestamp; the sort is stable and commits without a
    timestamp sort first.
    """
    if topo_order:
        return list(commits)
    return sorted(commits, key=_timestamp_key)


def release_timestamp(tagged: Commit, commits: Sequence[Commit]) -> datetime | None:
    """Date of a release: the tagged commit's timestamp, else the newest one among its commits."""
    if tagged.timestamp is not None:
        return tagged.timestamp
    dated = [commit for commit in commits if commit.timestamp is not None]
    if not dated:
        return None
    return max(dated, key=_timestamp_key).timestamp


def is_ignored_tag(tag: str, git_config: GitConfig) -> bool:
    """Whether a tag must not be used as a release boundary."""
    return git_config.ignore_tags is not None and git_config.ignore_tags.search(tag) is not None


def build_releases(commits: Sequence[Commit], git_config: GitConfig) -> list[Release]:
    """Split commits into releases, oldest release first.

    A commit carrying a tag closes a release named after that tag. Tags
    matching `ignore_tags` are not release boundaries, so their commits roll
    into the next release. Commits after the last tag form the unreleased
    release, which is always the last element (possibly without commits).
    """
    releases: list[Release] = []
    pending: list[Commit] = []
    previous: str | None = None

    for commit in order_commits(commits, git_config.topo_order):
        pending.append(commit)
        if commit.tag is None:
            continue
        if is_ignored_tag(commit.tag, git_config):
            logger.debug("Ignoring tag", tag=commit.tag, id=commit.short_id)
            continue
        releases.append(Release(version=commit.tag, timestamp=release_timestamp(commit, pending), commits=pending, previous=previous))
        previous = commit.tag
        pending = []

    releases.append(Release(version=None, timestamp=None, commits=pending, previous=previous))

    if git_config.sort_commits is SortOrder.NEWEST:
        for release in releases:
            release.commits.reverse()

    logger.debug("Built releases", releases=[release.version or "unreleased" for release in releases])
    return releases


def tag_unreleased(releases: list[Release], version: str, timestamp: datetime | None = None) -> list[Release]:
    """Assign a version to the unreleased commits, as if they were tagged."""
    if not releases or not releases[-1].is_unreleased:
        return releases
    unreleased = releases[-1]
    tagged = unreleased.model_copy(
        update={"version": version, "timestamp": timestamp or datetime.now(timezone.utc)},
    )
    logger.info("Tagged unreleased commits", version=version, commits=len(tagged.commits))
    return [*releases[:-1], tagged]
