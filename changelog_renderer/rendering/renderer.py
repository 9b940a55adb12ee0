"""Main changelog rendering orchestration."""

from typing import Any, Sequence

import structlog

from changelog_renderer.configuration.models import Config
from changelog_renderer.processing.models import Commit, Release
from changelog_renderer.processing.parser import CommitClassifier, apply_text_processors
from changelog_renderer.processing.releases import build_releases, tag_unreleased
from changelog_renderer.rendering.templates import (
    construct_jinja2_environment,
    construct_jinja2_template_from_string,
    render_template,
)

logger = structlog.get_logger(__name__)


class ChangelogRenderer:
    """Renders classified commits into a changelog document.

    Commits are classified with the configured commit parsers, grouped into
    releases by their tags, and rendered with the header, body and footer
    templates. All templates are compiled up front, so a malformed template
    fails when the renderer is constructed rather than halfway through a
    document.

    Rendering is a pure function of the commits and the configuration:
    rendering the same input twice produces identical output.
    """

    def __init__(self, config: Config) -> None:
        """Initialize with a validated configuration and compile its templates.

        Raises:
            TemplateSyntaxError: If the header, body or footer template is malformed.
        """
        self.config = config
        self.classifier = CommitClassifier(config.git)
        environment = construct_jinja2_environment()
        # Only the body is line-trimmed; header and footer are emitted verbatim.
        self.header_template = construct_jinja2_template_from_string(config.changelog.header, "header", False, environment)
        self.body_template = construct_jinja2_template_from_string(config.changelog.body, "body", config.changelog.trim, environment)
        self.footer_template = construct_jinja2_template_from_string(config.changelog.footer, "footer", False, environment)

    def process_release(self, release: Release) -> Release:
        """Return a copy of the release with its commits classified."""
        commits = self.classifier.process(release.commits)
        logger.debug(
            "Processed release",
            version=release.version or "unreleased",
            commits_in=len(release.commits),
            commits_out=len(commits),
        )
        return release.model_copy(update={"commits": commits})

    def build_releases(self, commits: Sequence[Commit], tag: str | None = None) -> list[Release]:
        """Assemble and classify releases, oldest first, dropping releases without commits."""
        releases = build_releases(commits, self.config.git)
        if tag:
            releases = tag_unreleased(releases, tag)
        processed = [self.process_release(release) for release in releases]
        return [release for release in processed if release.commits]

    @staticmethod
    def release_context(release: Release) -> dict[str, Any]:
        """Template context for one release."""
        return {
            "version": release.version,
            "timestamp": release.timestamp,
            "commits": [commit.model_dump() for commit in release.commits],
            "previous": {"version": release.previous},
        }

    def render_body(self, release: Release) -> str:
        """Render the body template for an already classified release."""
        return render_template(self.body_template, self.release_context(release), "body")

    def render_release(self, release: Release) -> str:
        """Classify the commits of one release and render its section.

        A release without commits renders only its version header.
        """
        return self.postprocess(self.render_body(self.process_release(release)))

    def render_sections(self, releases: Sequence[Release]) -> str:
        """Render the bodies of classified releases, newest release first."""
        return "".join(self.render_body(release) for release in reversed(releases))

    def render(self, releases: Sequence[Release]) -> str:
        """Render a complete document from classified releases given oldest first."""
        context = {"releases": [self.release_context(release) for release in reversed(releases)]}
        header = render_template(self.header_template, context, "header")
        footer = render_template(self.footer_template, context, "footer")
        return self.postprocess(header + self.render_sections(releases) + footer)

    def postprocess(self, text: str) -> str:
        """Apply the configured output postprocessors."""
        return apply_text_processors(text, self.config.changelog.postprocessors)

    def select_releases(self, releases: list[Release], unreleased_only: bool = False, latest_only: bool = False) -> list[Release]:
        """Narrow classified releases to the unreleased or latest tagged section."""
        if unreleased_only:
            return [release for release in releases if release.is_unreleased]
        if latest_only:
            tagged = [release for release in releases if not release.is_unreleased]
            return tagged[-1:]
        return releases

    def generate(
        self,
        commits: Sequence[Commit],
        unreleased_only: bool = False,
        latest_only: bool = False,
        tag: str | None = None,
    ) -> str:
        """Render a complete changelog document from commit records.

        Args:
            commits: Commit records, oldest first.
            unreleased_only: Only render commits after the last tag.
            latest_only: Only render the newest tagged release.
            tag: Version to assign to the unreleased commits.

        Returns:
            The rendered changelog text.
        """
        releases = self.select_releases(self.build_releases(commits, tag), unreleased_only, latest_only)
        logger.info("Rendering changelog", releases=[release.version or "unreleased" for release in releases])
        return self.render(releases)
