"""Markdown manipulation for existing changelog files."""

import re

import structlog

from changelog_renderer.utils.constants import SECTION_HEADER_PATTERN, UNRELEASED_HEADER_PATTERN, VERSION_HEADER_PATTERN

logger = structlog.get_logger(__name__)

UNRELEASED_HEADER = re.compile(UNRELEASED_HEADER_PATTERN, re.IGNORECASE)
SECTION_HEADER = re.compile(SECTION_HEADER_PATTERN)


class MarkdownWriter:
    """Handles inserting newly rendered releases into an existing changelog."""

    def __init__(self, expected_header: str, version_pattern: str = VERSION_HEADER_PATTERN) -> None:
        """Initialize with the changelog header and version header pattern."""
        self.expected_header = expected_header.strip()
        self.pattern = re.compile(version_pattern, re.MULTILINE | re.IGNORECASE)

    def extract_versions(self, content: str) -> list[str]:
        """Extract all version numbers from version headers in content."""
        versions = self.pattern.findall(content)
        logger.debug("Extracted versions", versions=versions)
        return versions

    def is_version_documented(self, content: str, version: str) -> bool:
        """Check if a version already has a section in the changelog."""
        return version.lstrip("v") in {documented.lstrip("v") for documented in self.extract_versions(content)}

    def remove_unreleased(self, content: str) -> str:
        """Remove the unreleased section, from its header up to the next release header."""
        lines = content.splitlines(keepends=True)
        start = next((index for index, line in enumerate(lines) if UNRELEASED_HEADER.match(line)), None)
        if start is None:
            return content
        end = next(
            (index for index in range(start + 1, len(lines)) if SECTION_HEADER.match(lines[index])),
            len(lines),
        )
        logger.debug("Removed existing unreleased section", lines=end - start)
        return "".join(lines[:start] + lines[end:])

    def prepend(self, existing_content: str, new_content: str) -> str:
        """Insert new release sections after the changelog header.

        When the existing content does not start with the expected header, the
        new content is placed at the top of the file.
        """
        if not new_content.strip():
            logger.info("Nothing to prepend")
            return existing_content

        if not self.expected_header:
            return new_content.strip() + "\n\n" + existing_content.lstrip()

        header_start = existing_content.find(self.expected_header)
        if header_start == -1:
            logger.warning("Changelog file missing expected header, prepending at the top", expected=self.expected_header)
            return new_content.strip() + "\n\n" + existing_content.lstrip()

        header_end = header_start + len(self.expected_header)
        remainder = existing_content[header_end:].lstrip("\n")
        updated = existing_content[:header_end] + "\n" + new_content.strip() + "\n"
        if remainder:
            updated += "\n" + remainder

        logger.info("Inserted new release sections")
        return updated
