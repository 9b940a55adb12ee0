"""Commit classification: preprocessing, conventional parsing, commit parsers and link parsers.

The `CommitClassifier` turns raw commit records into classified records that
the renderer can group by scope and group. Commit parser rules are evaluated in
declaration order and the first matching rule wins. Commits that match no rule
are kept unclassified (`group` is None) unless `filter_commits` is enabled.
"""

import re
from dataclasses import dataclass
from typing import Iterable

import structlog
from structlog.stdlib import BoundLogger

from changelog_renderer.configuration.models import CommitParserRule, GitConfig, LinkParserRule, TextProcessor
from changelog_renderer.processing.models import Commit, Footer, Link
from changelog_renderer.utils.constants import (
    BREAKING_CHANGE_TOKENS,
    CONVENTIONAL_COMMIT_PATTERN,
    FOOTER_PATTERN,
    REPLACEMENT_GROUP_PATTERN,
)

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


@dataclass
class ConventionalMessage:
    """Parsed pieces of a conventional commit message."""

    commit_type: str
    scope: str | None
    description: str
    body: str | None
    footers: list[Footer]
    breaking: bool


def _is_footer_paragraph(first_match: re.Match[str] | None, has_body: bool) -> bool:
    # A lone paragraph such as "Note: ..." is prose unless it is unmistakably a footer.
    if first_match is None:
        return False
    if has_body:
        return True
    return first_match.group("token") in BREAKING_CHANGE_TOKENS or first_match.group("separator") == " #"


def parse_footers(text: str) -> tuple[str | None, list[Footer]]:
    """Split the text after a conventional subject line into body and trailing footers.

    The last paragraph holds the footers when a body paragraph precedes it. A
    single paragraph is only read as footers when it starts with a
    `BREAKING CHANGE` footer or a `Token #value` reference.
    """
    paragraphs = [p for p in re.split(r"\r?\n\s*\r?\n", text.strip()) if p.strip()]
    if not paragraphs:
        return None, []

    footers: list[Footer] = []
    last_lines = paragraphs[-1].splitlines()
    matches = [FOOTER_PATTERN.match(line) for line in last_lines]
    if matches and _is_footer_paragraph(matches[0], has_body=len(paragraphs) > 1):
        for line, match in zip(last_lines, matches):
            if match is not None:
                token = match.group("token")
                footers.append(
                    Footer(
                        token=token,
                        separator=match.group("separator"),
                        value=match.group("value"),
                        breaking=token in BREAKING_CHANGE_TOKENS,
                    )
                )
            elif footers:
                # Continuation line of the previous footer value.
                footers[-1].value += "\n" + line
        paragraphs = paragraphs[:-1]

    body = "\n\n".join(paragraphs) if paragraphs else None
    return body, footers


def parse_conventional_message(message: str) -> ConventionalMessage | None:
    """Parse a message of the form `type(scope)!: description`.

    Returns None when the message does not follow the convention.
    """
    match = CONVENTIONAL_COMMIT_PATTERN.match(message.strip())
    if match is None:
        return None

    scope = match.group("scope")
    body, footers = parse_footers(match.group("rest") or "")
    breaking = match.group("breaking") is not None or any(footer.breaking for footer in footers)
    return ConventionalMessage(
        commit_type=match.group("type"),
        scope=scope.strip() if scope and scope.strip() else None,
        description=match.group("description").strip(),
        body=body,
        footers=footers,
        breaking=breaking,
    )


def to_python_replacement(template: str) -> str:
    """Convert `$1` / `${1}` / `${name}` group references into `re` replacement syntax."""
    escaped = template.replace("\\", "\\\\")
    return REPLACEMENT_GROUP_PATTERN.sub(lambda m: f"\\g<{m.group(1) or m.group(2)}>", escaped)


def apply_link_parsers(message: str, rules: Iterable[LinkParserRule]) -> tuple[str, list[Link]]:
    """Rewrite link-parser matches in a message into markdown links.

    Rules are applied in order. Each match is replaced by `[text](href)` where
    `text` defaults to the matched substring.

    Returns:
        The rewritten message and the list of links that were produced.
    """
    links: list[Link] = []
    for rule in rules:
        href_template = to_python_replacement(rule.href)
        text_template = to_python_replacement(rule.text) if rule.text is not None else None

        def replace(match: re.Match[str]) -> str:
            text = match.expand(text_template) if text_template is not None else match.group(0)
            link = Link(text=text, href=match.expand(href_template))
            links.append(link)
            return f"[{link.text}]({link.href})"

        message = rule.pattern.sub(replace, message)
    return message, links


def apply_text_processors(text: str, processors: Iterable[TextProcessor]) -> str:
    """Apply regex substitutions in order."""
    for processor in processors:
        text = processor.pattern.sub(to_python_replacement(processor.replace), text)
    return text


def find_parser_rule(message: str, rules: Iterable[CommitParserRule]) -> CommitParserRule | None:
    """Return the first rule whose pattern matches the message."""
    for rule in rules:
        if rule.message.search(message):
            return rule
    return None


def split_commit(commit: Commit) -> list[Commit]:
    """Split a multi-line commit into one commit per non-empty line."""
    return [commit.model_copy(update={"message": line.strip()}) for line in commit.message.splitlines() if line.strip()]


class CommitClassifier:
    """Classifies commit records according to the [git] configuration."""

    def __init__(self, git_config: GitConfig) -> None:
        """Initialize with the git configuration."""
        self.config = git_config

    def _is_protected(self, commit: Commit) -> bool:
        return self.config.protect_breaking_commits and commit.breaking

    def classify(self, commit: Commit) -> Commit | None:
        """Classify a single commit.

        Returns a new classified commit, or None when the commit is filtered out.
        The input commit is never modified.
        """
        raw_message = apply_text_processors(commit.message, self.config.commit_preprocessors)
        update: dict[str, object] = {"raw_message": raw_message, "message": raw_message}

        if self.config.conventional_commits:
            parsed = parse_conventional_message(raw_message)
            if parsed is None:
                if self.config.filter_unconventional:
                    logger.debug("Dropping unconventional commit", id=commit.short_id)
                    return None
            else:
                update.update(
                    message=parsed.description,
                    body=parsed.body,
                    footers=parsed.footers,
                    conventional=True,
                    breaking=commit.breaking or parsed.breaking,
                )
                if parsed.scope is not None:
                    update["scope"] = parsed.scope

        classified = commit.model_copy(update=update)

        rule = find_parser_rule(raw_message, self.config.commit_parsers)
        if rule is None:
            if self.config.filter_commits and not self._is_protected(classified):
                logger.debug("Dropping commit that matches no parser", id=commit.short_id)
                return None
            logger.debug("Commit matches no parser, keeping it unclassified", id=commit.short_id)
            # Scope and group are both unset so scope/group templates leave the commit out.
            classified = classified.model_copy(update={"scope": None})
        elif rule.skip and not self._is_protected(classified):
            logger.debug("Skipping commit", id=commit.short_id, pattern=rule.message.pattern)
            return None
        else:
            scope = rule.scope or classified.scope or rule.default_scope
            classified = classified.model_copy(update={"group": rule.group, "scope": scope})

        message, links = apply_link_parsers(classified.message, self.config.link_parsers)
        classified = classified.model_copy(update={"message": message, "links": links})

        logger.debug(
            "Classified commit",
            id=classified.short_id,
            group=classified.group,
            scope=classified.scope,
            breaking=classified.breaking,
        )
        return classified

    def process(self, commits: Iterable[Commit]) -> list[Commit]:
        """Classify commits in order, splitting and filtering as configured."""
        processed: list[Commit] = []
        for commit in commits:
            candidates = split_commit(commit) if self.config.split_commits else [commit]
            for candidate in candidates:
                classified = self.classify(candidate)
                if classified is not None:
                    processed.append(classified)
        return processed
