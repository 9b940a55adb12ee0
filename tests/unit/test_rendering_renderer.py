"""Unit tests for the ChangelogRenderer."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest

from changelog_renderer.configuration.loader import load_config
from changelog_renderer.configuration.models import ChangelogConfig, Config, GitConfig
from changelog_renderer.processing.commits_processor import CommitsProcessor
from changelog_renderer.processing.models import Commit, Release
from changelog_renderer.rendering.exceptions import TemplateRenderError, TemplateSyntaxError
from changelog_renderer.rendering.renderer import ChangelogRenderer

ISSUE_URL = "https://git.emirror.de/emirror-de/solarscan/issues/"

EXPECTED_FIXTURE_CHANGELOG = (
    "# Changelog\n"
    "## [unreleased]\n"
    "\n"
    "### Global changes\n"
    "\n"
    "#### 📄 Documentation\n"
    "\n"
    "- Describe configuration [c1b2c3d]\n"
    "\n"
    "#### 🛳  Features\n"
    "\n"
    "- **BREAKING**: Drop legacy export\n"
    "\n"
    "## v0.1.0\n"
    "Release date: *2024-03-02*\n"
    "\n"
    "### Global changes\n"
    "\n"
    "#### 🛳  Features\n"
    "\n"
    "- Add solar panel overview [a1b2c3d]\n"
    "\n"
    "### Api\n"
    "\n"
    "#### 🐞 Bug Fixes\n"
    "\n"
    f"- Handle timeout ([#42]({ISSUE_URL}42)) [b1b2c3d]\n"
    "\n"
)


def test_single_fix_commit_renders_exactly(config: Config) -> None:
    """A single fix commit renders under the default scope and bug fix group."""
    commit = Commit(id="abc123def4567890abc123def4567890abc123de", message="fix: handle timeout")
    output = ChangelogRenderer(config).generate([commit])

    assert output == (
        "# Changelog\n"
        "## [unreleased]\n"
        "\n"
        "### Global changes\n"
        "\n"
        "#### 🐞 Bug Fixes\n"
        "\n"
        "- Handle timeout [abc123d]\n"
        "\n"
    )


def test_fixture_changelog(fixtures_dir: Path) -> None:
    """The shipped cliff.toml renders the fixture commits into the expected document."""
    config = load_config(fixtures_dir / "cliff.toml")
    commits = CommitsProcessor().load_commits([str(fixtures_dir / "commits.yaml")])

    assert ChangelogRenderer(config).generate(commits) == EXPECTED_FIXTURE_CHANGELOG


def test_rendering_is_idempotent(fixtures_dir: Path, config: Config) -> None:
    """Rendering twice from identical inputs yields identical output."""
    commits = CommitsProcessor().load_commits([str(fixtures_dir / "commits.yaml")])
    renderer = ChangelogRenderer(config)

    first = renderer.generate(commits)
    second = renderer.generate(commits)
    third = ChangelogRenderer(config).generate(commits)
    assert first == second == third


def test_empty_commit_list_renders_header_and_footer_only() -> None:
    """Without commits only the header and footer are emitted."""
    config = Config(changelog=ChangelogConfig(header="# Changelog\n", footer="<!-- end -->\n"))
    assert ChangelogRenderer(config).generate([]) == "# Changelog\n<!-- end -->\n"


def test_empty_release_has_no_subsections(config: Config) -> None:
    """A release without commits renders only its version header."""
    output = ChangelogRenderer(config).render_release(Release(version="v1.0.0", timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc)))
    assert output == "## v1.0.0\nRelease date: *2024-05-01*\n\n"
    assert "###" not in output


def test_breaking_lines_never_contain_short_id(config: Config, make_commit: Callable[..., Commit]) -> None:
    """Breaking commits render the marker and the message, without the truncated id."""
    commits = [make_commit("feat!: remove v1 api"), make_commit("fix: something", breaking=True), make_commit("fix: regular")]
    output = ChangelogRenderer(config).generate(commits)
    lines = output.splitlines()

    breaking_lines = [line for line in lines if "**BREAKING**" in line]
    assert breaking_lines == ["- **BREAKING**: Remove v1 api", "- **BREAKING**: Something"]
    for commit in commits[:2]:
        assert not any(commit.id[:7] in line for line in breaking_lines)
    assert f"- Regular [{commits[2].id[:7]}]" in lines


def test_first_matching_rule_group_in_output(make_commit: Callable[..., Commit]) -> None:
    """The group heading comes from the first matching rule."""
    config = Config(
        git=GitConfig.model_validate(
            {
                "commit_parsers": [
                    {"message": "timeout", "group": "timeouts", "default_scope": "misc"},
                    {"message": "^fix", "group": "fixes", "default_scope": "misc"},
                ]
            }
        )
    )
    output = ChangelogRenderer(config).generate([make_commit("fix: handle timeout"), make_commit("fix: other")])
    assert "#### Timeouts\n\n- Handle timeout" in output
    assert "#### Fixes\n\n- Other" in output
    assert output.index("#### Timeouts") < output.index("#### Fixes")


def test_unclassified_commits_are_not_rendered(config: Config, make_commit: Callable[..., Commit]) -> None:
    """Commits without a group or scope produce no lines in the default body."""
    output = ChangelogRenderer(config).generate([make_commit("build: toolchain"), make_commit("fix: kept")])
    assert "Toolchain" not in output
    assert "- Kept [" in output


def test_unclassified_scoped_commit_leaves_no_heading(config: Config, make_commit: Callable[..., Commit]) -> None:
    """An unmatched commit with a parsed scope produces no empty scope heading."""
    output = ChangelogRenderer(config).generate([make_commit("build(api): toolchain")])
    assert output == "# Changelog\n## [unreleased]\n\n"
    assert "###" not in output


def test_issue_reference_rendered_as_link(config: Config, make_commit: Callable[..., Commit]) -> None:
    """#42 becomes a link to the issue tracker."""
    output = ChangelogRenderer(config).generate([make_commit("fix: crash (#42)")])
    assert f"([#42]({ISSUE_URL}42))" in output


def test_releases_rendered_newest_first(config: Config, make_commit: Callable[..., Commit]) -> None:
    """The newest release comes first in the document."""
    commits = [
        make_commit("feat: one", tag="v0.1.0"),
        make_commit("feat: two", tag="v0.2.0"),
        make_commit("feat: three"),
    ]
    output = ChangelogRenderer(config).generate(commits)
    assert output.index("## [unreleased]") < output.index("## v0.2.0") < output.index("## v0.1.0")


def test_unreleased_only_and_latest_only(config: Config, make_commit: Callable[..., Commit]) -> None:
    """Releases can be narrowed to the unreleased or the latest tagged section."""
    commits = [make_commit("feat: one", tag="v0.1.0"), make_commit("feat: two", tag="v0.2.0"), make_commit("feat: three")]
    renderer = ChangelogRenderer(config)

    unreleased = renderer.generate(commits, unreleased_only=True)
    assert "## [unreleased]" in unreleased
    assert "## v0." not in unreleased

    latest = renderer.generate(commits, latest_only=True)
    assert "## v0.2.0" in latest
    assert "## v0.1.0" not in latest
    assert "[unreleased]" not in latest


def test_tag_names_unreleased_commits(config: Config, make_commit: Callable[..., Commit]) -> None:
    """--tag style rendering turns the unreleased section into a version."""
    commits = [make_commit("feat: one", tag="v0.1.0"), make_commit("fix: two")]
    output = ChangelogRenderer(config).generate(commits, tag="v0.2.0")
    assert "## v0.2.0\nRelease date: *" in output
    assert "[unreleased]" not in output


def test_header_and_footer_see_releases(make_commit: Callable[..., Commit]) -> None:
    """Header and footer templates are rendered with the release list."""
    config = Config(
        changelog=ChangelogConfig(
            header="# {{ releases | length }} release(s)\n",
            body="{{ version }}\n",
            footer="latest: {{ releases[0].version }}\n",
            trim=False,
        )
    )
    output = ChangelogRenderer(config).generate([make_commit("feat: a", tag="v1.0.0"), make_commit("fix: b", tag="v1.1.0")])
    assert output == "# 2 release(s)\nv1.1.0\nv1.0.0\nlatest: v1.1.0\n"


def test_trim_disabled_keeps_indentation(make_commit: Callable[..., Commit]) -> None:
    """Without trim, template indentation is emitted."""
    config = Config(changelog=ChangelogConfig(header="", body="  {% for c in commits %}* {{ c.message }}{% endfor %}\n", trim=False))
    assert ChangelogRenderer(config).generate([make_commit("feat: a")]) == "  * a\n"


def test_postprocessors(config: Config, make_commit: Callable[..., Commit]) -> None:
    """Output postprocessors rewrite the rendered document."""
    changelog = ChangelogConfig.model_validate({"postprocessors": [{"pattern": "Changelog", "replace": "Release notes"}]})
    renderer = ChangelogRenderer(Config(changelog=changelog, git=config.git))
    assert renderer.generate([make_commit("fix: a")]).startswith("# Release notes\n## [unreleased]\n")


def test_malformed_body_fails_at_construction() -> None:
    """A malformed template is reported before any rendering happens."""
    config = Config(changelog=ChangelogConfig(body="{% for commit in commits %}\n- {{ commit.message }\n{% endfor %}\n"))
    with pytest.raises(TemplateSyntaxError) as exc_info:
        ChangelogRenderer(config)
    assert exc_info.value.template_name == "body"
    assert exc_info.value.fragment == "- {{ commit.message }"


def test_undefined_variable_in_body(make_commit: Callable[..., Commit]) -> None:
    """Undefined template variables fail at render time."""
    config = Config(changelog=ChangelogConfig(body="{{ release_name }}\n"))
    with pytest.raises(TemplateRenderError):
        ChangelogRenderer(config).generate([make_commit("feat: a")])


def test_commit_links_available_in_template(make_commit: Callable[..., Commit]) -> None:
    """Templates can iterate over the links of a commit."""
    config = Config(
        changelog=ChangelogConfig(header="", body="{% for c in commits %}{% for l in c.links %}{{ l.href }};{% endfor %}{% endfor %}\n", trim=False),
        git=GitConfig.model_validate({"link_parsers": [{"pattern": r"#(\d+)", "href": "https://tracker/$1"}]}),
    )
    assert ChangelogRenderer(config).generate([make_commit("fix: #1 and #2")]) == "https://tracker/1;https://tracker/2;\n"


def test_release_date_from_commits_when_tag_commit_is_undated(config: Config, make_commit: Callable[..., Commit]) -> None:
    """The release date line is filled from the release's commits."""
    commits = [
        make_commit("feat: a", timestamp=datetime(2024, 6, 3, tzinfo=timezone.utc)),
        make_commit("fix: b", timestamp=None, tag="v1.0.0"),
    ]
    config = config.model_copy(update={"git": config.git.model_copy(update={"topo_order": True})})
    output = ChangelogRenderer(config).generate(commits)
    assert "## v1.0.0\nRelease date: *2024-06-03*\n" in output
