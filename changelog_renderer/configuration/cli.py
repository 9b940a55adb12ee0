"""Defines the Command Line Interface (CLI) using Typer."""

from pathlib import Path
from typing import NoReturn

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from changelog_renderer.configuration.env import Settings
from changelog_renderer.configuration.exceptions import ConfigurationLoadError, ConflictingOptionsError
from changelog_renderer.configuration.loader import load_config
from changelog_renderer.configuration.models import default_config
from changelog_renderer.configuration.reconcile import reconcile_config_path, reconcile_render_configuration
from changelog_renderer.processing.commits_processor import CommitsProcessor
from changelog_renderer.processing.exceptions import CommitInputError
from changelog_renderer.processing.models import Release
from changelog_renderer.rendering.exceptions import TemplateRenderError, TemplateSyntaxError
from changelog_renderer.rendering.markdown import MarkdownWriter
from changelog_renderer.rendering.renderer import ChangelogRenderer
from changelog_renderer.utils.logs import configure_logging
from changelog_renderer.utils.yaml import dump_yaml_to_file

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Render changelogs from commit records.")


def fail(message: str) -> NoReturn:
    """Report an error on stderr and exit with status 1."""
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def write_prepended(renderer: ChangelogRenderer, prepend_path: Path, releases: list[Release]) -> None:
    """Insert releases that are not documented yet into an existing changelog file.

    The unreleased section of the file is always regenerated: an existing one
    is replaced so repeated runs do not accumulate unreleased sections.
    """
    existing = prepend_path.read_text(encoding="utf-8") if prepend_path.exists() else ""
    writer = MarkdownWriter(renderer.config.changelog.header)

    releases = [
        release
        for release in releases
        if release.is_unreleased or not writer.is_version_documented(existing, release.version)
    ]
    if not releases:
        typer.echo(f"All releases are already documented in {prepend_path}")
        return

    existing = writer.remove_unreleased(existing)
    if existing.strip():
        updated = writer.prepend(existing, renderer.postprocess(renderer.render_sections(releases)))
    else:
        updated = renderer.render(releases)
    prepend_path.write_text(updated, encoding="utf-8")
    typer.echo(f"Prepended {len(releases)} release(s) to {prepend_path}")


@typer_app.command(name="render")
def render_cli(
    commits_files: Annotated[list[Path], Argument(help="YAML or JSON file(s) with commit records, oldest first.")],
    config_path: Annotated[Path | None, Option("--config", "-c", help="Path to a TOML or YAML changelog configuration.")] = None,
    output: Annotated[Path | None, Option("--output", "-o", help="Write the changelog to this file instead of stdout.")] = None,
    prepend: Annotated[Path | None, Option("--prepend", "-p", help="Insert new releases into this existing changelog.")] = None,
    unreleased: Annotated[bool, Option("--unreleased", "-u", help="Only render commits after the last tag.")] = False,
    latest: Annotated[bool, Option("--latest", "-l", help="Only render the newest tagged release.")] = False,
    tag: Annotated[str | None, Option("--tag", "-t", help="Version to assign to the unreleased commits.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Render a changelog from commit records."""
    try:
        render_config = reconcile_render_configuration(
            cli_commits_paths=commits_files,
            cli_debug=debug,
            cli_config_path=config_path,
            cli_output_path=output,
            cli_prepend_path=prepend,
            cli_unreleased_only=unreleased,
            cli_latest_only=latest,
            cli_tag=tag,
        )
    except ConflictingOptionsError as e:
        fail(str(e))
    configure_logging(render_config.debug)

    for path in render_config.commits_paths:
        if not path.exists():
            fail(f"Commits file not found: {path.absolute()}")

    try:
        config = load_config(render_config.config_path)
        renderer = ChangelogRenderer(config)
        commits = CommitsProcessor().load_commits([str(path) for path in render_config.commits_paths])
        releases = renderer.select_releases(
            renderer.build_releases(commits, render_config.tag),
            render_config.unreleased_only,
            render_config.latest_only,
        )
        if render_config.prepend_path is not None:
            write_prepended(renderer, render_config.prepend_path, releases)
            return
        changelog = renderer.render(releases)
    except ConfigurationLoadError as e:
        fail(f"Error loading configuration: {e}")
    except CommitInputError as e:
        details = "\n".join(f"  - {error}" for error in e.errors)
        fail(f"Error loading commits: {e}\n{details}")
    except (TemplateSyntaxError, TemplateRenderError) as e:
        fail(f"Error rendering changelog: {e}")

    if render_config.output_path is not None:
        render_config.output_path.write_text(changelog, encoding="utf-8")
        typer.echo(f"Wrote changelog to {render_config.output_path}")
    else:
        typer.echo(changelog, nl=False)


@typer_app.command(name="check-config")
def check_config_cli(
    config_path: Annotated[Path | None, Option("--config", "-c", help="Path to a TOML or YAML changelog configuration.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Validate a changelog configuration: patterns must compile and templates must parse."""
    configure_logging(debug)
    resolved_path = reconcile_config_path(config_path, Settings())
    try:
        config = load_config(resolved_path)
        ChangelogRenderer(config)
    except ConfigurationLoadError as e:
        fail(f"Invalid configuration: {e}")
    except TemplateSyntaxError as e:
        fail(f"Invalid template: {e}")

    typer.echo(f"Configuration {resolved_path or '(built-in defaults)'} is valid")
    typer.echo(f"  Commit parsers: {len(config.git.commit_parsers)}")
    for rule in config.git.commit_parsers:
        typer.echo(f"    {rule.message.pattern} -> {rule.group}" + (" (skip)" if rule.skip else ""))
    typer.echo(f"  Link parsers: {len(config.git.link_parsers)}")
    typer.echo(f"  Sort commits: {config.git.sort_commits.value}")


@typer_app.command(name="init")
def init_cli(
    output: Annotated[Path, Argument(help="Where to write the default configuration.")] = Path("changelog.yaml"),
    force: Annotated[bool, Option("--force", "-f", help="Overwrite an existing file.")] = False,
) -> None:
    """Write the built-in default configuration as YAML."""
    if output.exists() and not force:
        fail(f"{output} already exists, use --force to overwrite it")
    dump_yaml_to_file(default_config().model_dump(mode="json"), output)
    typer.echo(f"Wrote default configuration to {output}")


if __name__ == "__main__":
    typer_app()
