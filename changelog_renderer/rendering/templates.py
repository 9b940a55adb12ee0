"""Contains utilities for compiling and rendering changelog Jinja2 templates."""

from typing import Any

import jinja2
import structlog

from changelog_renderer.rendering.exceptions import TemplateRenderError, TemplateSyntaxError
from changelog_renderer.rendering.filters import FILTERS

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def construct_jinja2_environment() -> jinja2.Environment:
    """Construct a Jinja2 environment with the changelog template filters."""
    jinja_env = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True, autoescape=False)
    jinja_env.filters.update(FILTERS)
    return jinja_env


def trim_template_lines(template_string: str) -> str:
    """Strip leading and trailing whitespace from every template line."""
    return "\n".join(line.strip() for line in template_string.splitlines())


def construct_jinja2_template_from_string(
    template_string: str,
    name: str = "body",
    trim: bool = False,
    environment: jinja2.Environment | None = None,
) -> jinja2.Template:
    """Construct a Jinja2 template from a string.

    Raises:
        TemplateSyntaxError: If the template cannot be compiled. The error
            carries the template name, line number and offending fragment.
    """
    if environment is None:
        environment = construct_jinja2_environment()
    source = trim_template_lines(template_string) if trim else template_string
    try:
        return environment.from_string(source)
    except jinja2.TemplateSyntaxError as exc:
        lines = source.splitlines()
        fragment = lines[exc.lineno - 1] if exc.lineno and 0 < exc.lineno <= len(lines) else source
        logger.error("Invalid template syntax", template=name, lineno=exc.lineno, fragment=fragment, error=exc.message)
        raise TemplateSyntaxError(name, exc.lineno, fragment, exc.message or str(exc)) from exc


def render_template(template: jinja2.Template, context: dict[str, Any], name: str = "body") -> str:
    """Render a compiled template against a context mapping."""
    try:
        return template.render(context)
    except jinja2.TemplateError as exc:
        logger.error("Failed to render template", template=name, error=str(exc))
        raise TemplateRenderError(name, str(exc)) from exc
