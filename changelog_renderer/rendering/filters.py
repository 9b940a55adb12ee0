"""Template filters used by changelog templates.

The filter names and keyword arguments follow the `cliff.toml` template
dialect (`group_by(attribute=...)`, `truncate(length=..., end=...)`, ...), so
existing changelog templates render unchanged.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

import jinja2
from jinja2.filters import make_attrgetter


def upper_first(value: Any) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    text = "" if value is None else str(value)
    return text[:1].upper() + text[1:]


def truncate(value: Any, length: int = 255, end: str = "...") -> str:
    """Cut a string to `length` characters and append `end` if it was cut."""
    text = "" if value is None else str(value)
    if len(text) <= length:
        return text
    return text[:length] + end


def trim_start_matches(value: Any, pat: str) -> str:
    """Remove every leading repetition of `pat`."""
    text = "" if value is None else str(value)
    if not pat:
        return text
    while text.startswith(pat):
        text = text[len(pat) :]
    return text


def trim_end_matches(value: Any, pat: str) -> str:
    """Remove every trailing repetition of `pat`."""
    text = "" if value is None else str(value)
    if not pat:
        return text
    while text.endswith(pat):
        text = text[: -len(pat)]
    return text


def date(value: Any, format: str = "%Y-%m-%d") -> str:
    """Format a datetime or Unix timestamp. Missing values render as an empty string."""
    if value is None or isinstance(value, jinja2.Undefined):
        return ""
    if isinstance(value, (int, float)):
        value = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.strftime(format)


@jinja2.pass_environment
def group_by(environment: jinja2.Environment, value: Iterable[Any], attribute: str) -> list[tuple[Any, list[Any]]]:
    """Group items by an attribute, keeping the order in which keys are first seen.

    Items whose attribute is missing or null are left out.
    """
    getter = make_attrgetter(environment, attribute)
    groups: dict[Any, list[Any]] = {}
    for item in value:
        key = getter(item)
        if key is None or isinstance(key, jinja2.Undefined):
            continue
        groups.setdefault(key, []).append(item)
    return list(groups.items())


FILTERS = {
    "upper_first": upper_first,
    "truncate": truncate,
    "trim_start_matches": trim_start_matches,
    "trim_end_matches": trim_end_matches,
    "date": date,
    "group_by": group_by,
}
