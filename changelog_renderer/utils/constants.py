"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# Rendering Constants
# -------------------

SHORT_ID_LENGTH = 7
"""Number of characters of a commit id shown in rendered changelog lines."""

BREAKING_CHANGE_MARKER = "**BREAKING**"
"""Marker rendered in front of breaking commits by the default body template."""

DEFAULT_SCOPE = "global changes"
"""Scope assigned by the default commit parsers to commits without one."""

DEFAULT_HEADER = "# Changelog\n"
"""Default header emitted before all releases."""

# Equivalent to the body of the shipped cliff.toml once its TOML line
# continuations have been resolved.
DEFAULT_BODY = (
    '{% if version %}## v{{ version | trim_start_matches(pat="v") }}\n'
    '    Release date: *{{ timestamp | date(format="%Y-%m-%d") }}*\n'
    "{% else %}## [unreleased]\n"
    '{% endif %}{% for group, commits in commits | group_by(attribute="scope") %}\n'
    "    ### {{ group | upper_first }}\n"
    '    {% for group, commits in commits | group_by(attribute="group") %}\n'
    "        #### {{ group | upper_first }}\n"
    "        {% for commit in commits %}\n"
    "            {% if commit.breaking %}- " + BREAKING_CHANGE_MARKER + ": {{ commit.message | upper_first }}"
    "{% else %}- {{ commit.message | upper_first }} "
    '[{{ commit.id | truncate(length=7, end="") }}]{% endif %}{% endfor %}\n'
    "    {% endfor %}{% endfor %}\n"
    "\n"
)
"""Default body template rendered once per release."""

DEFAULT_FOOTER = ""
"""Default footer emitted after all releases."""

DEFAULT_COMMIT_PARSERS = [
    {"message": "^chore", "group": "🚲 Miscellaneous Tasks", "default_scope": DEFAULT_SCOPE},
    {"message": "^feat", "group": "🛳  Features", "default_scope": DEFAULT_SCOPE},
    {"message": "^fix", "group": "🐞 Bug Fixes", "default_scope": DEFAULT_SCOPE},
    {"message": "^doc", "group": "📄 Documentation", "default_scope": DEFAULT_SCOPE},
    {"message": "^perf", "group": "🏎  Performance", "default_scope": DEFAULT_SCOPE},
    {"message": "^refactor", "group": "🏗  Refactor", "default_scope": DEFAULT_SCOPE},
    {"message": "^style", "group": "Styling", "default_scope": DEFAULT_SCOPE},
    {"message": "^test", "group": "⚒ Testing", "default_scope": DEFAULT_SCOPE},
]
"""Default ordered commit classification rules."""

DEFAULT_ISSUE_URL_TEMPLATE = "https://git.emirror.de/emirror-de/solarscan/issues/$1"
"""Default issue tracker link template; `$1` is the issue number."""

DEFAULT_LINK_PARSERS = [
    {"pattern": r"#(\d+)", "href": DEFAULT_ISSUE_URL_TEMPLATE},
]
"""Default link parsers rewriting `#123` issue references into hyperlinks."""

# Regex Patterns
# --------------

CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(?P<type>[A-Za-z][\w-]*)(?:\((?P<scope>[^()\r\n]*)\))?(?P<breaking>!)?: (?P<description>[^\r\n]+)(?:\r?\n(?P<rest>.*))?$",
    re.DOTALL,
)
"""Pattern to match conventional commit messages (e.g., feat(api)!: add endpoint)."""

FOOTER_PATTERN = re.compile(r"^(?P<token>BREAKING[ -]CHANGE|[\w-]+)(?P<separator>: | #)(?P<value>.+)$")
"""Pattern to match a conventional commit footer line (e.g., Refs: #123)."""

BREAKING_CHANGE_TOKENS = frozenset({"BREAKING CHANGE", "BREAKING-CHANGE"})
"""Footer tokens that mark a commit as breaking."""

REPLACEMENT_GROUP_PATTERN = re.compile(r"\$(?:(\d+)|\{(\w+)\})")
"""Pattern to match `$1` / `${name}` capture group references in link templates."""

VERSION_HEADER_PATTERN = r"^##\s+\[?v?(\d+\.\d+\.\d+[^\s\]]*)\]?"
"""Regex pattern to match version headers in markdown (e.g., ## v1.2.3)."""

UNRELEASED_HEADER_PATTERN = r"^##\s+\[?unreleased\]?"
"""Regex pattern to match the unreleased section header in markdown."""

SECTION_HEADER_PATTERN = r"^##\s"
"""Regex pattern to match any second-level markdown header."""

# Default File Settings
# ---------------------

DEFAULT_CONFIG_FILENAMES = ("cliff.toml", "changelog.yaml", "changelog.yml")
"""Config file names looked up in the working directory when none is given."""
