"""Utility modules for shared functionality."""

from .constants import (
    BREAKING_CHANGE_MARKER,
    DEFAULT_BODY,
    DEFAULT_FOOTER,
    DEFAULT_HEADER,
    DEFAULT_SCOPE,
    SHORT_ID_LENGTH,
)

__all__ = [
    "BREAKING_CHANGE_MARKER",
    "DEFAULT_BODY",
    "DEFAULT_FOOTER",
    "DEFAULT_HEADER",
    "DEFAULT_SCOPE",
    "SHORT_ID_LENGTH",
]
