"""Commit records, classification and release assembly."""

from .commits_processor import CommitsProcessor
from .models import Commit, Footer, Link, Release
from .parser import CommitClassifier, apply_link_parsers, parse_conventional_message
from .releases import build_releases, tag_unreleased

__all__ = [
    "Commit",
    "Footer",
    "Link",
    "Release",
    "CommitsProcessor",
    "CommitClassifier",
    "apply_link_parsers",
    "parse_conventional_message",
    "build_releases",
    "tag_unreleased",
]
