"""Render changelogs from commit records and a declarative configuration."""
