"""Structural linter for leveled Markdown curricula."""

__version__ = "0.1.0"
