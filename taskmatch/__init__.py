"""Fuzzy matching and duplicate detection for task lists."""

__version__ = "0.1.0"
