"""Duplicate task detection."""

from .clusterer import DuplicateGroup, find_duplicate_groups, group_components, group_greedy

__all__ = ["DuplicateGroup", "find_duplicate_groups", "group_components", "group_greedy"]
