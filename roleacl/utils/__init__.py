"""Utility helpers for the access control engine."""

from .helpers import as_list, describe_condition, is_wildcard, unique

__all__ = ["as_list", "describe_condition", "is_wildcard", "unique"]
