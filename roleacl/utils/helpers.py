"""
Utility helper functions for the access control engine.

This module normalises the loosely typed arguments accepted by the
engine's mutation commands.
"""

from typing import Any, Hashable, Iterable, List, Optional

from roleacl.core.models import ALL_PRIVILEGES, Condition


def as_list(value: Any) -> List[Any]:
    """
    Normalise a single identifier or an iterable of identifiers to a list.

    Args:
        value: None, a single identifier or an iterable of identifiers

    Returns:
        List of identifiers

    Examples:
        None -> []
        "news.read" -> ["news.read"]
        ("a", "b") -> ["a", "b"]
    """
    if value is None:
        return []

    # Strings and bytes are iterable but name a single identifier
    if isinstance(value, (str, bytes)):
        return [value]

    try:
        return list(value)
    except TypeError:
        return [value]


def unique(items: Iterable[Hashable]) -> List[Hashable]:
    """Remove duplicates while keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def is_wildcard(privileges: Any) -> bool:
    """Check whether a privileges argument means "all privileges"."""
    return privileges is None or (
        isinstance(privileges, str) and privileges == ALL_PRIVILEGES
    )


def describe_condition(condition: Optional[Condition]) -> str:
    """
    Get a printable name for a condition callback.

    Args:
        condition: Condition callback or None

    Returns:
        "none" when there is no condition, otherwise the callable's
        qualified name (falling back to its repr)
    """
    if condition is None:
        return "none"

    name = getattr(condition, "__qualname__", None) or getattr(condition, "__name__", None)
    if name:
        return name
    return repr(condition)
