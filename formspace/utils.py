"""Utility functions for FormSpace.

This module provides small helpers used throughout the library, mostly for
normalizing loosely-typed selection input coming from rendering code.
"""

from collections.abc import Iterable
from typing import Any


def as_value_name(value: Any) -> str | None:
    """Coerce a scalar to the string form used for value names.

    Booleans become "true"/"false" and numbers their ``str()``, matching how
    condition leaves are read from a document. Anything that is not a
    string, bool, int or float yields None.

    Examples:
        >>> as_value_name(True)
        'true'
        >>> as_value_name(2)
        '2'
        >>> as_value_name(["x"]) is None
        True
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return None


def as_value_set(values: Any) -> frozenset[str]:
    """Normalize a selection input into a frozen set of value names.

    Rendering code hands selections over in whatever shape its widgets
    produce: a single string from a dropdown, a list from a multi-select,
    or nothing at all. This function folds all of them into one form.
    Numbers and booleans are coerced with as_value_name(), so a selection
    of ``1`` matches a condition leaf written as ``1``.

    Args:
        values: None, a single value name, or an iterable of value names.
            Empty strings are dropped, so a cleared dropdown ("") counts as
            no selection.

    Returns:
        A frozenset of value names (possibly empty).

    Raises:
        TypeError: If values is neither None, a scalar, nor an iterable of
            scalars.

    Examples:
        >>> as_value_set(None)
        frozenset()
        >>> as_value_set("Hard")
        frozenset({'Hard'})
        >>> as_value_set(["Easy", "Hard", ""])
        frozenset({'Easy', 'Hard'})
    """
    if values is None:
        return frozenset()

    name = as_value_name(values)
    if name is not None:
        return frozenset({name}) if name else frozenset()

    if not isinstance(values, Iterable):
        raise TypeError(
            f"values must be a string or an iterable of strings, "
            f"got {type(values).__name__}"
        )

    result: set[str] = set()
    for i, value in enumerate(values):
        name = as_value_name(value)
        if name is None:
            raise TypeError(
                f"All selected values must be strings, "
                f"got {type(value).__name__} at index {i}"
            )
        if name:
            result.add(name)
    return frozenset(result)


def format_names(names: Iterable[str]) -> str:
    """Format a collection of names as a sorted, comma-separated string.

    Used to build deterministic log and error messages from sets.

    Examples:
        >>> format_names({"b", "a"})
        "'a', 'b'"
    """
    return ", ".join(repr(name) for name in sorted(names))
