"""Composite conditions for combining condition trees.

This module provides the empty condition and the two logical operators of the
schema document:

- Always: the empty tree ``{}``; always True.
- AllOf: ``{"allOf": [...]}``; True if every child is True (vacuously True
  when there are no children).
- AnyOf: ``{"anyOf": [...]}``; True if at least one child is True (False when
  there are no children).

Note the asymmetry between an empty tree and an empty ``anyOf``: the former
places no condition at all, the latter can never be satisfied.

Examples:
    >>> tree = AllOf([
    ...     AnyOf([Equals("A", "x"), Equals("A", "y")]),
    ...     Equals("B", "z"),
    ... ])
    >>> tree({"A": ["y"]})
    True
    >>> tree({"A": ["y"], "B": ["w"]})
    False
    >>> tree.describe()
    '(A = x OR A = y) AND B = z'
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from formspace.selection import SelectionState

from .base import Condition


class Always(Condition):
    """The empty condition tree. Places no constraint on anything."""

    def __call__(self, selections: SelectionState | Mapping[str, Any]) -> bool:
        return True

    def get_required_variables(self) -> set[str]:
        return set()

    def iter_requirements(self) -> Iterator[tuple[str, str]]:
        return iter(())

    def to_dict(self) -> dict[str, Any]:
        return {}

    def describe(self) -> str:
        return "always"

    @property
    def is_empty(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return isinstance(other, Always)

    def __hash__(self) -> int:
        return hash(Always)

    def __repr__(self) -> str:
        return "Always()"


class CompositeCondition(Condition):
    """Base class for AllOf and AnyOf.

    Holds an ordered list of child conditions. Unlike leaves, composites may
    have any number of children, including none.
    """

    _operator: str = ""
    _joiner: str = ""

    def __init__(self, conditions: Iterable[Condition]) -> None:
        """Initialize a composite condition.

        Args:
            conditions: Iterable of Condition instances.

        Raises:
            TypeError: If conditions is not iterable or contains non-Condition
                items.
        """
        try:
            conditions_list = list(conditions)
        except TypeError:
            raise TypeError(
                f"conditions must be iterable, got {type(conditions).__name__}"
            ) from None

        for i, cond in enumerate(conditions_list):
            if not isinstance(cond, Condition):
                raise TypeError(
                    f"All conditions must be Condition instances, "
                    f"got {type(cond).__name__} at index {i}"
                )

        self._conditions = tuple(conditions_list)

    @property
    def conditions(self) -> list[Condition]:
        """Get a copy of the child conditions."""
        return list(self._conditions)

    def get_required_variables(self) -> set[str]:
        required: set[str] = set()
        for cond in self._conditions:
            required.update(cond.get_required_variables())
        return required

    def iter_requirements(self) -> Iterator[tuple[str, str]]:
        for cond in self._conditions:
            yield from cond.iter_requirements()

    def to_dict(self) -> dict[str, Any]:
        return {self._operator: [cond.to_dict() for cond in self._conditions]}

    def describe(self) -> str:
        parts = []
        for cond in self._conditions:
            text = cond.describe()
            if isinstance(cond, CompositeCondition) and len(cond._conditions) > 1:
                text = f"({text})"
            parts.append(text)
        return self._joiner.join(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        if type(other) is not type(self):
            return False
        return self._conditions == other._conditions  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._conditions))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._conditions)!r})"


class AllOf(CompositeCondition):
    """Logical AND of child conditions.

    Examples:
        >>> cond = AllOf([Equals("Level", "Hard"), Equals("Mode", "Solo")])
        >>> cond({"Level": ["Hard"]})
        True
        >>> cond({"Level": ["Hard"], "Mode": ["Coop"]})
        False
    """

    _operator = "allOf"
    _joiner = " AND "

    def __call__(self, selections: SelectionState | Mapping[str, Any]) -> bool:
        """Evaluate all child conditions with AND logic.

        Returns:
            True if every child is True, or if there are no children.
        """
        state = SelectionState.coerce(selections)
        return all(condition(state) for condition in self._conditions)

    def describe(self) -> str:
        if not self._conditions:
            return "always"
        return super().describe()


class AnyOf(CompositeCondition):
    """Logical OR of child conditions.

    Examples:
        >>> cond = AnyOf([Equals("Level", "Hard"), Equals("Level", "Expert")])
        >>> cond({"Level": ["Expert"]})
        True
        >>> AnyOf([])({})
        False
    """

    _operator = "anyOf"
    _joiner = " OR "

    def __call__(self, selections: SelectionState | Mapping[str, Any]) -> bool:
        """Evaluate all child conditions with OR logic.

        Returns:
            True if at least one child is True; False if there are no children.
        """
        state = SelectionState.coerce(selections)
        return any(condition(state) for condition in self._conditions)

    def describe(self) -> str:
        if not self._conditions:
            return "never"
        return super().describe()
