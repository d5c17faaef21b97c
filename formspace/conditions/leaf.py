"""Equality leaf of a condition tree.

A leaf ``{"Level": "Hard"}`` passes when "Hard" is among the selected values
of ``Level``, or when ``Level`` has nothing selected yet. An unselected
gating variable never hides its dependents: the decision is deferred until
the user acts on it.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from formspace.selection import SelectionState

from .base import Condition


class Equals(Condition):
    """Condition that a variable's selection includes a given value.

    Attributes:
        variable: Name of the referenced variable.
        value: The required value name.

    Examples:
        >>> cond = Equals("Level", "Hard")
        >>> cond({})
        True
        >>> cond({"Level": ["Easy"]})
        False
        >>> cond({"Level": ["Easy", "Hard"]})
        True
    """

    def __init__(self, variable: str, value: str) -> None:
        """Initialize an Equals condition.

        Args:
            variable: Name of the variable to test.
            value: Value name that must be selected.

        Raises:
            TypeError: If variable or value is not a string.
            ValueError: If variable is empty.
        """
        if not isinstance(variable, str):
            raise TypeError(f"variable must be str, got {type(variable).__name__}")
        if not isinstance(value, str):
            raise TypeError(f"value must be str, got {type(value).__name__}")
        if variable == "":
            raise ValueError("variable cannot be empty")

        self._variable = variable
        self._value = value

    @property
    def variable(self) -> str:
        """Name of the referenced variable."""
        return self._variable

    @property
    def value(self) -> str:
        """The required value name."""
        return self._value

    def __call__(self, selections: SelectionState | Mapping[str, Any]) -> bool:
        """Check the leaf against the selections.

        Args:
            selections: Current selection state or a plain mapping.

        Returns:
            True if the variable is unconstrained or its selection includes
            the required value.
        """
        state = SelectionState.coerce(selections)
        if not state.is_constrained(self._variable):
            return True
        return state.is_selected(self._variable, self._value)

    def get_required_variables(self) -> set[str]:
        return {self._variable}

    def iter_requirements(self) -> Iterator[tuple[str, str]]:
        yield self._variable, self._value

    def to_dict(self) -> dict[str, Any]:
        return {self._variable: self._value}

    def describe(self) -> str:
        return f"{self._variable} = {self._value}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Equals):
            return NotImplemented
        return self._variable == other._variable and self._value == other._value

    def __hash__(self) -> int:
        return hash((Equals, self._variable, self._value))

    def __repr__(self) -> str:
        return f"Equals({self._variable!r}, {self._value!r})"
