"""Selection state for a single editing session.

The selection state maps variable names to the set of value names the user
has currently chosen. An absent entry and an empty set mean the same thing:
the variable is unconstrained. The state is never written to disk; it lives
only as long as the store that owns it.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Self

from .utils import as_value_set


class SelectionState:
    """Mutable mapping of variable name to selected value names.

    Values are stored as frozensets so callers can hand them out freely
    without exposing the internal state to mutation. Setting an empty
    selection removes the entry entirely.

    Examples:
        >>> state = SelectionState({"Level": ["Hard"]})
        >>> state.get("Level")
        frozenset({'Hard'})
        >>> state.is_constrained("Boss")
        False
        >>> state.toggle("Level", "Hard")
        >>> state.get("Level")
        frozenset()
    """

    def __init__(self, selections: Mapping[str, Any] | None = None) -> None:
        """Initialize the selection state.

        Args:
            selections: Optional initial mapping. Each value may be None, a
                single value name, or an iterable of value names.

        Raises:
            TypeError: If selections is not a mapping or holds invalid values.
        """
        self._selections: dict[str, frozenset[str]] = {}

        if selections is None:
            return
        if not isinstance(selections, Mapping):
            raise TypeError(
                f"selections must be a mapping, got {type(selections).__name__}"
            )
        for variable, values in selections.items():
            self.set(variable, values)

    @classmethod
    def coerce(cls, selections: "SelectionState | Mapping[str, Any] | None") -> Self:
        """Return selections as a SelectionState, wrapping plain mappings.

        An existing SelectionState is returned as-is (not copied).
        """
        if isinstance(selections, SelectionState):
            return selections  # type: ignore[return-value]
        return cls(selections)

    def get(self, variable: str) -> frozenset[str]:
        """Get the selected values for a variable (empty if unconstrained)."""
        return self._selections.get(variable, frozenset())

    def set(self, variable: str, values: Any) -> None:
        """Replace the selection for a variable.

        Args:
            variable: Variable name.
            values: None, a single value name, or an iterable of value names.
                An empty selection removes the entry.

        Raises:
            TypeError: If variable is not a string or values are invalid.
        """
        if not isinstance(variable, str):
            raise TypeError(f"variable must be str, got {type(variable).__name__}")

        value_set = as_value_set(values)
        if value_set:
            self._selections[variable] = value_set
        else:
            self._selections.pop(variable, None)

    def toggle(self, variable: str, value: str) -> None:
        """Add value to the variable's selection, or remove it if present."""
        current = self.get(variable)
        if value in current:
            self.set(variable, current - {value})
        else:
            self.set(variable, current | {value})

    def clear(self) -> None:
        """Drop every selection."""
        self._selections.clear()

    def is_constrained(self, variable: str) -> bool:
        """Whether the variable has at least one selected value."""
        return variable in self._selections

    def is_selected(self, variable: str, value: str) -> bool:
        """Whether value is currently selected for variable."""
        return value in self.get(variable)

    def copy(self) -> "SelectionState":
        """Return an independent copy of this state."""
        clone = SelectionState()
        clone._selections = dict(self._selections)
        return clone

    def as_dict(self) -> dict[str, list[str]]:
        """Return a plain dict of sorted value lists, suitable for JSON."""
        return {
            variable: sorted(values) for variable, values in self._selections.items()
        }

    def __contains__(self, variable: object) -> bool:
        return variable in self._selections

    def __iter__(self) -> Iterator[str]:
        return iter(self._selections)

    def __len__(self) -> int:
        return len(self._selections)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionState):
            return NotImplemented
        return self._selections == other._selections

    def items(self) -> Iterable[tuple[str, frozenset[str]]]:
        return self._selections.items()

    def __repr__(self) -> str:
        return f"SelectionState({self.as_dict()!r})"
