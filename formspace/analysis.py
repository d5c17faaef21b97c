"""Relationship analysis between values.

This module classifies values relative to the current selections so a
renderer can highlight compatible options before the user picks them:

- related: values that go together with a selected value's conditions.
- incompatible: values excluded by a selected value's conditions, or values
  whose own conditions can no longer be met given what is already chosen.

The analysis projects each condition tree onto a per-variable allow-list
(analyze_condition_tree), throwing away the AND/OR structure. The result
over-approximates what is reachable and is meant for hinting only: whether
something is actually shown is always decided by evaluating the tree.

Examples:
    >>> schema = Schema.from_document({"variables": [
    ...     {"name": "Level", "values": [{"name": "Easy"}, {"name": "Hard"}]},
    ...     {"name": "Boss", "values": [
    ...         {"name": "Dragon", "conditions": {"Level": "Hard"}}]},
    ... ]})
    >>> compute_relationships(schema, {"Level": ["Easy"]})["Boss"].incompatible
    {'Dragon'}
"""

from collections.abc import Mapping
import logging
from typing import Any

from .conditions import Condition, parse_condition
from .schema import Schema
from .selection import SelectionState

logger = logging.getLogger(__name__)


class ConditionAnalysis:
    """Flattened projection of a condition tree.

    Attributes:
        required_variables: Every variable referenced anywhere in the tree.
        allowed_values: For each referenced variable, the values named by
            any leaf on that variable.
    """

    def __init__(
        self,
        required_variables: set[str] | None = None,
        allowed_values: dict[str, set[str]] | None = None,
    ) -> None:
        self.required_variables: set[str] = required_variables or set()
        self.allowed_values: dict[str, set[str]] = allowed_values or {}

    def allows(self, variable: str, value: str) -> bool:
        """Whether any leaf of the tree names value for variable."""
        return value in self.allowed_values.get(variable, set())

    def is_reachable(self, selections: SelectionState) -> bool:
        """Whether every constrained variable is unselected or overlaps its allow-list.

        A referenced variable without a selection never blocks: the user may
        still pick one of its allowed values.
        """
        for variable in self.required_variables:
            selected = selections.get(variable)
            if selected and not (selected & self.allowed_values.get(variable, set())):
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConditionAnalysis):
            return NotImplemented
        return (
            self.required_variables == other.required_variables
            and self.allowed_values == other.allowed_values
        )

    def __repr__(self) -> str:
        return (
            f"ConditionAnalysis(required_variables={self.required_variables!r}, "
            f"allowed_values={self.allowed_values!r})"
        )


class ValueRelationship:
    """Related and incompatible value names for one variable."""

    def __init__(
        self, related: set[str] | None = None, incompatible: set[str] | None = None
    ) -> None:
        self.related: set[str] = related or set()
        self.incompatible: set[str] = incompatible or set()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueRelationship):
            return NotImplemented
        return self.related == other.related and self.incompatible == other.incompatible

    def __repr__(self) -> str:
        return (
            f"ValueRelationship(related={sorted(self.related)!r}, "
            f"incompatible={sorted(self.incompatible)!r})"
        )


def analyze_condition_tree(
    tree: Condition | Mapping[str, Any] | None,
) -> ConditionAnalysis:
    """Project a condition tree onto per-variable allow-lists.

    Every leaf contributes its (variable, value) pair, whether it sits under
    allOf or anyOf and however deeply it is nested.

    Args:
        tree: A Condition or condition document.

    Returns:
        The flattened analysis. An empty tree yields an empty analysis.

    Examples:
        >>> analysis = analyze_condition_tree(
        ...     {"allOf": [{"anyOf": [{"A": "x"}, {"A": "y"}]}, {"B": "z"}]}
        ... )
        >>> sorted(analysis.required_variables)
        ['A', 'B']
        >>> sorted(analysis.allowed_values["A"])
        ['x', 'y']
    """
    analysis = ConditionAnalysis()
    for variable, value in parse_condition(tree).iter_requirements():
        analysis.required_variables.add(variable)
        analysis.allowed_values.setdefault(variable, set()).add(value)
    return analysis


def compute_relationships(
    schema: Schema, selections: SelectionState | Mapping[str, Any] | None
) -> dict[str, ValueRelationship]:
    """Classify values as related or incompatible under the current selections.

    Every variable gets an entry. Then, for each named value ``v`` carrying a
    non-empty condition tree:

    1. If ``v`` is selected, each variable its tree references has the
       values outside the allow-list marked incompatible, and the values in
       the allow-list marked related.
    2. Whether or not ``v`` is selected, ``v`` is marked incompatible in its
       own variable when some referenced variable already has a selection
       that shares nothing with the allow-list.

    Values without conditions are never classified. Info values have no
    name and are skipped.

    Args:
        schema: The schema.
        selections: Current selection state or plain mapping.

    Returns:
        Mapping of variable name to its ValueRelationship.
    """
    state = SelectionState.coerce(selections)
    relationships: dict[str, ValueRelationship] = {
        variable.name: ValueRelationship() for variable in schema.variables
    }

    for variable in schema.variables:
        for value in variable.values:
            if value.name is None or not value.has_conditions:
                continue

            analysis = analyze_condition_tree(value.conditions)

            if state.is_selected(variable.name, value.name):
                for required in sorted(analysis.required_variables):
                    target = schema.get_variable(required)
                    if target is None:
                        logger.debug(
                            "Value %r of %r references unknown variable %r",
                            value.name,
                            variable.name,
                            required,
                        )
                        continue

                    allowed = analysis.allowed_values[required]
                    entry = relationships[required]
                    for candidate in target.value_names:
                        if not analysis.allows(required, candidate):
                            entry.incompatible.add(candidate)
                    entry.related.update(allowed)

            if not analysis.is_reachable(state):
                relationships[variable.name].incompatible.add(value.name)

    return relationships
