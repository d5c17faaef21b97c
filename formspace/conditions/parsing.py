"""Conversion between condition documents and Condition trees.

Condition documents come from hand-edited schema files, so parsing is
permissive: anything it cannot interpret places no constraint instead of
raising. Every fragment that gets dropped is logged at DEBUG level.

Document grammar::

    ConditionTree := {} | {"allOf": [ConditionTree, ...]}
                   | {"anyOf": [ConditionTree, ...]}
                   | {variableName: valueName, ...}

A mapping with several ``variable: value`` entries requires all of them.
When a mapping holds an operator key, ``allOf`` takes precedence over
``anyOf`` and any other keys are ignored.
"""

from collections.abc import Mapping
import logging
from typing import Any

from formspace.selection import SelectionState
from formspace.utils import as_value_name

from .base import Condition
from .composite_conditions import AllOf, Always, AnyOf
from .leaf import Equals

logger = logging.getLogger(__name__)

ALL_OF = "allOf"
ANY_OF = "anyOf"


def parse_condition(document: Any) -> Condition:
    """Build a Condition tree from its document form.

    Args:
        document: A condition mapping, None, or an existing Condition (which
            is returned unchanged).

    Returns:
        The parsed Condition. Unrecognized input yields Always().

    Examples:
        >>> parse_condition({})
        Always()
        >>> parse_condition({"Level": "Hard"})
        Equals('Level', 'Hard')
        >>> parse_condition({"anyOf": [{"A": "x"}, {"A": "y"}]})
        AnyOf([Equals('A', 'x'), Equals('A', 'y')])
    """
    if isinstance(document, Condition):
        return document
    if document is None:
        return Always()
    if not isinstance(document, Mapping):
        logger.debug(
            "Ignoring condition of type %s; expected a mapping",
            type(document).__name__,
        )
        return Always()

    if ALL_OF in document:
        return _parse_operator(AllOf, ALL_OF, document[ALL_OF])
    if ANY_OF in document:
        return _parse_operator(AnyOf, ANY_OF, document[ANY_OF])

    leaves: list[Condition] = []
    for variable, value in document.items():
        leaf = _parse_leaf(variable, value)
        if leaf is not None:
            leaves.append(leaf)

    if not leaves:
        return Always()
    if len(leaves) == 1:
        return leaves[0]
    return AllOf(leaves)


def _parse_operator(
    operator: type[AllOf] | type[AnyOf], key: str, operands: Any
) -> Condition:
    if not isinstance(operands, list | tuple):
        logger.debug(
            "Ignoring %r operand of type %s; expected a list",
            key,
            type(operands).__name__,
        )
        return Always()

    children: list[Condition] = []
    for i, operand in enumerate(operands):
        if not isinstance(operand, Mapping):
            logger.debug(
                "Skipping %r child at index %d of type %s",
                key,
                i,
                type(operand).__name__,
            )
            continue
        children.append(parse_condition(operand))
    return operator(children)


def _parse_leaf(variable: Any, value: Any) -> Condition | None:
    if not isinstance(variable, str) or variable == "":
        logger.debug("Skipping condition with invalid variable name %r", variable)
        return None

    name = as_value_name(value)
    if name is None:
        logger.debug(
            "Skipping condition on %r with non-scalar value of type %s",
            variable,
            type(value).__name__,
        )
        return None
    return Equals(variable, name)


def evaluate(tree: Any, selections: SelectionState | Mapping[str, Any] | None) -> bool:
    """Evaluate a condition tree against a selection state.

    This is the authoritative visibility test. ``tree`` may be a Condition
    or a raw document fragment; ``selections`` may be a SelectionState or a
    plain mapping of variable name to selected value(s).

    Args:
        tree: Condition or condition document.
        selections: Current selections. None means nothing is selected.

    Returns:
        Whether the tree is satisfied.

    Examples:
        >>> evaluate({}, {"anything": ["x"]})
        True
        >>> evaluate({"Level": "Hard"}, {"Level": ["Easy"]})
        False
        >>> evaluate({"Level": "Hard"}, {})
        True
    """
    return parse_condition(tree)(SelectionState.coerce(selections))
