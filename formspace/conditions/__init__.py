"""Condition trees gating the visibility of variables and values.

Condition Types:
---------------
- Always: The empty tree ``{}``. Always True.
- Equals: Leaf ``{"Level": "Hard"}``. True when "Hard" is selected for
  ``Level``, or when ``Level`` has no selection yet.
- AllOf: ``{"allOf": [...]}``. True when every child is True.
- AnyOf: ``{"anyOf": [...]}``. True when at least one child is True.

Trees are usually built from schema documents with parse_condition() and
evaluated with evaluate() or by calling them directly.

Examples:
    >>> from formspace.conditions import evaluate, parse_condition
    >>>
    >>> tree = parse_condition({
    ...     "allOf": [
    ...         {"anyOf": [{"A": "x"}, {"A": "y"}]},
    ...         {"B": "z"},
    ...     ]
    ... })
    >>> tree({"A": ["x"], "B": ["z"]})
    True
    >>> evaluate(tree, {"B": ["w"]})
    False
"""

from .base import Condition
from .composite_conditions import AllOf, Always, AnyOf, CompositeCondition
from .leaf import Equals
from .parsing import evaluate, parse_condition

__all__ = [
    # Base classes
    "Condition",
    "CompositeCondition",
    # Tree nodes
    "Always",
    "AllOf",
    "AnyOf",
    "Equals",
    # Document handling and evaluation
    "parse_condition",
    "evaluate",
]
