"""FormSpace: conditional form schemas.

FormSpace evaluates schemas of named variables whose visibility, and the
visibility of whose values, depends on what has been selected for other
variables. A renderer turns the schema into a form; after each user
interaction it asks the engine which variables and values to show and which
values are related to or incompatible with the current choices.

Core Components:
---------------
- Conditions: Always, Equals, AllOf, AnyOf and evaluate() for condition trees
- Schema: Pydantic models for the schema document (JSON, YAML, TOML)
- SelectionState: The user's current choices, one set per variable
- Analysis: analyze_condition_tree() and compute_relationships() for
  related/incompatible hints
- SchemaStore: Schema plus selections, with the queries a renderer needs

Quick Start:
-----------
    >>> import formspace as fs
    >>>
    >>> store = fs.SchemaStore()
    >>> schema = store.load_schema({
    ...     "variables": [
    ...         {"name": "Level", "type": "enum",
    ...          "values": [{"name": "Easy"}, {"name": "Hard"}]},
    ...         {"name": "Boss", "type": "enum",
    ...          "values": [{"name": "Dragon", "conditions": {"Level": "Hard"}}]},
    ...         {"name": "Tip", "type": "info", "description": "Good luck!",
    ...          "values": [{"description": "Bring a shield.",
    ...                      "conditions": {"Boss": "Dragon"}}]},
    ...     ]
    ... })
    >>>
    >>> store.set_selection("Level", ["Easy"])
    >>> store.compute_relationships()["Boss"].incompatible
    {'Dragon'}
    >>> store.visible_values("Boss")
    []
    >>>
    >>> store.set_selection("Level", ["Hard"])
    >>> store.set_selection("Boss", ["Dragon"])
    >>> store.visible_descriptions("Tip")
    ['Bring a shield.']
"""

from .analysis import (
    ConditionAnalysis,
    ValueRelationship,
    analyze_condition_tree,
    compute_relationships,
)
from .conditions import (
    AllOf,
    Always,
    AnyOf,
    Condition,
    Equals,
    evaluate,
    parse_condition,
)
from .dependency_graph import DanglingReference, DependencyGraph
from .schema import Schema, ValueDefinition, VariableDefinition
from .selection import SelectionState
from .settings import StoreSettings
from .store import SchemaStore

__version__ = "0.1.0"

__all__ = [
    # Conditions
    "Condition",
    "Always",
    "Equals",
    "AllOf",
    "AnyOf",
    "parse_condition",
    "evaluate",
    # Schema document
    "Schema",
    "VariableDefinition",
    "ValueDefinition",
    # Selection state
    "SelectionState",
    # Relationship analysis
    "ConditionAnalysis",
    "ValueRelationship",
    "analyze_condition_tree",
    "compute_relationships",
    # Dependency graph
    "DependencyGraph",
    "DanglingReference",
    # Store
    "SchemaStore",
    "StoreSettings",
    # Version
    "__version__",
]
