"""
Base class for condition trees.

A condition tree gates whether a variable or a value is shown. Every node
evaluates against a selection state and can report which variables and
values it refers to, so the relationship analyzer can project it without
evaluating it.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from formspace.selection import SelectionState


class Condition(ABC):
    """Base class for all condition tree nodes.

    Conditions are immutable once built. Subclasses implement evaluation,
    dependency reporting and conversion back to the document form.
    """

    @abstractmethod
    def __call__(self, selections: SelectionState | Mapping[str, Any]) -> bool:
        """Evaluate the condition against the current selections."""
        pass

    @abstractmethod
    def get_required_variables(self) -> set[str]:
        """Return the names of every variable this condition refers to."""
        pass

    @abstractmethod
    def iter_requirements(self) -> Iterator[tuple[str, str]]:
        """Yield every (variable, value) equality test in the tree.

        The AND/OR structure is discarded: a pair is yielded once per leaf,
        whatever its depth or enclosing operator.
        """
        pass

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the document form of this condition."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Return a readable rendering, e.g. ``Level = Hard AND Boss = Dragon``."""
        pass

    @property
    def is_empty(self) -> bool:
        """Whether this is the empty (always true) condition."""
        return False

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        """Let pydantic models hold condition trees as document mappings.

        Validation parses any document fragment (or passes a Condition
        through); serialization writes the document form back.
        """
        from .parsing import parse_condition

        return core_schema.no_info_plain_validator_function(
            parse_condition,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda condition: condition.to_dict()
            ),
        )

    def __str__(self) -> str:
        return self.describe()
