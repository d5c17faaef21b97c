"""
Dependency graph between the variables of a schema.

A variable depends on another when its own conditions, or the conditions of
any of its values, refer to that variable. The graph is used to find which
variables need re-rendering after a selection changes, and to report
condition leaves that point at variables or values the schema does not
declare.

Cycles are allowed: a schema may gate A's values on B and B's values on A.
"""

from typing import Any, NamedTuple

from .schema import Schema


class DanglingReference(NamedTuple):
    """A condition leaf referring to something the schema does not declare.

    Attributes:
        owner: Variable whose conditions (or whose values' conditions) hold
            the leaf.
        variable: The referenced variable name.
        value: The referenced value name, or None when the variable itself
            is unknown.
    """

    owner: str
    variable: str
    value: str | None

    def __str__(self) -> str:
        if self.value is None:
            return f"{self.owner!r} references unknown variable {self.variable!r}"
        return (
            f"{self.owner!r} references unknown value {self.value!r} "
            f"of variable {self.variable!r}"
        )


class DependencyGraph:
    """
    Builds dependency relationships between schema variables.

    This class analyzes condition trees to:
    - Map each variable to the variables it depends on
    - Find the dependents of a variable
    - Report dangling references
    - Provide visualization data
    """

    def __init__(self, schema: Schema) -> None:
        """
        Initialize dependency graph from a schema.

        Args:
            schema: The schema to analyze.
        """
        self.schema = schema
        self.dependencies: dict[str, set[str]] = {}
        self.dangling_references: list[DanglingReference] = []
        self._build_dependencies()
        self._find_dangling_references()

    def _build_dependencies(self) -> None:
        """Build the dependency map for all variables."""
        for variable in self.schema.variables:
            deps = self.dependencies.setdefault(variable.name, set())
            deps.update(variable.conditions.get_required_variables())
            for value in variable.values:
                deps.update(value.conditions.get_required_variables())

    def _find_dangling_references(self) -> None:
        """Collect leaves naming unknown variables or undeclared enum values."""
        seen: set[DanglingReference] = set()

        for variable in self.schema.variables:
            trees = [variable.conditions]
            trees.extend(value.conditions for value in variable.values)
            for tree in trees:
                for ref_variable, ref_value in tree.iter_requirements():
                    target = self.schema.get_variable(ref_variable)
                    if target is None:
                        reference = DanglingReference(variable.name, ref_variable, None)
                    elif target.is_enum and target.get_value(ref_value) is None:
                        reference = DanglingReference(
                            variable.name, ref_variable, ref_value
                        )
                    else:
                        continue

                    if reference not in seen:
                        seen.add(reference)
                        self.dangling_references.append(reference)

    def get_dependencies(self, variable: str) -> set[str]:
        """
        Get direct dependencies of a variable.

        Args:
            variable: The variable to query.

        Returns:
            Set of variable names that this variable depends on.
        """
        return self.dependencies.get(variable, set()).copy()

    def get_dependents(self, variable: str) -> set[str]:
        """
        Get variables that depend on this variable.

        Args:
            variable: The variable to query.

        Returns:
            Set of variable names that depend on this variable.
        """
        dependents: set[str] = set()
        for name, deps in self.dependencies.items():
            if variable in deps:
                dependents.add(name)
        return dependents

    def get_graph_data(self) -> dict[str, Any]:
        """
        Get graph data for visualization.

        Returns:
            Dictionary with nodes, edges, dependencies and dangling references.
        """
        edges: list[dict[str, str]] = []

        for name, deps in self.dependencies.items():
            for dep in sorted(deps):
                edges.append({"from": dep, "to": name})

        return {
            "nodes": list(self.dependencies.keys()),
            "edges": edges,
            "dependencies": {k: sorted(v) for k, v in self.dependencies.items()},
            "dangling": [str(reference) for reference in self.dangling_references],
        }
