"""Schema and selection store.

SchemaStore owns one schema and one selection state for an editing session
and answers the queries a renderer needs after every interaction: whether a
variable is shown, which of its values are offered, which info texts apply,
and which values are related to or incompatible with the current choices.

Nothing derived is cached. Every query is evaluated from the current schema
and selections, so a mutation is visible to the very next query. A
re-entrant lock serializes access for hosts that call in from several
threads.

Examples:
    >>> store = SchemaStore()
    >>> schema = store.load_schema({"variables": [
    ...     {"name": "Level", "values": [{"name": "Easy"}, {"name": "Hard"}]},
    ...     {"name": "Boss", "values": [
    ...         {"name": "Dragon", "conditions": {"Level": "Hard"}},
    ...         {"name": "Goblin"}]},
    ... ]})
    >>> store.set_selection("Level", ["Easy"])
    >>> store.visible_values("Boss")
    ['Goblin']
    >>> store.compute_relationships()["Boss"].incompatible
    {'Dragon'}
"""

from collections.abc import Mapping
import logging
import threading
from typing import IO, Any, Literal

from .analysis import ValueRelationship, compute_relationships
from .dependency_graph import DependencyGraph
from .schema import Schema, VariableDefinition
from .selection import SelectionState
from .settings import StoreSettings
from .utils import as_value_set, format_names

logger = logging.getLogger(__name__)

DocumentFormat = Literal["json", "yaml", "toml"]


class SchemaStore:
    """In-memory schema plus the current selection state.

    Attributes:
        settings: The StoreSettings this store was created with.
    """

    def __init__(
        self,
        schema: Schema | Mapping[str, Any] | None = None,
        *,
        settings: StoreSettings | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            schema: Optional schema (or schema document) to load immediately.
            settings: Store settings; defaults to StoreSettings().

        Raises:
            ValueError: If schema is given and is not a valid document.
        """
        self.settings = settings or StoreSettings()
        self._lock = threading.RLock()
        self._schema = Schema(variables=[])
        self._graph = DependencyGraph(self._schema)
        self._selections = SelectionState()

        if schema is not None:
            self.load_schema(schema)

    @property
    def schema(self) -> Schema:
        """The currently loaded schema."""
        return self._schema

    @property
    def selections(self) -> SelectionState:
        """A copy of the current selection state."""
        with self._lock:
            return self._selections.copy()

    def load_schema(self, document: Schema | Mapping[str, Any]) -> Schema:
        """Replace the schema and clear every selection.

        The document is fully validated before anything changes, so a
        malformed document leaves the previous schema and selections intact.

        Args:
            document: A Schema or a schema document mapping.

        Returns:
            The loaded Schema.

        Raises:
            ValueError: If the document is malformed.
        """
        schema = Schema.from_document(document)
        graph = DependencyGraph(schema)

        with self._lock:
            self._schema = schema
            self._graph = graph
            self._selections = SelectionState()

        logger.info("Loaded schema with %d variables", len(schema.variables))

        level = (
            logging.WARNING
            if self.settings.warn_on_dangling_references
            else logging.DEBUG
        )
        for reference in graph.dangling_references:
            logger.log(level, "Dangling condition reference: %s", reference)

        return schema

    def load(self, fp: IO[Any], format: DocumentFormat = "json") -> Schema:
        """Read a schema document from a file-like object and load it.

        Args:
            fp: Readable text or binary handle.
            format: Document format: "json", "yaml" or "toml".

        Returns:
            The loaded Schema.

        Raises:
            ValueError: If the format is unknown or the document is malformed.
            RuntimeError: If the library for the format is not installed.
        """
        data = fp.read()

        if format == "json":
            schema = Schema.model_validate_json(data)
        elif format == "yaml":
            schema = Schema.model_validate_yaml(data)
        elif format == "toml":
            schema = Schema.model_validate_toml(data)
        else:
            raise ValueError(f"Unknown document format {format!r}")

        return self.load_schema(schema)

    def dump(self, fp: IO[str], format: DocumentFormat = "json") -> None:
        """Write the current schema document to a text file-like object.

        Args:
            fp: Writable text handle.
            format: Document format: "json", "yaml" or "toml".

        Raises:
            ValueError: If the format is unknown.
            RuntimeError: If the library for the format is not installed.
        """
        schema = self._schema

        if format == "json":
            fp.write(schema.model_dump_json())
        elif format == "yaml":
            fp.write(schema.model_dump_yaml())
        elif format == "toml":
            fp.write(schema.model_dump_toml())
        else:
            raise ValueError(f"Unknown document format {format!r}")

    def get_variable(self, name: str) -> VariableDefinition:
        """Return the variable with the given name.

        Raises:
            ValueError: If the schema has no such variable.
        """
        variable = self._schema.get_variable(name)
        if variable is None:
            raise ValueError(
                f"Unknown variable {name!r}. "
                f"Known variables: {format_names(self._schema.variable_names)}"
            )
        return variable

    def get_selection(self, name: str) -> frozenset[str]:
        """Return the selected values of a variable (empty if none)."""
        with self._lock:
            return self._selections.get(name)

    def set_selection(self, name: str, values: Any) -> None:
        """Replace the selection of a variable.

        Selected values are not checked against the current conditions; use
        prune_selections() to drop choices that are no longer visible.

        Args:
            name: Variable name.
            values: None, a single value name, or an iterable of value names.

        Raises:
            ValueError: If the variable is unknown, or several values are
                given while multiple selection is disabled.
            TypeError: If values are not strings.
        """
        value_set = as_value_set(values)

        with self._lock:
            variable = self.get_variable(name)
            if len(value_set) > 1 and not self.settings.allow_multiple:
                raise ValueError(
                    f"Variable {name!r} accepts a single value, "
                    f"got {format_names(value_set)}"
                )

            undeclared = value_set - set(variable.value_names)
            if undeclared:
                logger.debug(
                    "Selecting undeclared values %s for %r",
                    format_names(undeclared),
                    name,
                )

            self._selections.set(name, value_set)

    def toggle_selection(self, name: str, value: str) -> None:
        """Select value for a variable, or deselect it if already selected.

        With multiple selection disabled, selecting a value replaces the
        previous one.

        Raises:
            ValueError: If the variable is unknown.
        """
        with self._lock:
            current = self._selections.get(name)
            if self.settings.allow_multiple or value in current:
                new_values = current ^ {value}
            else:
                new_values = frozenset({value})
            self.set_selection(name, new_values)

    def clear_selections(self) -> None:
        """Drop every selection."""
        with self._lock:
            self._selections.clear()

    def is_visible(self, name: str) -> bool:
        """Whether the variable's own conditions pass.

        Raises:
            ValueError: If the variable is unknown.
        """
        with self._lock:
            variable = self.get_variable(name)
            return variable.conditions(self._selections)

    def visible_values(self, name: str) -> list[str]:
        """Names of the variable's values whose conditions pass, in order.

        Raises:
            ValueError: If the variable is unknown.
        """
        with self._lock:
            variable = self.get_variable(name)
            return [
                value.name
                for value in variable.values
                if value.name is not None and value.conditions(self._selections)
            ]

    def visible_descriptions(self, name: str) -> list[str]:
        """Descriptions of the variable's values whose conditions pass.

        Falls back to the variable's own description when no value matches
        or the variable has no values. Returns an empty list if there is no
        such description either.

        Raises:
            ValueError: If the variable is unknown.
        """
        with self._lock:
            variable = self.get_variable(name)
            descriptions = [
                value.description
                for value in variable.values
                if value.description is not None and value.conditions(self._selections)
            ]

        if descriptions:
            return descriptions
        if variable.description is not None:
            return [variable.description]
        return []

    def compute_relationships(self) -> dict[str, ValueRelationship]:
        """Related and incompatible values of every variable, given the selections."""
        with self._lock:
            return compute_relationships(self._schema, self._selections)

    def prune_selections(self) -> dict[str, frozenset[str]]:
        """Drop selections that the current conditions no longer allow.

        A variable that is hidden loses its whole selection; otherwise each
        selected value whose own conditions fail is removed. Pruning repeats
        until nothing changes, since dropping one choice can hide another.
        This is never done implicitly by the store.

        Returns:
            Mapping of variable name to the values that were removed.
        """
        removed: dict[str, frozenset[str]] = {}

        with self._lock:
            changed = True
            while changed:
                changed = False
                for name, selected in list(self._selections.items()):
                    variable = self._schema.get_variable(name)
                    if variable is None:
                        continue

                    if not variable.conditions(self._selections):
                        dropped = selected
                    else:
                        visible = set(self.visible_values(name))
                        dropped = frozenset(
                            value
                            for value in selected
                            if value in variable.value_names and value not in visible
                        )

                    if dropped:
                        self._selections.set(name, selected - dropped)
                        removed[name] = removed.get(name, frozenset()) | dropped
                        changed = True

        if removed:
            logger.debug("Pruned selections: %s", removed)
        return removed

    def get_dependents(self, name: str) -> set[str]:
        """Variables whose conditions reference the given variable."""
        with self._lock:
            return self._graph.get_dependents(name)

    def __repr__(self) -> str:
        return (
            f"SchemaStore(variables={len(self._schema.variables)}, "
            f"selections={self._selections!r})"
        )
