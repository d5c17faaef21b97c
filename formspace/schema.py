"""Schema document model.

A schema is an ordered list of variables. Each variable has a type, optional
conditions gating its own visibility, and an ordered list of values which
may carry conditions of their own. Enum values are identified by ``name``.
Every other type ("info" by convention) is display-only text: its values
carry a ``description`` to show.

The models are Pydantic models so documents are validated on load. Condition
trees are parsed permissively (see formspace.conditions.parsing), while the
outer document structure is not: a document that is not a mapping, lacks
``variables``, or has fields of the wrong type fails to load as a whole.
A null ``values`` list reads as empty.

Examples:
    >>> schema = Schema.from_document({
    ...     "variables": [
    ...         {"name": "Level", "type": "enum",
    ...          "values": [{"name": "Easy"}, {"name": "Hard"}]},
    ...         {"name": "Boss", "type": "enum",
    ...          "values": [{"name": "Dragon", "conditions": {"Level": "Hard"}}]},
    ...     ]
    ... })
    >>> schema.get_variable("Boss").get_value("Dragon").conditions
    Equals('Level', 'Hard')
    >>> json_str = schema.model_dump_json()
    >>> Schema.model_validate_json(json_str) == schema
    True
"""

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .conditions import Always, Condition


class ValueDefinition(BaseModel):
    """One value of a variable.

    Attributes:
        name: Selectable option name (enum variables).
        description: Displayed text (info variables, optional for enums).
        conditions: Condition tree gating this value.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    description: str | None = None
    conditions: Condition = Field(default_factory=Always)

    @property
    def has_conditions(self) -> bool:
        """Whether this value carries a non-empty condition tree."""
        return not self.conditions.is_empty

    def to_document(self) -> dict[str, Any]:
        """Return the document form, omitting absent keys and empty conditions."""
        document: dict[str, Any] = {}
        if self.name is not None:
            document["name"] = self.name
        if self.description is not None:
            document["description"] = self.description
        if self.has_conditions:
            document["conditions"] = self.conditions.to_dict()
        return document


class VariableDefinition(BaseModel):
    """A named variable with its values.

    Attributes:
        name: Unique variable name within the schema.
        type: "enum" for selectable options. Any other type (usually
            "info") is rendered as conditional text.
        description: Optional description shown with the variable.
        conditions: Condition tree gating the variable itself.
        values: Ordered list of values.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    type: str = "enum"
    description: str | None = None
    conditions: Condition = Field(default_factory=Always)
    values: list[ValueDefinition] = Field(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def _default_values(cls, values: Any) -> Any:
        """Treat a null value list as an empty one."""
        return [] if values is None else values

    @property
    def is_enum(self) -> bool:
        return self.type == "enum"

    @property
    def is_info(self) -> bool:
        """Whether the variable is displayed as text rather than options."""
        return not self.is_enum

    @property
    def value_names(self) -> list[str]:
        """Names of all named values, in declaration order."""
        return [value.name for value in self.values if value.name is not None]

    def get_value(self, name: str) -> ValueDefinition | None:
        """Return the first value with the given name, or None."""
        for value in self.values:
            if value.name == name:
                return value
        return None

    def to_document(self) -> dict[str, Any]:
        """Return the document form of this variable."""
        document: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.description is not None:
            document["description"] = self.description
        if not self.conditions.is_empty:
            document["conditions"] = self.conditions.to_dict()
        document["values"] = [value.to_document() for value in self.values]
        return document


class Schema(BaseModel):
    """A complete schema: the ordered list of variables.

    Variable names are expected to be unique. Lookups return the first
    variable with a given name, so a duplicate is shadowed rather than
    rejected.
    """

    model_config = ConfigDict(frozen=True)

    variables: list[VariableDefinition]

    @property
    def variable_names(self) -> list[str]:
        """Variable names in declaration order."""
        return [variable.name for variable in self.variables]

    def get_variable(self, name: str) -> VariableDefinition | None:
        """Return the first variable with the given name, or None."""
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None

    @classmethod
    def from_document(cls, document: Any) -> Self:
        """Validate a schema document and build a Schema.

        Args:
            document: A parsed schema document (mapping with ``variables``),
                or an existing Schema which is returned unchanged.

        Returns:
            The validated Schema.

        Raises:
            ValueError: If the document is not a mapping, has no
                ``variables`` key, or fails validation.
        """
        if isinstance(document, cls):
            return document
        if not isinstance(document, Mapping):
            raise ValueError(
                f"Invalid schema document: expected a mapping, "
                f"got {type(document).__name__}"
            )
        if "variables" not in document:
            raise ValueError("Invalid schema document: missing 'variables'")

        try:
            return cls.model_validate(dict(document))
        except ValidationError as e:
            raise ValueError(f"Invalid schema document: {e}") from e

    def to_document(self) -> dict[str, Any]:
        """Return the schema document form.

        Optional keys that are unset and empty condition trees are omitted,
        so loading the result yields an equal Schema.
        """
        return {"variables": [variable.to_document() for variable in self.variables]}

    def model_dump_json(self, *, indent: int | None = 2, **json_kwargs: Any) -> str:
        """Serialize the schema document to JSON.

        Args:
            indent: Number of spaces for indentation (default=2).
            **json_kwargs: Additional arguments passed to json.dumps.

        Returns:
            JSON string representation.
        """
        import json

        return json.dumps(self.to_document(), indent=indent, **json_kwargs)

    def model_dump_yaml(self, **yaml_kwargs: Any) -> str:
        """Serialize the schema document to YAML.

        Args:
            **yaml_kwargs: Additional arguments passed to yaml.dump.

        Returns:
            YAML string representation.

        Raises:
            RuntimeError: If PyYAML is not installed.
        """
        try:
            import yaml
        except ImportError:
            raise RuntimeError(
                "PyYAML is required for YAML serialization. "
                "Install it with: pip install PyYAML"
            ) from None

        return yaml.dump(self.to_document(), sort_keys=False, **yaml_kwargs)

    def model_dump_toml(self) -> str:
        """Serialize the schema document to TOML.

        Returns:
            TOML string representation.

        Raises:
            RuntimeError: If tomli-w is not installed.
        """
        try:
            import tomli_w
        except ImportError:
            raise RuntimeError(
                "tomli-w is required for TOML serialization. "
                "Install it with: pip install tomli-w"
            ) from None

        return tomli_w.dumps(self.to_document())

    @classmethod
    def model_validate_json(cls, json_data: str | bytes, **json_kwargs: Any) -> Self:
        """Load a schema from a JSON document.

        Raises:
            ValueError: If the JSON is invalid or the document is malformed.
        """
        import json

        try:
            document = json.loads(json_data, **json_kwargs)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid schema document: {e}") from e
        return cls.from_document(document)

    @classmethod
    def model_validate_yaml(cls, yaml_data: str | bytes) -> Self:
        """Load a schema from a YAML document.

        Raises:
            RuntimeError: If PyYAML is not installed.
            ValueError: If the YAML is invalid or the document is malformed.
        """
        try:
            import yaml
        except ImportError:
            raise RuntimeError(
                "PyYAML is required for YAML deserialization. "
                "Install it with: pip install PyYAML"
            ) from None

        try:
            document = yaml.safe_load(yaml_data)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid schema document: {e}") from e
        return cls.from_document(document)

    @classmethod
    def model_validate_toml(cls, toml_data: str | bytes) -> Self:
        """Load a schema from a TOML document.

        Raises:
            ValueError: If the TOML is invalid or the document is malformed.
        """
        import tomllib

        if isinstance(toml_data, bytes):
            toml_data = toml_data.decode()

        try:
            document = tomllib.loads(toml_data)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid schema document: {e}") from e
        return cls.from_document(document)
