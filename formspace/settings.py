"""Settings for SchemaStore."""

from pydantic import BaseModel, ConfigDict


class StoreSettings(BaseModel):
    """Behavioural switches for a SchemaStore.

    Attributes:
        allow_multiple: Whether a variable may hold more than one selected
            value. With False, set_selection() rejects multi-value input and
            toggle_selection() replaces the current value.
        warn_on_dangling_references: Log conditions that reference unknown
            variables or values at WARNING level when a schema is loaded.
            With False they are logged at DEBUG level.

    Examples:
        >>> settings = StoreSettings(allow_multiple=False)
        >>> store = SchemaStore(settings=settings)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allow_multiple: bool = True
    warn_on_dangling_references: bool = True
