"""Exceptions raised by the stat engine and the schema provider."""


class StatsError(Exception):
    """Base class for all charstats errors."""

    pass


class UnknownAttributeError(StatsError, KeyError):
    """Raised when an attribute id is not part of the engine's schema."""

    def __init__(self, attribute_id: str | None) -> None:
        self.attribute_id = attribute_id
        super().__init__(f"Unknown attribute: {attribute_id!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class InvalidRangeError(StatsError, ValueError):
    """Raised when an attribute definition has min_value > max_value."""

    def __init__(self, attribute_id: str, min_value: float, max_value: float) -> None:
        self.attribute_id = attribute_id
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(
            f"Attribute '{attribute_id}' has invalid range: min {min_value} > max {max_value}"
        )


class NullModifierError(StatsError):
    """Raised when a modifier has no target attribute or no operation."""

    pass


class SchemaLoadError(StatsError):
    """Raised when there's an error loading schema or modifier data."""

    pass


class SchemaValidationError(StatsError):
    """Raised when schema or modifier validation fails."""

    pass
