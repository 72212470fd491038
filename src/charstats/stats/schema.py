"""
Attribute schema for charstats.

Defines the immutable attribute definitions an engine is built from and the
ordered collection that holds them.
"""

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidRangeError, SchemaValidationError


class AttributeDefinition(BaseModel):
    """
    Definition of a single bounded numeric attribute.

    Attributes:
        id: Unique identifier for the attribute (e.g., "health", "speed")
        min_value: Lowest final value the attribute may take
        max_value: Highest final value the attribute may take
        default_value: Starting base value, clamped into range by the engine
        is_integral: Round final values to the nearest integer
        display_name: Optional name shown to players
        description: Optional free-form description
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique attribute identifier")
    min_value: float = Field(..., alias="min", allow_inf_nan=False, description="Lower bound")
    max_value: float = Field(..., alias="max", allow_inf_nan=False, description="Upper bound")
    default_value: float = Field(
        default=0.0, alias="default", allow_inf_nan=False, description="Starting base value"
    )
    is_integral: bool = Field(
        default=False, alias="integral", description="Round final values to integers"
    )
    display_name: str | None = Field(default=None, alias="name", description="Display name")
    description: str = Field(default="", description="Attribute description")

    @property
    def label(self) -> str:
        """Name to show for this attribute, falling back to the id."""
        return self.display_name or self.id

    def clamp(self, value: float) -> float:
        """
        Clamp a value into this attribute's range.

        Args:
            value: The value to clamp

        Returns:
            The value limited to [min_value, max_value]
        """
        return float(min(max(value, self.min_value), self.max_value))


class AttributeSchema:
    """
    Ordered, read-only collection of attribute definitions.

    Definitions keep their declaration order, which is also the order the
    engine walks during a full recalculation.
    """

    def __init__(self, definitions: Iterable[AttributeDefinition]) -> None:
        """
        Build and validate a schema.

        Args:
            definitions: Attribute definitions in declaration order

        Raises:
            SchemaValidationError: If two definitions share an id
            InvalidRangeError: If a definition has min_value > max_value
        """
        self._definitions: dict[str, AttributeDefinition] = {}

        for definition in definitions:
            if definition.id in self._definitions:
                raise SchemaValidationError(f"Duplicate attribute ID '{definition.id}'")
            if definition.min_value > definition.max_value:
                raise InvalidRangeError(definition.id, definition.min_value, definition.max_value)
            self._definitions[definition.id] = definition

    @property
    def ids(self) -> tuple[str, ...]:
        """All attribute ids in declaration order."""
        return tuple(self._definitions)

    def get(self, attribute_id: str) -> AttributeDefinition | None:
        """
        Get a definition by its id.

        Args:
            attribute_id: The id to look up

        Returns:
            The AttributeDefinition, or None if not found
        """
        return self._definitions.get(attribute_id)

    def __contains__(self, attribute_id: object) -> bool:
        return attribute_id in self._definitions

    def __iter__(self) -> Iterator[AttributeDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"AttributeSchema({list(self._definitions)})"
