"""Tests for attribute definitions and schemas."""

import math

import pytest
from pydantic import ValidationError

from charstats.stats import (
    AttributeDefinition,
    AttributeSchema,
    InvalidRangeError,
    SchemaValidationError,
)


class TestAttributeDefinition:
    """Tests for the AttributeDefinition model."""

    def test_yaml_aliases(self):
        """Short YAML keys map onto the model fields."""
        definition = AttributeDefinition.model_validate(
            {"id": "health", "min": 0, "max": 100, "default": 100, "integral": True, "name": "HP"}
        )
        assert definition.min_value == 0.0
        assert definition.max_value == 100.0
        assert definition.default_value == 100.0
        assert definition.is_integral is True
        assert definition.label == "HP"

    def test_defaults(self):
        """default_value and is_integral have defaults."""
        definition = AttributeDefinition(id="luck", min_value=0, max_value=1)
        assert definition.default_value == 0.0
        assert definition.is_integral is False
        assert definition.label == "luck"

    def test_is_frozen(self):
        """Definitions are immutable."""
        definition = AttributeDefinition(id="luck", min_value=0, max_value=1)
        with pytest.raises(ValidationError):
            definition.max_value = 5

    def test_requires_finite_bounds(self):
        """Infinite or NaN bounds are rejected."""
        with pytest.raises(ValidationError):
            AttributeDefinition(id="luck", min_value=-math.inf, max_value=1)
        with pytest.raises(ValidationError):
            AttributeDefinition(id="luck", min_value=0, max_value=math.nan)

    def test_requires_id(self):
        """Empty ids are rejected."""
        with pytest.raises(ValidationError):
            AttributeDefinition(id="", min_value=0, max_value=1)

    def test_clamp(self):
        """clamp limits values to the range."""
        definition = AttributeDefinition(id="speed", min_value=0, max_value=10)
        assert definition.clamp(-1) == 0.0
        assert definition.clamp(11) == 10.0
        assert definition.clamp(4.5) == 4.5


class TestAttributeSchema:
    """Tests for the AttributeSchema collection."""

    def test_keeps_declaration_order(self, health, speed, mana):
        """Iteration follows declaration order."""
        schema = AttributeSchema([mana, health, speed])
        assert schema.ids == ("mana", "health", "speed")
        assert [d.id for d in schema] == ["mana", "health", "speed"]
        assert len(schema) == 3

    def test_lookup(self, schema, speed):
        """get and membership work by id."""
        assert schema.get("speed") == speed
        assert schema.get("charisma") is None
        assert "health" in schema
        assert "charisma" not in schema

    def test_duplicate_id(self, health):
        """Duplicate ids are rejected."""
        with pytest.raises(SchemaValidationError):
            AttributeSchema([health, health])

    def test_invalid_range(self):
        """min > max raises InvalidRangeError with details."""
        broken = AttributeDefinition(id="weight", min_value=50, max_value=10)
        with pytest.raises(InvalidRangeError) as exc_info:
            AttributeSchema([broken])
        assert exc_info.value.min_value == 50.0
        assert exc_info.value.max_value == 10.0

    def test_invalid_range_is_a_value_error(self):
        """InvalidRangeError can be caught as a ValueError."""
        broken = AttributeDefinition(id="weight", min_value=50, max_value=10)
        with pytest.raises(ValueError):
            AttributeSchema([broken])

    def test_equal_bounds_allowed(self):
        """A fixed attribute with min == max is valid."""
        fixed = AttributeDefinition(id="level_cap", min_value=60, max_value=60, default_value=1)
        schema = AttributeSchema([fixed])
        assert len(schema) == 1
