"""Tests for modifier variants and building modifiers from data."""

import pytest

from charstats.stats import (
    ClampModifier,
    FlatModifier,
    FunctionModifier,
    Modifier,
    ModifierKind,
    MultiplyModifier,
    NullModifierError,
    OverrideModifier,
    modifier_from_data,
)


class TestModifierVariants:
    """Tests for what each modifier does to a running value."""

    def test_flat_adds(self):
        """Flat modifiers add their amount."""
        assert FlatModifier("health", 15).apply(70) == 85
        assert FlatModifier("health", -15).apply(70) == 55

    def test_multiply_scales(self):
        """Multiply modifiers scale by their factor."""
        assert MultiplyModifier("speed", 2.0).apply(5.0) == 10.0

    def test_override_replaces(self):
        """Override modifiers ignore the incoming value."""
        assert OverrideModifier("speed", 0.0).apply(8.0) == 0.0

    def test_clamp_limits_both_sides(self):
        """Clamp modifiers narrow the value window."""
        slowed = ClampModifier("speed", minimum=1.0, maximum=3.0)
        assert slowed.apply(8.0) == 3.0
        assert slowed.apply(0.5) == 1.0
        assert slowed.apply(2.0) == 2.0

    def test_clamp_with_one_bound(self):
        """A clamp with only a maximum leaves low values alone."""
        capped = ClampModifier("speed", maximum=3.0)
        assert capped.apply(-2.0) == -2.0
        assert capped.apply(4.0) == 3.0

    def test_function_modifier_calls_operation(self):
        """Function modifiers delegate to their callable."""
        squared = FunctionModifier("speed", operation=lambda value: value * value)
        assert squared.apply(3.0) == 9.0

    def test_function_modifier_without_operation_raises(self):
        """A function modifier without a callable cannot be applied."""
        with pytest.raises(NullModifierError):
            FunctionModifier("speed").apply(1.0)

    def test_defaults(self):
        """Order defaults to 0 and source to None."""
        modifier = FlatModifier("health", 1)
        assert modifier.order == 0
        assert modifier.source is None

    def test_kinds(self):
        """Each variant reports its kind."""
        assert FlatModifier("a", 1).kind is ModifierKind.FLAT
        assert MultiplyModifier("a", 1).kind is ModifierKind.MULTIPLY
        assert OverrideModifier("a", 1).kind is ModifierKind.OVERRIDE
        assert ClampModifier("a").kind is ModifierKind.CLAMP
        assert FunctionModifier("a").kind is ModifierKind.CUSTOM


class TestModifierIdentity:
    """Modifiers are compared by identity, not by value."""

    def test_identical_fields_are_not_equal(self):
        """Two stacks of the same buff are different modifiers."""
        first = FlatModifier("health", 5, source="regen")
        second = FlatModifier("health", 5, source="regen")
        assert first != second
        assert first == first

    def test_has_operation(self):
        """Only modifiers with an operation can be applied."""
        assert FlatModifier("health", 5).has_operation
        assert FunctionModifier("health", operation=abs).has_operation
        assert not FunctionModifier("health").has_operation
        assert not Modifier("health").has_operation


class TestModifierFromData:
    """Tests for building modifiers from dictionaries."""

    def test_flat(self):
        """Flat data builds a FlatModifier."""
        modifier = modifier_from_data(
            {"target": "health", "kind": "flat", "value": 10, "order": 2, "source": "amulet"}
        )
        assert isinstance(modifier, FlatModifier)
        assert modifier.target_id == "health"
        assert modifier.amount == 10.0
        assert modifier.order == 2
        assert modifier.source == "amulet"

    def test_multiply(self):
        """Multiply data builds a MultiplyModifier."""
        modifier = modifier_from_data({"target": "speed", "kind": "multiply", "value": 1.5})
        assert isinstance(modifier, MultiplyModifier)
        assert modifier.factor == 1.5

    def test_override(self):
        """Override data builds an OverrideModifier."""
        modifier = modifier_from_data({"target": "speed", "kind": "Override", "value": 0})
        assert isinstance(modifier, OverrideModifier)
        assert modifier.value == 0.0

    def test_clamp(self):
        """Clamp data reads min and max."""
        modifier = modifier_from_data({"target": "speed", "kind": "clamp", "max": 3})
        assert isinstance(modifier, ClampModifier)
        assert modifier.minimum is None
        assert modifier.maximum == 3.0

    def test_source_is_stringified(self):
        """Numeric source tags become strings."""
        modifier = modifier_from_data({"target": "a", "kind": "flat", "value": 1, "source": 7})
        assert modifier.source == "7"

    @pytest.mark.parametrize(
        "data",
        [
            {"kind": "flat", "value": 1},
            {"target": "", "kind": "flat", "value": 1},
            {"target": "a", "kind": "teleport", "value": 1},
            {"target": "a", "value": 1},
            {"target": "a", "kind": "flat"},
            {"target": "a", "kind": "flat", "value": "lots"},
            {"target": "a", "kind": "flat", "value": True},
            {"target": "a", "kind": "flat", "value": 1, "order": 1.5},
            {"target": "a", "kind": "clamp"},
            {"target": "a", "kind": "custom", "value": 1},
        ],
    )
    def test_invalid_data_raises(self, data):
        """Missing targets and operations are rejected."""
        with pytest.raises(NullModifierError):
            modifier_from_data(data)
