"""Shared fixtures for stat engine tests."""

import pytest

from charstats.stats import AttributeChanged, AttributeDefinition, AttributeSchema, StatEngine


@pytest.fixture
def health() -> AttributeDefinition:
    """Integral health attribute, 0-100, starting full."""
    return AttributeDefinition(
        id="health", min_value=0, max_value=100, default_value=100, is_integral=True
    )


@pytest.fixture
def speed() -> AttributeDefinition:
    """Non-integral speed attribute, 0-10, starting at 5."""
    return AttributeDefinition(
        id="speed", min_value=0, max_value=10, default_value=5, is_integral=False
    )


@pytest.fixture
def mana() -> AttributeDefinition:
    """Integral mana attribute, 0-50, starting at 20."""
    return AttributeDefinition(
        id="mana", min_value=0, max_value=50, default_value=20, is_integral=True
    )


@pytest.fixture
def schema(health, speed, mana) -> AttributeSchema:
    """Schema with health, speed and mana in that order."""
    return AttributeSchema([health, speed, mana])


@pytest.fixture
def engine(schema) -> StatEngine:
    """A fresh engine with no modifiers."""
    return StatEngine(schema, name="test_character")


@pytest.fixture
def events(engine) -> list[AttributeChanged]:
    """Every change event the engine publishes, in delivery order."""
    received: list[AttributeChanged] = []
    engine.changes.subscribe(received.append)
    return received
