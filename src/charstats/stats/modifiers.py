"""Stat modifiers for charstats.

A modifier is an ordered, pure transformation of one attribute's running
value. Equipment, buffs and quest rewards create modifiers and hand them to a
StatEngine; the engine only tracks which modifiers are attached, never what
they do internally.

Modifiers compare by identity. Two stacks of the same buff are separate
instances with separate lifetimes even when every field matches.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar

from .errors import NullModifierError


class ModifierKind(StrEnum):
    """Built-in modifier operations."""

    FLAT = "flat"
    MULTIPLY = "multiply"
    OVERRIDE = "override"
    CLAMP = "clamp"
    CUSTOM = "custom"


@dataclass(eq=False)
class Modifier:
    """
    Base class for all modifiers.

    Attributes:
        target_id: Id of the attribute this modifier applies to
        order: Evaluation rank, lower applies first; ties keep insertion order
        source: Optional tag naming whatever created the modifier (item id, buff id)
    """

    kind: ClassVar[ModifierKind]

    target_id: str
    order: int = field(default=0, kw_only=True)
    source: str | None = field(default=None, kw_only=True)

    @property
    def has_operation(self) -> bool:
        """Whether this modifier can be applied."""
        return type(self).apply is not Modifier.apply

    def apply(self, value: float) -> float:
        """
        Apply the modifier to a running value.

        Args:
            value: The value produced by base value and earlier modifiers

        Returns:
            The transformed value
        """
        raise NotImplementedError


@dataclass(eq=False)
class FlatModifier(Modifier):
    """Adds a fixed amount (negative for penalties)."""

    kind: ClassVar[ModifierKind] = ModifierKind.FLAT

    amount: float

    def apply(self, value: float) -> float:
        return value + self.amount


@dataclass(eq=False)
class MultiplyModifier(Modifier):
    """Scales the running value by a factor."""

    kind: ClassVar[ModifierKind] = ModifierKind.MULTIPLY

    factor: float

    def apply(self, value: float) -> float:
        return value * self.factor


@dataclass(eq=False)
class OverrideModifier(Modifier):
    """Replaces the running value, e.g. a petrify effect pinning speed to 0."""

    kind: ClassVar[ModifierKind] = ModifierKind.OVERRIDE

    value: float

    def apply(self, value: float) -> float:
        return self.value


@dataclass(eq=False)
class ClampModifier(Modifier):
    """Limits the running value to a narrower window. Either bound may be omitted."""

    kind: ClassVar[ModifierKind] = ModifierKind.CLAMP

    minimum: float | None = None
    maximum: float | None = None

    def apply(self, value: float) -> float:
        if self.minimum is not None:
            value = max(value, self.minimum)
        if self.maximum is not None:
            value = min(value, self.maximum)
        return value


@dataclass(eq=False)
class FunctionModifier(Modifier):
    """Wraps an arbitrary pure callable."""

    kind: ClassVar[ModifierKind] = ModifierKind.CUSTOM

    operation: Callable[[float], float] | None = None

    @property
    def has_operation(self) -> bool:
        return self.operation is not None

    def apply(self, value: float) -> float:
        if self.operation is None:
            raise NullModifierError(f"Modifier for '{self.target_id}' has no operation")
        return self.operation(value)


def _number(data: Mapping[str, Any], key: str) -> float | None:
    raw = data.get(key)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise NullModifierError(f"Modifier field '{key}' must be a number, got {raw!r}")
    return float(raw)


def modifier_from_data(data: Mapping[str, Any]) -> Modifier:
    """
    Create a modifier from dictionary data.

    Expected keys: ``target``, ``kind`` (flat, multiply, override, clamp),
    ``value`` (or ``min``/``max`` for clamp), and optional ``order`` and
    ``source``.

    Args:
        data: Dictionary containing modifier data

    Returns:
        A Modifier instance of the matching variant

    Raises:
        NullModifierError: If the target or operation is missing or invalid
    """
    target = data.get("target")
    if not isinstance(target, str) or not target:
        raise NullModifierError(f"Modifier has no target attribute: {dict(data)!r}")

    raw_kind = str(data.get("kind", "")).lower()
    try:
        kind = ModifierKind(raw_kind)
    except ValueError:
        raise NullModifierError(
            f"Modifier for '{target}' has invalid kind '{raw_kind}' "
            f"(must be one of: flat, multiply, override, clamp)"
        )

    order = data.get("order", 0)
    if isinstance(order, bool) or not isinstance(order, int):
        raise NullModifierError(f"Modifier for '{target}' has invalid order (must be an integer)")

    source = data.get("source")
    if source is not None:
        source = str(source)

    if kind is ModifierKind.CLAMP:
        minimum = _number(data, "min")
        maximum = _number(data, "max")
        if minimum is None and maximum is None:
            raise NullModifierError(f"Clamp modifier for '{target}' needs 'min' or 'max'")
        return ClampModifier(target, minimum, maximum, order=order, source=source)

    value = _number(data, "value")
    if value is None:
        raise NullModifierError(f"Modifier for '{target}' is missing 'value'")

    if kind is ModifierKind.FLAT:
        return FlatModifier(target, value, order=order, source=source)
    if kind is ModifierKind.MULTIPLY:
        return MultiplyModifier(target, value, order=order, source=source)
    if kind is ModifierKind.OVERRIDE:
        return OverrideModifier(target, value, order=order, source=source)

    # Custom operations only exist in code
    raise NullModifierError(f"Modifier for '{target}' cannot be built from data (kind '{kind}')")
