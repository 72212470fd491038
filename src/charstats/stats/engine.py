"""Stat engine for charstats.

Owns the base value and modifier list of every attribute declared by a
schema, computes final values on demand and publishes a change event only
when a mutation actually moves a final value.

Final value = clamp(modifiers applied in ascending ``order`` to the base
value), rounded when the attribute is integral. Nothing is cached; every read
recomputes from current state.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from charstats.config import get_settings

from .errors import NullModifierError, UnknownAttributeError
from .events import AttributeChanged, ChangeChannel
from .modifiers import Modifier
from .schema import AttributeDefinition, AttributeSchema

logger = structlog.get_logger(__name__)


@dataclass
class AttributeState:
    """Runtime slot for one attribute: clamped base value plus attached modifiers."""

    definition: AttributeDefinition
    base_value: float
    modifiers: list[Modifier] = field(default_factory=list)


def _round_into_range(value: float, definition: AttributeDefinition) -> float:
    rounded = float(round(value))
    if rounded < definition.min_value:
        rounded = float(math.ceil(definition.min_value))
    elif rounded > definition.max_value:
        rounded = float(math.floor(definition.max_value))

    # No integer fits inside the range at all
    if not definition.min_value <= rounded <= definition.max_value:
        return value
    return rounded


class StatEngine:
    """
    Attribute and modifier engine for a single character.

    The engine is not thread-safe. Whoever owns the character serializes
    access to it. Change handlers may mutate other attributes, but must not
    mutate the attribute they are being notified about.
    """

    def __init__(
        self,
        schema: AttributeSchema | Iterable[AttributeDefinition],
        initial_modifiers: Iterable[Modifier] = (),
        *,
        epsilon: float | None = None,
        name: str | None = None,
    ) -> None:
        """
        Initialize the engine from a schema.

        Args:
            schema: AttributeSchema, or an iterable of definitions to build one from
            initial_modifiers: Modifiers attached at start-up without notifications
            epsilon: Tolerance for non-integral change detection
                (defaults to the ``change_epsilon`` setting)
            name: Optional owner name bound into every log entry

        Raises:
            InvalidRangeError: If a definition has min_value > max_value
            SchemaValidationError: If the schema contains duplicate ids
            ValueError: If epsilon is negative or NaN
        """
        settings = get_settings()

        if epsilon is None:
            epsilon = settings.change_epsilon
        elif not epsilon >= 0.0:
            raise ValueError(f"epsilon must be a non-negative number, got {epsilon!r}")

        if not isinstance(schema, AttributeSchema):
            schema = AttributeSchema(schema)

        self._schema = schema
        self._epsilon = epsilon
        self._missing_value = settings.missing_value
        self._log = logger.bind(engine=name) if name else logger
        self.changes = ChangeChannel()

        self._states: dict[str, AttributeState] = {
            definition.id: AttributeState(
                definition=definition,
                base_value=definition.clamp(definition.default_value),
            )
            for definition in schema
        }

        for modifier in initial_modifiers:
            self.add_modifier(modifier, notify=False)

        self._log.debug(
            "stat_engine_initialized",
            attributes=len(self._states),
            modifiers=sum(len(state.modifiers) for state in self._states.values()),
        )

    @property
    def schema(self) -> AttributeSchema:
        """The schema this engine was built from."""
        return self._schema

    @property
    def attribute_ids(self) -> tuple[str, ...]:
        """All known attribute ids in schema order."""
        return self._schema.ids

    def has_attribute(self, attribute: str | AttributeDefinition | None) -> bool:
        """
        Check whether an attribute is known to this engine.

        Args:
            attribute: Attribute id or definition

        Returns:
            True if the attribute is registered
        """
        if attribute is None:
            return False
        if isinstance(attribute, AttributeDefinition):
            attribute = attribute.id
        return attribute in self._states

    def get_definition(self, attribute_id: str) -> AttributeDefinition:
        """Get the definition of a known attribute."""
        return self._get_state(attribute_id).definition

    def get_base(self, attribute_id: str) -> float:
        """Get the clamped base value of a known attribute."""
        return self._get_state(attribute_id).base_value

    def get_modifiers(self, attribute_id: str) -> tuple[Modifier, ...]:
        """
        Get the modifiers attached to an attribute.

        Args:
            attribute_id: The attribute to inspect

        Returns:
            Modifiers in evaluation order (ascending order, ties by insertion)

        Raises:
            UnknownAttributeError: If the attribute is not registered
        """
        return tuple(self._ordered(self._get_state(attribute_id)))

    def get_final(self, attribute_id: str) -> float:
        """
        Compute the final value of an attribute.

        Pure: never mutates state and never publishes events.

        Args:
            attribute_id: The attribute to compute

        Returns:
            Base value with all modifiers applied, clamped, rounded if integral

        Raises:
            UnknownAttributeError: If the attribute is not registered
        """
        return self._compute(self._get_state(attribute_id))

    def snapshot(self) -> dict[str, float]:
        """Get every final value keyed by attribute id, in schema order."""
        return {attribute_id: self._compute(state) for attribute_id, state in self._states.items()}

    def set_base(self, attribute_id: str, value: float, notify: bool = True) -> None:
        """
        Set the base value of an attribute, clamped to its range.

        Args:
            attribute_id: The attribute to change
            value: New base value
            notify: Publish a change event if the final value moved

        Raises:
            UnknownAttributeError: If the attribute is not registered
            ValueError: If value is NaN
        """
        state = self._get_state(attribute_id)
        if math.isnan(value):
            raise ValueError(f"Base value for '{attribute_id}' must be a number, got NaN")

        old = self._compute(state)
        previous = state.base_value
        state.base_value = state.definition.clamp(value)
        try:
            now = self._compute(state)
        except Exception:
            state.base_value = previous
            raise

        self._log.debug(
            "attribute_base_set",
            attribute_id=attribute_id,
            base_value=state.base_value,
            final_value=now,
        )
        self._notify_if_changed(state, old, now, notify)

    def add_delta(self, attribute_id: str, delta: float, notify: bool = True) -> None:
        """
        Add to (or subtract from) the base value of an attribute.

        Equivalent to ``set_base(attribute_id, base + delta, notify)``.

        Raises:
            UnknownAttributeError: If the attribute is not registered
        """
        state = self._get_state(attribute_id)
        self.set_base(attribute_id, state.base_value + delta, notify)

    def add_modifier(self, modifier: Modifier | None, notify: bool = True) -> bool:
        """
        Attach a modifier to its target attribute.

        The modifier's ``order`` is used as given. Null modifiers and modifiers
        targeting unknown attributes are logged and ignored.

        Args:
            modifier: The modifier to attach
            notify: Publish a change event if the final value moved

        Returns:
            True if the modifier was attached
        """
        state = self._modifier_state(modifier, "add")
        if state is None:
            return False

        old = self._compute(state)
        state.modifiers.append(modifier)
        try:
            now = self._compute(state)
        except Exception:
            state.modifiers.pop()
            self._log.exception(
                "modifier_apply_failed",
                action="add",
                attribute_id=state.definition.id,
                source=modifier.source,
            )
            return False

        self._log.debug(
            "modifier_added",
            attribute_id=state.definition.id,
            kind=getattr(modifier, "kind", None),
            order=modifier.order,
            source=modifier.source,
            final_value=now,
        )
        self._notify_if_changed(state, old, now, notify)
        return True

    def remove_modifier(self, modifier: Modifier | None, notify: bool = True) -> bool:
        """
        Detach a specific modifier instance.

        Removal is by identity: an equal-looking modifier that was never added
        is not removed. Removing a modifier that is not attached is a no-op.

        Args:
            modifier: The modifier instance to detach
            notify: Publish a change event if the final value moved

        Returns:
            True if the modifier was attached and has been removed
        """
        state = self._modifier_state(modifier, "remove")
        if state is None:
            return False

        index = next((i for i, m in enumerate(state.modifiers) if m is modifier), None)
        if index is None:
            self._log.debug(
                "modifier_not_attached",
                attribute_id=state.definition.id,
                source=modifier.source,
            )
            return False

        old = self._compute(state)
        del state.modifiers[index]
        try:
            now = self._compute(state)
        except Exception:
            state.modifiers.insert(index, modifier)
            self._log.exception(
                "modifier_apply_failed",
                action="remove",
                attribute_id=state.definition.id,
                source=modifier.source,
            )
            return False

        self._log.debug(
            "modifier_removed",
            attribute_id=state.definition.id,
            order=modifier.order,
            source=modifier.source,
            final_value=now,
        )
        self._notify_if_changed(state, old, now, notify)
        return True

    def remove_modifiers_from_source(self, source: str, notify: bool = True) -> int:
        """
        Detach every modifier tagged with a source, e.g. when an item is unequipped.

        Publishes at most one event per affected attribute.

        Args:
            source: The source tag to match
            notify: Publish change events for attributes whose final value moved

        Returns:
            Number of modifiers removed
        """
        removed = 0
        for state in self._states.values():
            kept = [m for m in state.modifiers if m.source != source]
            count = len(state.modifiers) - len(kept)
            if not count:
                continue

            old = self._compute(state)
            previous = list(state.modifiers)
            state.modifiers[:] = kept
            try:
                now = self._compute(state)
            except Exception:
                state.modifiers[:] = previous
                raise

            removed += count
            self._notify_if_changed(state, old, now, notify)

        if removed:
            self._log.debug("modifiers_removed_from_source", source=source, removed=removed)
        return removed

    def recalculate_all(self, notify: bool = True) -> None:
        """
        Recompute every attribute and publish events for any that differ.

        Events are derived from current state only; no history is replayed, so
        under normal use this publishes nothing.

        Args:
            notify: Publish change events
        """
        for state in self._states.values():
            old = self._compute(state)
            now = self._compute(state)
            self._notify_if_changed(state, old, now, notify)

    def get_value_by_id(self, attribute_id: str | None, default: float | None = None) -> float:
        """
        Get a final value by id without raising.

        Args:
            attribute_id: The attribute id, possibly empty
            default: Value returned when the id is empty or unknown
                (defaults to the ``missing_value`` setting)

        Returns:
            The final value, or the default
        """
        if default is None:
            default = self._missing_value

        if not self._lookup(attribute_id):
            return default
        return self.get_final(attribute_id)

    def set_base_by_id(self, attribute_id: str | None, value: float) -> bool:
        """
        Set a base value by id without raising.

        Returns:
            True if the attribute exists and the value was applied
        """
        if not self._lookup(attribute_id):
            return False
        try:
            self.set_base(attribute_id, float(value))
        except (TypeError, ValueError) as e:
            self._log.warning("attribute_value_rejected", attribute_id=attribute_id, error=str(e))
            return False
        return True

    def add_by_id(self, attribute_id: str | None, delta: float) -> bool:
        """
        Add to a base value by id without raising.

        Returns:
            True if the attribute exists and the delta was applied
        """
        if not self._lookup(attribute_id):
            return False
        try:
            self.add_delta(attribute_id, float(delta))
        except (TypeError, ValueError) as e:
            self._log.warning("attribute_value_rejected", attribute_id=attribute_id, error=str(e))
            return False
        return True

    def _get_state(self, attribute_id: str) -> AttributeState:
        state = self._states.get(attribute_id)
        if state is None:
            raise UnknownAttributeError(attribute_id)
        return state

    def _lookup(self, attribute_id: object) -> bool:
        if not isinstance(attribute_id, str):
            self._log.warning("attribute_lookup_invalid_id", attribute_id=repr(attribute_id))
            return False
        if not attribute_id:
            self._log.warning("attribute_lookup_empty_id")
            return False
        if attribute_id not in self._states:
            self._log.warning("attribute_not_found", attribute_id=attribute_id)
            return False
        return True

    def _modifier_state(self, modifier: Modifier | None, action: str) -> AttributeState | None:
        try:
            if modifier is None:
                raise NullModifierError("Modifier is None")
            target_id = getattr(modifier, "target_id", None)
            if not isinstance(target_id, str) or not target_id:
                raise NullModifierError("Modifier has no target attribute")
            if not getattr(modifier, "has_operation", False):
                raise NullModifierError(f"Modifier for '{modifier.target_id}' has no operation")
        except NullModifierError as e:
            self._log.warning("null_modifier_ignored", action=action, error=str(e))
            return None

        state = self._states.get(target_id)
        if state is None:
            self._log.warning(
                "modifier_target_unknown",
                action=action,
                attribute_id=target_id,
                source=getattr(modifier, "source", None),
            )
        return state

    @staticmethod
    def _ordered(state: AttributeState) -> list[Modifier]:
        # sorted() is stable, so equal orders keep insertion order
        return sorted(state.modifiers, key=lambda m: m.order)

    def _compute(self, state: AttributeState) -> float:
        definition = state.definition
        value = state.base_value
        for modifier in self._ordered(state):
            value = modifier.apply(value)

        if math.isnan(value):
            self._log.warning("modifier_produced_nan", attribute_id=definition.id)
            value = state.base_value

        value = definition.clamp(value)
        if definition.is_integral:
            value = _round_into_range(value, definition)
        return value

    def _changed(self, definition: AttributeDefinition, old: float, now: float) -> bool:
        if definition.is_integral:
            return old != now
        return not math.isclose(old, now, rel_tol=self._epsilon, abs_tol=self._epsilon)

    def _notify_if_changed(
        self, state: AttributeState, old: float, now: float, notify: bool
    ) -> None:
        if not notify or not self._changed(state.definition, old, now):
            return

        event = AttributeChanged(state.definition.id, old, now)
        self._log.debug("attribute_changed", attribute_id=event.attribute_id, old=old, new=now)
        self.changes.publish(event)

    def __repr__(self) -> str:
        return f"StatEngine({self.snapshot()})"
