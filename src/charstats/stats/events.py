"""Attribute change notifications.

The engine owns a single ChangeChannel. Delivery is synchronous and ordered:
handlers run in subscription order before the mutating call returns.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AttributeChanged:
    """A final value that actually changed."""

    attribute_id: str
    old_value: float
    new_value: float

    @property
    def delta(self) -> float:
        """Difference between the new and old final values."""
        return self.new_value - self.old_value


ChangeHandler = Callable[[AttributeChanged], None]


class ChangeChannel:
    """
    Multi-subscriber observer list for attribute changes.

    A failing handler is logged and skipped; it never aborts the remaining
    handlers or the mutation that triggered the event.
    """

    def __init__(self) -> None:
        self._handlers: list[ChangeHandler] = []

    def subscribe(self, handler: ChangeHandler) -> ChangeHandler:
        """
        Register a handler. Subscribing the same handler twice is a no-op.

        Args:
            handler: Callable receiving an AttributeChanged event

        Returns:
            The handler, so this can be used as a decorator
        """
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: ChangeHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def subscriber_count(self) -> int:
        """Number of registered handlers."""
        return len(self._handlers)

    def publish(self, event: AttributeChanged) -> None:
        """
        Deliver an event to every handler.

        Args:
            event: The change to deliver
        """
        # Snapshot so handlers may (un)subscribe while being notified
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "attribute_change_handler_failed",
                    attribute_id=event.attribute_id,
                    old_value=event.old_value,
                    new_value=event.new_value,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                )

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
