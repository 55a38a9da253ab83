"""Topic-based event bus decoupling the UI surface from the ATC session.

The UI publishes user actions; the session subscribes to them. Handlers may
be plain functions or coroutine functions.

Typical usage:
    bus = EventBus()
    bus.subscribe(TUNE_REQUESTED, session.on_tune_requested)

    await bus.publish(TUNE_REQUESTED, "KJFK")
"""

import inspect
from collections.abc import Callable
from typing import Any

from airwaves.core.logging_system import get_logger

logger = get_logger(__name__)

# UI topics
TUNE_REQUESTED = "atc.tune_requested"
MESSAGE_REQUESTED = "atc.message_requested"

Handler = Callable[..., Any]


class EventBus:
    """Publish/subscribe dispatcher.

    Handlers for a topic run in subscription order. Exceptions raised by a
    handler propagate to the publisher so the UI can report them.
    """

    def __init__(self) -> None:
        """Initialize an empty bus."""
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, topic: str, handler: Handler) -> None:
        """Register a handler for a topic.

        Args:
            topic: Topic name.
            handler: Callable receiving the published arguments.
        """
        handlers = self._handlers.setdefault(topic, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Subscribed %r to %s", handler, topic)

    def unsubscribe(self, topic: str, handler: Handler) -> None:
        """Remove a handler from a topic, if registered."""
        handlers = self._handlers.get(topic, [])
        if handler in handlers:
            handlers.remove(handler)

    def has_subscribers(self, topic: str) -> bool:
        return bool(self._handlers.get(topic))

    async def publish(self, topic: str, *args: Any) -> list[Any]:
        """Dispatch an event to every handler of a topic.

        Args:
            topic: Topic name.
            *args: Arguments passed to each handler.

        Returns:
            Handler return values, in subscription order.
        """
        handlers = list(self._handlers.get(topic, []))
        if not handlers:
            logger.debug("No subscribers for %s", topic)
            return []

        results = []
        for handler in handlers:
            result = handler(*args)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results
