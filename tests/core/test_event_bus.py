"""Tests for the event bus."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from airwaves.core.event_bus import EventBus


class TestEventBus:
    """Tests for EventBus."""

    @pytest.mark.asyncio
    async def test_publish_calls_sync_and_async_handlers(self) -> None:
        bus = EventBus()
        sync_handler = MagicMock(return_value=1)
        async_handler = AsyncMock(return_value=2)
        bus.subscribe("topic", sync_handler)
        bus.subscribe("topic", async_handler)

        results = await bus.publish("topic", "KJFK")

        assert results == [1, 2]
        sync_handler.assert_called_once_with("KJFK")
        async_handler.assert_awaited_once_with("KJFK")

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self) -> None:
        assert await EventBus().publish("nobody") == []

    def test_subscribe_is_idempotent(self) -> None:
        bus = EventBus()
        handler = MagicMock()
        bus.subscribe("topic", handler)
        bus.subscribe("topic", handler)
        assert bus._handlers["topic"] == [handler]

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        handler = MagicMock()
        bus.subscribe("topic", handler)
        bus.unsubscribe("topic", handler)
        bus.unsubscribe("other", handler)
        assert not bus.has_subscribers("topic")

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self) -> None:
        """Test handler exceptions reach the publisher."""
        bus = EventBus()
        bus.subscribe("topic", AsyncMock(side_effect=RuntimeError("boom")))
        with pytest.raises(RuntimeError, match="boom"):
            await bus.publish("topic")
