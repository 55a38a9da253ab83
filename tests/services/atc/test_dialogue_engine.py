"""Tests for the chat-completion adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from airwaves.exceptions import DialogueUnavailable
from airwaves.services.atc.conversation import ChatMessage, MessageRole
from airwaves.services.atc.dialogue_engine import DialogueEngine

MESSAGES = [
    ChatMessage(MessageRole.SYSTEM, "You are a real air traffic controller at KJFK."),
    ChatMessage(MessageRole.USER, "request taxi"),
]


def completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_client(**create_kwargs) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(**create_kwargs)
    client.close = AsyncMock()
    return client


class TestDialogueEngine:
    """Tests for DialogueEngine.send."""

    @pytest.mark.asyncio
    async def test_send_returns_assistant_reply(self) -> None:
        """Test the reply comes back as an assistant message."""
        client = make_client(return_value=completion(" Taxi to runway 31L via A. "))
        engine = DialogueEngine("gpt-4o-mini", client=client)

        reply = await engine.send(MESSAGES)

        assert reply == ChatMessage(MessageRole.ASSISTANT, "Taxi to runway 31L via A.")

    @pytest.mark.asyncio
    async def test_send_forwards_ordered_messages(self) -> None:
        """Test every message is sent in order on the wire."""
        client = make_client(return_value=completion("Roger"))
        engine = DialogueEngine("gpt-4o-mini", client=client)

        await engine.send(MESSAGES)

        client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini",
            messages=[
                {"role": "system", "content": MESSAGES[0].content},
                {"role": "user", "content": "request taxi"},
            ],
        )

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        """Test service errors surface as DialogueUnavailable."""
        client = make_client(side_effect=OpenAIError("connection reset"))
        engine = DialogueEngine("gpt-4o-mini", client=client)

        with pytest.raises(DialogueUnavailable) as exc_info:
            await engine.send(MESSAGES)

        assert isinstance(exc_info.value.__cause__, OpenAIError)
        assert client.chat.completions.create.await_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "  "])
    async def test_empty_reply_raises(self, content: str | None) -> None:
        """Test a missing reply is treated as unavailable."""
        engine = DialogueEngine("gpt-4o-mini", client=make_client(return_value=completion(content)))
        with pytest.raises(DialogueUnavailable):
            await engine.send(MESSAGES)

    @pytest.mark.asyncio
    async def test_no_choices_raises(self) -> None:
        engine = DialogueEngine(
            "gpt-4o-mini", client=make_client(return_value=SimpleNamespace(choices=[]))
        )
        with pytest.raises(DialogueUnavailable):
            await engine.send(MESSAGES)

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        """Test closing releases the client."""
        client = make_client()
        engine = DialogueEngine("gpt-4o-mini", client=client)
        await engine.close()
        client.close.assert_awaited_once()
        assert engine._client is None
