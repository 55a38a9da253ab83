"""Per-airport conversation history with the simulated controller.

Each airport has its own ConversationContext. The first message is always
the system prompt, rewritten in place before every send so it carries the
latest METAR; the remaining turns are kept in conversational order.
Contexts live for the whole session so a dialogue can be resumed after
tuning away and back.

Typical usage:
    store = ConversationStore(max_history=40)
    context = store.get("KJFK", weather=feed.latest("KJFK"))

    store.refresh_system_prompt("KJFK", feed.latest("KJFK"))
    store.append_user("KJFK", "request taxi")
    store.append_assistant("KJFK", reply)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from airwaves.core.logging_system import get_logger
from airwaves.exceptions import EmptyMessage
from airwaves.services.atc.prompt import PromptTemplate
from airwaves.services.weather.models import NOT_AVAILABLE

logger = get_logger(__name__)


class MessageRole(Enum):
    """Chat message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ChatMessage:
    """One message of a conversation.

    Attributes:
        role: Who wrote the message.
        content: Message text.
    """

    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the chat-completion wire shape."""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        """Create from a ``{"role": ..., "content": ...}`` mapping.

        Raises:
            ValueError: If the role is not recognized.
        """
        return cls(role=MessageRole(data.get("role")), content=str(data.get("content") or ""))


@dataclass
class ConversationContext:
    """Message history for one airport.

    Attributes:
        code: Airport ICAO code.
        messages: System prompt followed by user/assistant turns.
    """

    code: str
    messages: list[ChatMessage] = field(default_factory=list)

    @property
    def system_prompt(self) -> str:
        return self.messages[0].content

    @property
    def turns(self) -> list[ChatMessage]:
        """User and assistant turns, oldest first."""
        return self.messages[1:]

    def snapshot(self) -> list[ChatMessage]:
        """Copy of the messages, safe to hand to the dialogue engine."""
        return [ChatMessage(m.role, m.content) for m in self.messages]


class ConversationStore:
    """Session-scoped map of airport code to ConversationContext.

    When max_history is set, the oldest turns are dropped once a context
    holds more than max_history turns. Dropping always leaves the history
    starting with a user turn, and never touches the system prompt.
    """

    def __init__(
        self,
        template: PromptTemplate | None = None,
        max_history: int | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            template: System prompt template (defaults to PromptTemplate()).
            max_history: Maximum stored turns per airport; None or 0 keeps
                everything. Must otherwise be at least 2.
        """
        if max_history is not None and max_history != 0 and max_history < 2:
            raise ValueError(f"max_history must be 0 or >= 2, got: {max_history}")

        self.template = template or PromptTemplate()
        self.max_history = max_history or None
        self._contexts: dict[str, ConversationContext] = {}

    def get(self, code: str, weather: str = NOT_AVAILABLE) -> ConversationContext:
        """Get an airport's context, creating it if needed.

        Args:
            code: Airport ICAO code.
            weather: METAR used to seed the system prompt of a new context.

        Returns:
            The airport's context.
        """
        code = code.upper()
        context = self._contexts.get(code)
        if context is None:
            system = ChatMessage(MessageRole.SYSTEM, self.template.render(code, weather))
            context = ConversationContext(code=code, messages=[system])
            self._contexts[code] = context
            logger.debug("Created conversation context for %s", code)
        return context

    def refresh_system_prompt(self, code: str, weather: str) -> None:
        """Rewrite the system prompt of an airport with the given weather.

        Only messages[0].content changes.
        """
        context = self.get(code, weather)
        context.messages[0].content = self.template.render(context.code, weather)

    def append_user(self, code: str, text: str) -> ChatMessage:
        """Append a pilot transmission.

        Raises:
            EmptyMessage: If text is blank.
        """
        if not text or not text.strip():
            raise EmptyMessage("Message to ATC is empty")

        message = ChatMessage(MessageRole.USER, text)
        self._append(code, message)
        return message

    def append_assistant(self, code: str, message: ChatMessage) -> ChatMessage:
        """Append a controller reply.

        Raises:
            EmptyMessage: If the reply has no content.
            ValueError: If the message is not an assistant message.
        """
        if message.role is not MessageRole.ASSISTANT:
            raise ValueError(f"expected an assistant message, got: {message.role.value}")
        if not message.content or not message.content.strip():
            raise EmptyMessage("ATC reply is empty")

        self._append(code, message)
        return message

    def _append(self, code: str, message: ChatMessage) -> None:
        context = self.get(code)
        context.messages.append(message)
        self._trim(context)

    def _trim(self, context: ConversationContext) -> None:
        if self.max_history is None:
            return

        turns = context.messages[1:]
        excess = len(turns) - self.max_history
        if excess <= 0:
            return

        del turns[:excess]
        while turns and turns[0].role is not MessageRole.USER:
            turns.pop(0)

        context.messages[1:] = turns
        logger.debug("Trimmed %s history to %d turns", context.code, len(turns))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._contexts

    def codes(self) -> list[str]:
        """Codes of airports with a conversation, in creation order."""
        return list(self._contexts)
