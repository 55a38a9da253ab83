"""Chat-completion adapter for controller replies.

Sends the full ordered message list to an OpenAI-compatible chat service
and returns the single assistant reply. There is no local retry: any
transport or service failure surfaces as DialogueUnavailable.
"""

from collections.abc import Sequence

from openai import AsyncOpenAI, OpenAIError

from airwaves.core.logging_system import get_logger
from airwaves.exceptions import DialogueUnavailable
from airwaves.services.atc.conversation import ChatMessage, MessageRole

logger = get_logger(__name__)


class DialogueEngine:
    """Stateless bridge to the chat-completion service.

    Attributes:
        model: Model name passed to the service.
    """

    def __init__(
        self,
        model: str,
        api_base: str = "",
        timeout: float = 30.0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize the engine.

        Args:
            model: Chat model name.
            api_base: Base URL of an OpenAI-compatible service ("" = default).
            timeout: Request timeout in seconds.
            client: Optional preconfigured client. When omitted, a client is
                created on first use; it reads OPENAI_API_KEY from the
                environment.
        """
        self.model = model
        self.api_base = api_base
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(
                    base_url=self.api_base or None,
                    timeout=self.timeout,
                    max_retries=0,
                )
            except OpenAIError as e:
                raise DialogueUnavailable(f"Chat service not configured: {e}") from e
        return self._client

    async def send(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        """Send a conversation and get the controller's reply.

        Args:
            messages: System prompt followed by the turns, oldest first.

        Returns:
            Assistant message.

        Raises:
            DialogueUnavailable: If the service fails or returns no reply.
        """
        client = self._get_client()
        payload = [m.to_dict() for m in messages]
        logger.debug("Sending %d messages to %s", len(payload), self.model)

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=payload,
            )
        except OpenAIError as e:
            logger.error("Chat service request failed: %s", e)
            raise DialogueUnavailable(f"ATC is not responding: {e}") from e

        if not response.choices:
            raise DialogueUnavailable("Chat service returned no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise DialogueUnavailable("Chat service returned an empty reply")

        return ChatMessage(MessageRole.ASSISTANT, content.strip())

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
