"""ATC radio: tuning, conversation state and controller dialogue."""

from airwaves.services.atc.conversation import (
    ChatMessage,
    ConversationContext,
    ConversationStore,
    MessageRole,
)
from airwaves.services.atc.dialogue_engine import DialogueEngine
from airwaves.services.atc.game_state import GameStateProvider, StaticGameState
from airwaves.services.atc.presentation import ConsoleSink, PresentationSink
from airwaves.services.atc.prompt import PromptTemplate, load_prompt_template
from airwaves.services.atc.session import ATCSession, SessionState
from airwaves.services.atc.tuning import TuningState

__all__ = [
    "ATCSession",
    "ChatMessage",
    "ConsoleSink",
    "ConversationContext",
    "ConversationStore",
    "DialogueEngine",
    "GameStateProvider",
    "MessageRole",
    "PresentationSink",
    "PromptTemplate",
    "SessionState",
    "StaticGameState",
    "TuningState",
    "load_prompt_template",
]
