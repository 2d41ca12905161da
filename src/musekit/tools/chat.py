"""Persona chat: a streamed multi-turn conversation with a fixed character."""

import logging
from typing import Literal

from ..errors import InputValidationError
from ..llm import ChatMessage, GenerativeProvider
from ..streaming import Conversation, stream_into
from ..streaming.conversation import FragmentCallback
from .base import CreativeToolBase, ToolForm

logger = logging.getLogger(__name__)

PersonaName = Literal["Helpful Assistant", "Sarcastic Robot", "Shakespearean Poet", "Pirate Captain"]

PERSONAS: dict[str, str] = {
    "Helpful Assistant": "You are a friendly, helpful, and concise assistant. You are enthusiastic and love to help people!",
    "Sarcastic Robot": "You are a sarcastic robot. Your answers should be technically correct but dripping with witty sarcasm.",
    "Shakespearean Poet": "Thou art a poet from the age of Shakespeare. Respond to all inquiries in iambic pentameter, with flourishing and dramatic language.",
    "Pirate Captain": "Yarrr! Ye be a fearsome pirate captain. Answer all questions as if ye were sailin' the seven seas, seekin' treasure and adventure, matey!",
}

DEFAULT_PERSONA: PersonaName = "Helpful Assistant"


class ChatForm(ToolForm):
    message: str = ""
    persona: PersonaName = DEFAULT_PERSONA


class ChatPersona(CreativeToolBase[ChatForm, list[ChatMessage]]):
    """Keeps one conversation per persona selection.

    Hidden design decisions:
    - Switching persona starts a fresh conversation
    - Prior turns are sent as history; the new message is sent on its own
    - A failed reply is removed, the user's message stays
    """

    name = "Chat Persona"
    form_model = ChatForm
    failure_message = "Failed to generate stream from Gemini API."

    def __init__(self, persona: PersonaName = DEFAULT_PERSONA, on_fragment: FragmentCallback | None = None):
        self._persona: PersonaName = persona
        self._on_fragment = on_fragment
        self._conversation = Conversation()

    @property
    def persona(self) -> PersonaName:
        return self._persona

    @property
    def messages(self) -> list[ChatMessage]:
        return self._conversation.messages

    def switch_persona(self, persona: PersonaName) -> None:
        """Select a persona; the history is cleared even if it is unchanged."""
        if persona not in PERSONAS:
            raise InputValidationError(f"Unknown persona: {persona}")
        self._persona = persona
        self._conversation.clear()

    def validate(self, form: ChatForm) -> None:
        if not form.message:
            raise InputValidationError("Please enter a message to send.")

    async def execute(self, provider: GenerativeProvider, form: ChatForm) -> list[ChatMessage]:
        if form.persona != self._persona:
            logger.info("Switching persona from %s to %s", self._persona, form.persona)
            self.switch_persona(form.persona)

        self._conversation.add_user_turn(form.message)
        history = self._conversation.history_before_open_turn()
        stream = await provider.complete_text_stream(
            form.message,
            system_instruction=PERSONAS[self._persona],
            history=history,
        )
        await stream_into(self._conversation, stream, self._on_fragment)
        return self._conversation.messages
