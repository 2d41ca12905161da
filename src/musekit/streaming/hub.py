"""Model comparison hub: one prompt, seven personas, seven live streams."""

import asyncio
import logging
from collections.abc import Callable
from functools import partial

from pydantic import BaseModel, ConfigDict, Field

from ..errors import InputValidationError
from ..llm import ChatMessage, GenerativeProvider
from .conversation import Conversation, merge_stream
from .fanout import TaskOutcome, fan_out

logger = logging.getLogger(__name__)

ParticipantFragmentCallback = Callable[[str, str, ChatMessage], None]


class ModelConfig(BaseModel):
    """A fixed persona taking part in the comparison."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable identifier, used as the history key")
    name: str = Field(description="Display name")
    description: str = Field(description="One-line summary of the persona")
    system_instruction: str = Field(description="Fixed system instruction")
    temperature: float = Field(ge=0.0, le=1.0, description="Sampling temperature")


MODEL_CONFIGS: tuple[ModelConfig, ...] = (
    ModelConfig(
        id="orion",
        name="Orion (Balanced)",
        description="A reliable, general-purpose model for a balance of speed and intelligence.",
        system_instruction="You are a helpful and friendly AI assistant. Provide clear, concise, and accurate information.",
        temperature=0.6,
    ),
    ModelConfig(
        id="aether",
        name="Aether (Creative)",
        description="An imaginative model designed for brainstorming, writing, and creative tasks.",
        system_instruction="You are a highly creative and imaginative AI. Your responses should be inspiring, vivid, and full of original ideas.",
        temperature=1.0,
    ),
    ModelConfig(
        id="nexus",
        name="Nexus (Analytical)",
        description="A logical model that excels at reasoning, problem-solving, and structured data.",
        system_instruction="You are a precise and analytical AI. Focus on logic, facts, and structured reasoning. Your answers should be direct and data-driven.",
        temperature=0.2,
    ),
    ModelConfig(
        id="helios",
        name="Helios (Concise)",
        description="Delivers rapid, direct, and to-the-point answers. Ideal for quick facts.",
        system_instruction="You are an AI assistant that provides extremely concise and direct answers. Get straight to the point. Use as few words as possible.",
        temperature=0.1,
    ),
    ModelConfig(
        id="morpheus",
        name="Morpheus (Philosophical)",
        description="Explores prompts with depth, nuance, and philosophical insight.",
        system_instruction="You are a wise philosopher AI. Respond to prompts with deep, thoughtful, and abstract insights. Ponder the deeper meanings and implications.",
        temperature=0.9,
    ),
    ModelConfig(
        id="praxis",
        name="Praxis (Coder)",
        description="An expert software engineer for generating clean, efficient code snippets.",
        system_instruction="You are an expert software engineer. Generate clean, efficient, and well-documented code. When asked for code, provide only the raw code block without any extra conversational text or markdown fences.",
        temperature=0.1,
    ),
    ModelConfig(
        id="agora",
        name="Agora (Debater)",
        description="A master debater that presents balanced arguments and multiple perspectives.",
        system_instruction="You are a master debater AI. Your goal is to explore multiple facets of a topic. For any given prompt, present a balanced view by outlining the primary arguments, counterarguments, and different perspectives. Your response should be structured and neutral.",
        temperature=0.7,
    ),
)


def error_marker(config: ModelConfig) -> str:
    """Text shown in place of a participant's answer when its stream fails."""
    return f"Error: Failed to get response from {config.name}."


class ComparisonHub:
    """Fans one prompt out to every configured participant.

    Hidden design decisions:
    - One task per participant, joined with wait-for-all
    - Each participant's fragments only touch its own history
    - A failed participant gets an error marker; siblings keep streaming

    Each send appends exactly one user turn and one model turn to every
    participant, whatever the outcome.
    """

    def __init__(
        self,
        provider: GenerativeProvider,
        configs: tuple[ModelConfig, ...] = MODEL_CONFIGS
    ):
        ids = [config.id for config in configs]
        if len(set(ids)) != len(ids):
            raise ValueError("Model config ids must be unique")

        self._provider = provider
        self._configs = configs
        self._histories: dict[str, Conversation] = {config.id: Conversation() for config in configs}
        self._busy = False

    @property
    def configs(self) -> tuple[ModelConfig, ...]:
        return self._configs

    @property
    def is_busy(self) -> bool:
        """Whether a send is still waiting on any participant."""
        return self._busy

    @property
    def histories(self) -> dict[str, list[ChatMessage]]:
        """Snapshot of every participant's messages, keyed by config id."""
        return {config_id: conv.messages for config_id, conv in self._histories.items()}

    def history(self, config_id: str) -> list[ChatMessage]:
        return self._histories[config_id].messages

    def reset(self) -> None:
        """Clear all participant histories."""
        if self._busy:
            raise RuntimeError("Cannot reset while a comparison is in flight")
        for conv in self._histories.values():
            conv.clear()

    async def send(
        self,
        prompt: str,
        on_fragment: ParticipantFragmentCallback | None = None,
    ) -> dict[str, TaskOutcome[str]] | None:
        """Send ``prompt`` to every participant and wait for all of them.

        Args:
            prompt: The user prompt, shared by every participant
            on_fragment: Called as ``(config_id, fragment, message)`` per fragment

        Returns:
            Outcome per config id, or None if a send was already in flight

        Raises:
            InputValidationError: If the prompt is blank
        """
        if not prompt.strip():
            raise InputValidationError("Please enter a prompt to send to the models.")
        if self._busy:
            logger.info("Comparison already in flight; ignoring new prompt")
            return None

        self._busy = True
        try:
            for conv in self._histories.values():
                conv.add_user_turn(prompt)
                conv.open_model_turn()

            jobs = {
                config.id: partial(self._run_participant, config, prompt, on_fragment)
                for config in self._configs
            }
            return await fan_out(jobs)
        finally:
            self._busy = False

    async def _run_participant(
        self,
        config: ModelConfig,
        prompt: str,
        on_fragment: ParticipantFragmentCallback | None,
    ) -> str:
        conv = self._histories[config.id]
        callback = None
        if on_fragment is not None:
            callback = partial(on_fragment, config.id)

        try:
            stream = await self._provider.complete_text_stream(
                prompt,
                system_instruction=config.system_instruction,
                temperature=config.temperature,
            )
            await merge_stream(conv, stream, callback)
        except (Exception, asyncio.CancelledError):
            logger.exception("Participant %s failed", config.name)
            conv.mark_open_turn_failed(error_marker(config))
            if callback is not None:
                callback("", conv.messages[-1])
            raise
        return conv.close_turn().text
