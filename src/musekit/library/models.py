"""Data models for the prompt library.

These models define the structure of saved prompts, independent of the
storage backend used.
"""

import threading
import time

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

_id_lock = threading.Lock()
_last_id = 0


def new_prompt_id() -> str:
    """Time-based id: epoch milliseconds, strictly increasing within a process."""
    global _last_id
    with _id_lock:
        _last_id = max(int(time.time() * 1000), _last_id + 1)
        return str(_last_id)


class SavedPrompt(BaseModel):
    """A prompt the user chose to keep."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_prompt_id, description="Time-based identifier")
    title: str = Field(description="Short label shown in the library")
    prompt: str = Field(description="The prompt text")


SavedPromptList = TypeAdapter(list[SavedPrompt])


def dump_prompts(prompts: list[SavedPrompt]) -> str:
    """Serialize prompts (most recent first) to JSON text."""
    return SavedPromptList.dump_json(prompts).decode("utf-8")


def parse_prompts(raw: str | bytes) -> list[SavedPrompt]:
    """Parse JSON text produced by ``dump_prompts``.

    Raises:
        pydantic.ValidationError: If the text is not a list of prompts
    """
    return SavedPromptList.validate_json(raw)
