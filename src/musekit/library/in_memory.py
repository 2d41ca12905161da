"""In-memory prompt store.

Data is lost when the application exits. Suitable for tests and
single-session use.
"""

from ..config import PROMPT_LIBRARY_SLOT
from .base import PromptStore
from .models import SavedPrompt, dump_prompts, parse_prompts


class InMemoryPromptStore(PromptStore):
    """Dict-of-slots storage that still round-trips through JSON."""

    def __init__(self, slot: str = PROMPT_LIBRARY_SLOT):
        self._slot = slot
        self._slots: dict[str, str] = {}

    async def connect(self) -> None:
        """Initialize memory (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close memory (no-op for in-memory)."""
        pass

    async def load_all(self) -> list[SavedPrompt]:
        raw = self._slots.get(self._slot)
        return parse_prompts(raw) if raw else []

    async def save_all(self, prompts: list[SavedPrompt]) -> None:
        self._slots[self._slot] = dump_prompts(prompts)

    @property
    def backend_type(self) -> str:
        return "memory"
