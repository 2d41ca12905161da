"""Prompt library facade.

Owns the in-memory list the user sees and keeps the store in sync with it.
Storage trouble never reaches the user: a failed load looks like an empty
library, a failed save is logged and the in-memory list stays authoritative.
"""

import logging

from ..errors import InputValidationError, PromptStoreError
from .base import PromptStore
from .models import SavedPrompt

logger = logging.getLogger(__name__)


class PromptLibrary:
    """Most-recent-first collection of saved prompts.

    Single writer, last write wins: every mutation rewrites the whole slot.
    """

    def __init__(self, store: PromptStore):
        self._store = store
        self._prompts: list[SavedPrompt] = []

    @property
    def prompts(self) -> list[SavedPrompt]:
        return list(self._prompts)

    def __len__(self) -> int:
        return len(self._prompts)

    async def open(self) -> list[SavedPrompt]:
        """Connect the store and load it; connection errors behave like load errors."""
        try:
            await self._store.connect()
        except PromptStoreError as e:
            logger.warning("Failed to open %s prompt store: %s", self._store.backend_type, e)
        return await self.load()

    async def close(self) -> None:
        await self._store.disconnect()

    async def load(self) -> list[SavedPrompt]:
        """Read saved prompts; any storage error yields an empty library."""
        try:
            self._prompts = await self._store.load_all()
        except PromptStoreError as e:
            logger.warning("Failed to load prompts from %s store: %s", self._store.backend_type, e)
            self._prompts = []
        return self.prompts

    async def save(self) -> bool:
        """Write the current list; returns False (after logging) on failure."""
        try:
            await self._store.save_all(self._prompts)
        except PromptStoreError as e:
            logger.error("Failed to save prompts to %s store: %s", self._store.backend_type, e)
            return False
        return True

    async def add(self, title: str, prompt: str) -> SavedPrompt:
        """Save a new prompt at the head of the library.

        Raises:
            InputValidationError: If the title or the prompt text is blank
        """
        if not title.strip() or not prompt.strip():
            raise InputValidationError("Both title and prompt text are required.")

        saved = SavedPrompt(title=title, prompt=prompt)
        self._prompts.insert(0, saved)
        await self.save()
        return saved

    async def delete(self, prompt_id: str) -> bool:
        """Remove the prompt with ``prompt_id``; returns whether one was removed."""
        for index, saved in enumerate(self._prompts):
            if saved.id == prompt_id:
                del self._prompts[index]
                await self.save()
                return True
        return False

    def get(self, prompt_id: str) -> SavedPrompt | None:
        return next((p for p in self._prompts if p.id == prompt_id), None)
