"""Abstract base class for prompt library backends.

This module defines the interface for prompt library storage.
The abstraction hides:
- Storage format (JSON file, SQLite, in-memory)
- Persistence mechanism
- Connection management

A backend holds one named slot containing the whole ordered list. Saves
always rewrite the slot completely; there are no partial or append writes.
"""

from abc import ABC, abstractmethod

from .models import SavedPrompt


class PromptStore(ABC):
    """Abstract prompt library backend."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the backend gracefully."""

    @abstractmethod
    async def load_all(self) -> list[SavedPrompt]:
        """Read the stored list, most recent first.

        Returns an empty list when nothing has been saved yet.

        Raises:
            PromptStoreError: If the slot cannot be read or parsed
        """

    @abstractmethod
    async def save_all(self, prompts: list[SavedPrompt]) -> None:
        """Replace the stored list with ``prompts``.

        Raises:
            PromptStoreError: If the slot cannot be written
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "PromptStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
