"""JSON file prompt store.

Keeps named slots in one JSON document on disk, the way a browser keeps
``localStorage`` entries: each slot maps to the serialized prompt list.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..config import DEFAULT_PROMPT_STORE_PATH, PROMPT_LIBRARY_SLOT
from ..errors import PromptStoreError
from .base import PromptStore
from .models import SavedPrompt, dump_prompts, parse_prompts


class JsonFilePromptStore(PromptStore):
    """File-backed prompt store.

    Writes go to a temporary file in the same directory that then replaces
    the original, so a crash never leaves a half-written document.
    """

    def __init__(
        self,
        path: str | Path = DEFAULT_PROMPT_STORE_PATH,
        slot: str = PROMPT_LIBRARY_SLOT
    ):
        self._path = Path(path)
        self._slot = slot

    async def connect(self) -> None:
        """Ensure the parent directory exists."""
        try:
            await asyncio.to_thread(self._path.parent.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise PromptStoreError(f"Cannot create prompt library directory: {e}") from e

    async def disconnect(self) -> None:
        pass

    def _read_document(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        document = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError("prompt library document must be a JSON object")
        return document

    def _write_document(self, document: dict[str, str]) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    async def load_all(self) -> list[SavedPrompt]:
        try:
            document = await asyncio.to_thread(self._read_document)
            raw = document.get(self._slot)
            return parse_prompts(raw) if raw else []
        except (OSError, ValueError, ValidationError) as e:
            raise PromptStoreError(f"Cannot read prompt library from {self._path}: {e}") from e

    async def save_all(self, prompts: list[SavedPrompt]) -> None:
        def _save() -> None:
            try:
                document = self._read_document()
            except ValueError:
                # Corrupt document: this slot is rewritten in full anyway
                document = {}
            document[self._slot] = dump_prompts(prompts)
            self._write_document(document)

        try:
            await asyncio.to_thread(_save)
        except OSError as e:
            raise PromptStoreError(f"Cannot write prompt library to {self._path}: {e}") from e

    @property
    def backend_type(self) -> str:
        return "json"

    @property
    def path(self) -> Path:
        return self._path
