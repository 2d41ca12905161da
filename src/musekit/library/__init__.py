"""Prompt library module for musekit.

Provides durable local storage for the user's saved prompts.
"""

from .base import PromptStore
from .factory import create_prompt_store
from .library import PromptLibrary
from .models import SavedPrompt, new_prompt_id

__all__ = [
    "PromptStore",
    "PromptLibrary",
    "SavedPrompt",
    "create_prompt_store",
    "new_prompt_id",
]
