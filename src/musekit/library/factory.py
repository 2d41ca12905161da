"""Factory for creating prompt store backends."""

from typing import Any

from .base import PromptStore


def create_prompt_store(
    backend: str = "json",
    **kwargs: Any
) -> PromptStore:
    """Create a prompt store backend.

    Args:
        backend: Backend type ("json", "sqlite" or "memory")
        **kwargs: Backend-specific configuration (``path``, ``slot``)

    Returns:
        PromptStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "json":
        from .json_file import JsonFilePromptStore
        return JsonFilePromptStore(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLitePromptStore
        return SQLitePromptStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryPromptStore
        kwargs.pop("path", None)
        return InMemoryPromptStore(**kwargs)

    raise ValueError(
        f"Unsupported prompt store backend: {backend}. "
        f"Supported backends: json, sqlite, memory"
    )
