"""System instructions for the creative tools.

Each tool's instruction lives in ``<name>.txt`` beside this module. A
``prompts/`` folder in the current directory shadows the packaged files one
name at a time, so a single instruction can be reworded without touching the
rest.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


@lru_cache(maxsize=32)
def load_prompt(name: str) -> str:
    """Return the raw instruction text for ``name``, stripped.

    ``./prompts/<name>.txt`` wins over the packaged copy. Results are cached
    per name until ``clear_cache()``.

    Raises:
        FileNotFoundError: If neither location has the file
    """
    filename = f"{name}.txt"
    candidates = (Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename)
    for path in candidates:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()

    searched = "\n".join(f"  - {path}" for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:\n{searched}")


def get_system_instruction(name: str, **values: str) -> str:
    """Instruction ``name`` with ``{placeholders}`` filled from ``values``.

    Without values the template is returned untouched, so instructions that
    contain literal braces need no escaping unless they also take values.
    The code generator, for instance, takes ``language``.
    """
    template = load_prompt(name)
    return template.format(**values) if values else template


def clear_cache() -> None:
    """Forget cached instructions so edited files are read again."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "get_system_instruction",
    "clear_cache",
]
