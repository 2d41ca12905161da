"""Provider factory functions for CLI.

Centralizes creation of the generative provider and the prompt store from
environment variables. Hides configuration details from command
implementations.
"""

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..config import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROMPT_STORE_PATH,
    DEFAULT_TEXT_MODEL,
    DEFAULT_VIDEO_MODEL,
)
from ..library import PromptStore, create_prompt_store
from ..llm import GenerativeProvider, create_llm_provider

# Default console for output
_console = Console()

LOG_LEVELS = ("debug", "info", "warning", "error")


def configure_logging(level: str = "warning", console: Console | None = None) -> None:
    """Route library logging through a Rich handler at ``level``."""
    level_name = level.upper()
    if level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(f"Log level must be one of: {', '.join(LOG_LEVELS)}")

    logging.basicConfig(
        level=level_name,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # SDK transport chatter is only useful when debugging
    if level_name != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)


def get_api_key() -> str | None:
    """API key from GEMINI_API_KEY, falling back to API_KEY."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def get_llm(console: Console | None = None) -> GenerativeProvider | None:
    """Create the generative provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Provider instance, or None if no API key is configured

    Environment variables:
        GEMINI_API_KEY: Gemini API key (API_KEY is accepted as a fallback)
        GEMINI_MODEL: Text and vision model (default: gemini-2.5-flash)
        GEMINI_IMAGE_MODEL: Image model (default: imagen-3.0-generate-002)
        GEMINI_VIDEO_MODEL: Video model (default: veo-2.0-generate-001)
    """
    con = console or _console
    api_key = get_api_key()
    if not api_key:
        con.print("[yellow]Warning: GEMINI_API_KEY not set, generative features disabled[/yellow]")
        return None

    return create_llm_provider(
        "gemini",
        api_key=api_key,
        model=os.getenv("GEMINI_MODEL", DEFAULT_TEXT_MODEL),
        image_model=os.getenv("GEMINI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        video_model=os.getenv("GEMINI_VIDEO_MODEL", DEFAULT_VIDEO_MODEL),
    )


def require_llm(console: Console | None = None) -> GenerativeProvider:
    """Get the provider, exiting if it is not configured.

    Raises:
        typer.Exit: If no API key is configured
    """
    con = console or _console
    llm = get_llm(con)
    if not llm:
        con.print("[red]Error: Gemini provider not configured[/red]")
        raise typer.Exit(code=1)
    return llm


def get_prompt_store() -> PromptStore:
    """Create the prompt store backend from environment variables.

    Environment variables:
        MUSEKIT_PROMPT_STORE: Backend type (json, sqlite, memory; default: json)
        MUSEKIT_PROMPT_STORE_PATH: File path for json/sqlite backends
    """
    backend = os.getenv("MUSEKIT_PROMPT_STORE", "json").lower()
    path = os.getenv("MUSEKIT_PROMPT_STORE_PATH")
    if path is None:
        path = DEFAULT_PROMPT_STORE_PATH if backend == "json" else "./prompt_library.db"
    return create_prompt_store(backend, path=path)


def get_output_dir() -> Path:
    """Directory for generated images and videos (MUSEKIT_OUTPUT_DIR)."""
    return Path(os.getenv("MUSEKIT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR))
