"""Configuration constants.

Centralizes magic numbers and configuration values shared across modules.
Runtime settings (API keys, model names, storage paths) come from the
environment; see ``musekit.cli.providers``.
"""

from typing import Final, Literal

# Models
DEFAULT_TEXT_MODEL: Final = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL: Final = "imagen-3.0-generate-002"
DEFAULT_VIDEO_MODEL: Final = "veo-2.0-generate-001"

# Image generation
AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]
ASPECT_RATIOS: Final[tuple[str, ...]] = ("1:1", "16:9", "9:16", "4:3", "3:4")
IMAGE_OUTPUT_MIME_TYPE: Final = "image/jpeg"

# File input limits
MAX_IMAGE_BYTES: Final = 4 * 1024 * 1024  # 4MB upload limit

# Video job polling
VIDEO_POLL_INTERVAL_SECONDS: Final = 10.0
VIDEO_PROGRESS_INTERVAL_SECONDS: Final = 4.0
VIDEO_PROGRESS_MESSAGES: Final[tuple[str, ...]] = (
    "Warming up the virtual cameras...",
    "Director is reviewing the script...",
    "Action! Filming the first scene...",
    "This can take a few minutes, please be patient...",
    "Processing the raw footage...",
    "Adding dazzling special effects...",
    "Finalizing the sound design...",
    "Almost there, wrapping up the production...",
)

# Prompt library
PROMPT_LIBRARY_SLOT: Final = "gemini-prompt-library"
DEFAULT_PROMPT_STORE_PATH: Final = "./prompt_library.json"

# Output
DEFAULT_OUTPUT_DIR: Final = "./musekit-output"
