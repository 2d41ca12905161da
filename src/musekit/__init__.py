"""
MuseKit: generative AI creative tools backed by the Gemini model family.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .errors import (
    InputValidationError,
    InvalidFormatError,
    JobFailedError,
    JobNoResultError,
    MuseError,
    PromptStoreError,
    ServiceError,
)
from .llm import GenerativeProvider, create_llm_provider
from .library import PromptLibrary, create_prompt_store
from .streaming import ComparisonHub
from .tools import CreativeTool, ToolSession, create_tool

__all__ = [
    "InputValidationError",
    "InvalidFormatError",
    "JobFailedError",
    "JobNoResultError",
    "MuseError",
    "PromptStoreError",
    "ServiceError",
    "GenerativeProvider",
    "create_llm_provider",
    "PromptLibrary",
    "create_prompt_store",
    "ComparisonHub",
    "CreativeTool",
    "ToolSession",
    "create_tool",
]
