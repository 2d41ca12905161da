from .base import GenerativeProvider
from .factory import create_llm_provider
from .models import (
    ChatMessage,
    GroundingSource,
    ImagePayload,
    ResearchResult,
    StreamingResponse,
    VideoJob,
)
from .providers import GeminiProvider

__all__ = [
    "GenerativeProvider",
    "create_llm_provider",
    "ChatMessage",
    "GroundingSource",
    "ImagePayload",
    "ResearchResult",
    "StreamingResponse",
    "VideoJob",
    "GeminiProvider",
]
