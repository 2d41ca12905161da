from collections.abc import AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for streaming responses that captures usage info.

    Acts as an async iterator for text fragments while storing token usage
    that becomes available at the end of the stream. A stream is consumed
    once; retrying means issuing a new request.

    Usage:
        stream = await provider.complete_text_stream(prompt)
        async for fragment in stream:
            print(fragment, end="")
        # After iteration, usage is available
        print(stream.usage)  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
        """
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get next fragment from the underlying iterator."""
        return await self._iter.__anext__()


class ChatMessage(BaseModel):
    """One turn of a conversation.

    Not frozen: the most recent model message grows while its stream is
    still arriving.
    """

    role: Literal["user", "model"] = Field(description="Who produced the message")
    text: str = Field(default="", description="Message text")


class ImagePayload(BaseModel):
    """Raw image bytes plus MIME type, as sent to or returned by the service."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(description="Raw image bytes")
    mime_type: str = Field(description="MIME type, e.g. 'image/jpeg'")

    @property
    def extension(self) -> str:
        """File extension matching the MIME type."""
        subtype = self.mime_type.split("/")[-1].lower()
        return "jpg" if subtype == "jpeg" else subtype


class VideoJob(BaseModel):
    """Handle for a long-running video generation job.

    Only ever updated by re-fetching status from the service.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Opaque operation name used for polling")
    done: bool = Field(default=False, description="Whether the job reached a terminal state")
    video_uri: str | None = Field(default=None, description="Result locator once done")
    error: str | None = Field(default=None, description="Service-reported failure, if any")


class GroundingSource(BaseModel):
    """A web source backing a grounded answer."""

    model_config = ConfigDict(frozen=True)

    uri: str
    title: str


class ResearchResult(BaseModel):
    """Grounded research answer with its sources."""

    model_config = ConfigDict(frozen=True)

    text: str
    sources: list[GroundingSource] = Field(default_factory=list)
