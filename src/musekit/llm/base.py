from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel

from ..config import AspectRatio
from .models import ChatMessage, ImagePayload, ResearchResult, StreamingResponse, VideoJob

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class GenerativeProvider(ABC):
    """Abstract base class for generative AI service providers.

    This module hides the design decision of which service backs the tools.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Wrapping transport and API failures into ``ServiceError``

    Implementations do not retry, time out or back off; a failed call
    surfaces to the caller as-is.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            text = await provider.complete_text(prompt)
        # Automatically cleaned up
    """

    @abstractmethod
    async def complete_text(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a single text completion.

        Args:
            prompt: The user prompt
            system_instruction: Optional natural-language system instruction
            temperature: Optional sampling temperature (0.0 to 1.0)

        Returns:
            Completion text

        Raises:
            ServiceError: If the service call fails
        """

    @abstractmethod
    async def complete_text_stream(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
        history: list[ChatMessage] | None = None,
    ) -> StreamingResponse:
        """Generate a streamed text completion.

        Args:
            prompt: The user prompt (the newest user turn)
            system_instruction: Optional system instruction
            temperature: Optional sampling temperature
            history: Earlier turns of a multi-turn conversation

        Returns:
            StreamingResponse yielding text fragments in arrival order.
            Errors during iteration are raised as ``ServiceError``.

        Raises:
            ServiceError: If the request cannot be started
        """

    @abstractmethod
    async def complete_structured(
        self,
        prompt: str,
        schema: type[SchemaT],
        system_instruction: str | None = None,
    ) -> SchemaT:
        """Generate a completion constrained to a schema and parse it.

        Args:
            prompt: The user prompt
            schema: Pydantic model describing the expected output shape
            system_instruction: Optional system instruction

        Returns:
            Instance of ``schema`` built from the response

        Raises:
            ServiceError: If the service call fails
            InvalidFormatError: If the response does not match ``schema``
        """

    @abstractmethod
    async def generate_images(
        self,
        prompt: str,
        aspect_ratio: AspectRatio = "1:1",
        number_of_images: int = 1,
    ) -> list[ImagePayload]:
        """Generate images from a text prompt.

        Raises:
            ServiceError: If the service call fails
        """

    @abstractmethod
    async def analyze_image(self, image: ImagePayload, prompt: str) -> str:
        """Answer a prompt about an image.

        Raises:
            ServiceError: If the service call fails
        """

    @abstractmethod
    async def research(self, query: str) -> ResearchResult:
        """Answer a query grounded in web search results.

        Raises:
            ServiceError: If the service call fails
        """

    @abstractmethod
    async def submit_video_job(self, prompt: str) -> VideoJob:
        """Start a long-running video generation job.

        Raises:
            ServiceError: If the job cannot be submitted
        """

    @abstractmethod
    async def poll_video_job(self, job: VideoJob) -> VideoJob:
        """Re-fetch the status of a video job once.

        Raises:
            ServiceError: If the status check fails
        """

    @abstractmethod
    async def fetch_video(self, uri: str) -> bytes:
        """Download the binary result of a finished video job.

        Raises:
            ServiceError: If the download fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "GenerativeProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
