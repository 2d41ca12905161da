"""Google Gemini provider implementation.

Uses the official Google GenAI SDK for async text, image, vision, grounded
search and video requests.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return candidates without text parts (safety filtering,
tool-only turns). Text extraction falls back to an empty string in that case.
"""

import contextlib
import logging
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from ...config import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEXT_MODEL,
    DEFAULT_VIDEO_MODEL,
    IMAGE_OUTPUT_MIME_TYPE,
    AspectRatio,
)
from ...errors import InvalidFormatError, ServiceError
from ..base import GenerativeProvider, SchemaT
from ..models import (
    ChatMessage,
    GroundingSource,
    ImagePayload,
    ResearchResult,
    StreamingResponse,
    VideoJob,
)

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _service_call(action: str) -> Iterator[None]:
    """Translate SDK and transport failures into ``ServiceError``."""
    try:
        yield
    except (genai_errors.APIError, genai_errors.UnknownApiResponseError, httpx.HTTPError) as e:
        logger.error("Gemini request failed (%s): %s", action, e)
        raise ServiceError(f"Failed to {action} with Gemini API.") from e


class GeminiProvider(GenerativeProvider):
    """Google Gemini provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - Message format conversion (user/model turns)
    - JSON-mode schema enforcement for structured output
    - Video operation handles and authenticated result download
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_TEXT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        video_model: str = DEFAULT_VIDEO_MODEL,
        http_client: httpx.AsyncClient | None = None,
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Default text model (gemini-2.5-flash, gemini-2.5-pro)
            image_model: Image generation model
            video_model: Video generation model
            http_client: Optional client used to download video results
            **client_kwargs: Additional kwargs for Client
        """
        self._api_key = api_key
        self._model = model
        self._image_model = image_model
        self._video_model = video_model
        self._client = genai.Client(api_key=api_key, **client_kwargs)
        self._http = http_client or httpx.AsyncClient(follow_redirects=True, timeout=None)

    @property
    def model(self) -> str:
        """Get the default text model name."""
        return self._model

    def _convert_history(
        self,
        history: list[ChatMessage] | None,
        prompt: str
    ) -> list[types.Content]:
        """Convert prior turns plus the new prompt to Gemini contents."""
        contents = [
            types.Content(role=msg.role, parts=[types.Part(text=msg.text)])
            for msg in history or []
            if msg.text
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=prompt)]))
        return contents

    def _extract_content(self, response: Any) -> str:
        """Extract text content from a Gemini response, handling empty responses.

        Args:
            response: Gemini GenerateContentResponse

        Returns:
            Text content or empty string
        """
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                if texts:
                    return "".join(texts)

        try:
            return response.text or ""
        except (ValueError, AttributeError):
            return ""

    @staticmethod
    def _usage(response: Any) -> dict[str, int] | None:
        if not response.usage_metadata:
            return None
        return {
            "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
            "completion_tokens": response.usage_metadata.candidates_token_count or 0,
            "total_tokens": response.usage_metadata.total_token_count or 0,
        }

    async def complete_text(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a single text completion using Gemini."""
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
        )
        with _service_call("generate text"):
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config
            )
        return self._extract_content(response)

    async def complete_text_stream(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
        history: list[ChatMessage] | None = None,
    ) -> StreamingResponse:
        """Generate a streamed text completion using Gemini.

        The request is issued lazily on first iteration, so connection
        failures surface from the iterator as ``ServiceError``.
        """
        contents = self._convert_history(history, prompt)
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
        )

        response = StreamingResponse(
            self._stream_generator(contents, config, lambda usage: response.set_usage(usage))
        )
        return response

    async def _stream_generator(
        self,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
        on_usage: Callable[[dict[str, int]], None],
    ) -> AsyncIterator[str]:
        """Internal generator that yields text and captures usage from chunks."""
        usage = None

        with _service_call("generate stream"):
            stream = await self._client.aio.models.generate_content_stream(
                model=self._model, contents=contents, config=config
            )
            async for chunk in stream:
                # usage_metadata is only complete on the final chunk
                usage = self._usage(chunk) or usage

                text = self._extract_content(chunk)
                if text:
                    yield text

        if usage:
            on_usage(usage)

    async def complete_structured(
        self,
        prompt: str,
        schema: type[SchemaT],
        system_instruction: str | None = None,
    ) -> SchemaT:
        """Generate JSON constrained to ``schema`` and parse it."""
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=schema,
        )
        with _service_call(f"generate {schema.__name__}"):
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config
            )

        raw_text = self._extract_content(response).strip()
        try:
            return schema.model_validate_json(raw_text)
        except ValidationError as e:
            logger.error("Gemini returned malformed %s: %s", schema.__name__, e)
            raise InvalidFormatError(
                f"The model returned an invalid format for {schema.__name__}.",
                raw_text=raw_text,
            ) from e

    async def generate_images(
        self,
        prompt: str,
        aspect_ratio: AspectRatio = "1:1",
        number_of_images: int = 1,
    ) -> list[ImagePayload]:
        """Generate images with the Imagen model."""
        config = types.GenerateImagesConfig(
            number_of_images=number_of_images,
            output_mime_type=IMAGE_OUTPUT_MIME_TYPE,
            aspect_ratio=aspect_ratio,
        )
        with _service_call("generate images"):
            response = await self._client.aio.models.generate_images(
                model=self._image_model,
                prompt=prompt,
                config=config
            )

        return [
            ImagePayload(
                data=generated.image.image_bytes,
                mime_type=generated.image.mime_type or IMAGE_OUTPUT_MIME_TYPE,
            )
            for generated in response.generated_images or []
            if generated.image and generated.image.image_bytes
        ]

    async def analyze_image(self, image: ImagePayload, prompt: str) -> str:
        """Answer a prompt about an inline image."""
        contents = [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
            prompt,
        ]
        with _service_call("analyze image"):
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
            )
        return self._extract_content(response)

    async def research(self, query: str) -> ResearchResult:
        """Answer a query with Google Search grounding."""
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )
        with _service_call("perform research"):
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=query,
                config=config
            )

        sources: list[GroundingSource] = []
        metadata = response.candidates[0].grounding_metadata if response.candidates else None
        for chunk in (metadata.grounding_chunks if metadata else None) or []:
            web = chunk.web
            if web and web.uri and web.title:
                sources.append(GroundingSource(uri=web.uri, title=web.title))

        return ResearchResult(text=self._extract_content(response), sources=sources)

    def _to_job(self, operation: types.GenerateVideosOperation) -> VideoJob:
        """Convert an SDK operation into an opaque job handle."""
        uri = None
        if operation.response and operation.response.generated_videos:
            video = operation.response.generated_videos[0].video
            uri = video.uri if video else None

        error = None
        if operation.error:
            error = str(operation.error.get("message") or operation.error)

        return VideoJob(
            name=operation.name or "",
            done=bool(operation.done),
            video_uri=uri,
            error=error,
        )

    async def submit_video_job(self, prompt: str) -> VideoJob:
        """Start a Veo video generation operation."""
        with _service_call("start video generation"):
            operation = await self._client.aio.models.generate_videos(
                model=self._video_model,
                prompt=prompt,
                config=types.GenerateVideosConfig(number_of_videos=1),
            )
        return self._to_job(operation)

    async def poll_video_job(self, job: VideoJob) -> VideoJob:
        """Re-fetch a Veo operation by name."""
        with _service_call("poll video operation"):
            operation = await self._client.aio.operations.get(
                types.GenerateVideosOperation(name=job.name)
            )
        return self._to_job(operation)

    async def fetch_video(self, uri: str) -> bytes:
        """Download a finished video, authenticated with the API key."""
        with _service_call("download video"):
            response = await self._http.get(uri, headers={"x-goog-api-key": self._api_key})
            response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the download client.

        Note: The Google GenAI client doesn't require explicit closing.
        """
        await self._http.aclose()
