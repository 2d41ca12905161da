"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel, ValidationError

from musekit.errors import InvalidFormatError, ServiceError
from musekit.llm import (
    ChatMessage,
    GenerativeProvider,
    ImagePayload,
    ResearchResult,
    StreamingResponse,
    VideoJob,
)
from musekit.prompts import clear_cache

# Smallest valid JPEG-ish payload; the bytes are never decoded
JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"


class FakeProvider(GenerativeProvider):
    """Scripted stand-in for the Gemini service.

    Every call is recorded in ``calls`` as ``(method, kwargs)``. Streams are
    scripted per system instruction; a script item that is an exception is
    raised at that point of the stream. ``failures`` maps a method name to an
    exception raised when it is called.
    """

    def __init__(self):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[str, Exception] = {}
        self.text = "A generated answer."
        self.default_stream: list[str | Exception] = ["Once", " upon", " a time."]
        self.streams: dict[str, list[str | Exception]] = {}
        self.structured_json: str | None = None
        self.images: list[ImagePayload] = [ImagePayload(data=JPEG_BYTES, mime_type="image/jpeg")]
        self.research_result = ResearchResult(text="Grounded answer.")
        self.submitted_job = VideoJob(name="operations/video-1")
        self.poll_results: list[VideoJob | Exception] = []
        self.video_bytes = b"\x00\x00\x00\x18ftypmp42"
        self.closed = False

    def _record(self, method: str, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        if method in self.failures:
            raise self.failures[method]

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    async def complete_text(self, prompt, system_instruction=None, temperature=None):
        self._record("complete_text", prompt=prompt, system_instruction=system_instruction, temperature=temperature)
        return self.text

    async def complete_text_stream(self, prompt, system_instruction=None, temperature=None, history=None):
        self._record(
            "complete_text_stream",
            prompt=prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            history=list(history) if history is not None else None,
        )
        script = self.streams.get(system_instruction, self.default_stream)
        return StreamingResponse(self._play(script))

    async def _play(self, script: list[str | Exception]) -> AsyncIterator[str]:
        for item in script:
            # Yield control so concurrent streams interleave
            await asyncio.sleep(0)
            if isinstance(item, Exception):
                raise item
            yield item

    async def complete_structured(self, prompt, schema, system_instruction=None):
        self._record("complete_structured", prompt=prompt, schema=schema, system_instruction=system_instruction)
        raw_text = self.structured_json or "{}"
        try:
            return schema.model_validate_json(raw_text)
        except ValidationError as e:
            raise InvalidFormatError("The model returned an invalid format.", raw_text=raw_text) from e

    async def generate_images(self, prompt, aspect_ratio="1:1", number_of_images=1):
        self._record("generate_images", prompt=prompt, aspect_ratio=aspect_ratio)
        return list(self.images)

    async def analyze_image(self, image, prompt):
        self._record("analyze_image", image=image, prompt=prompt)
        return self.text

    async def research(self, query):
        self._record("research", query=query)
        return self.research_result

    async def submit_video_job(self, prompt):
        self._record("submit_video_job", prompt=prompt)
        return self.submitted_job

    async def poll_video_job(self, job):
        self._record("poll_video_job", name=job.name)
        if not self.poll_results:
            return VideoJob(name=job.name)
        result = self.poll_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_video(self, uri):
        self._record("fetch_video", uri=uri)
        return self.video_bytes

    async def close(self):
        self.closed = True


@pytest.fixture
def provider() -> FakeProvider:
    """Return a fresh scripted provider."""
    return FakeProvider()


@pytest.fixture
def api_keys() -> dict[str, str | None]:
    """API keys for integration tests, read from the environment."""
    return {"gemini": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")}


@pytest.fixture
def service_error() -> ServiceError:
    return ServiceError("Failed to generate text with Gemini API.")


@pytest.fixture
def image_payload() -> ImagePayload:
    return ImagePayload(data=JPEG_BYTES, mime_type="image/jpeg")


@pytest.fixture
def sample_image_file(tmp_path: Path) -> Path:
    """Create a small image file on disk."""
    path = tmp_path / "photo.jpg"
    path.write_bytes(JPEG_BYTES)
    return path


@pytest.fixture
def sample_document(tmp_path: Path) -> Path:
    """Create a plain-text document on disk."""
    path = tmp_path / "notes.txt"
    path.write_text("The quarterly report shows growth in every region.\nCosts fell by 4%.\n", encoding="utf-8")
    return path


@pytest.fixture
def fresh_prompt_cache():
    """Prompt files are cached process-wide; isolate tests that change the search path."""
    clear_cache()
    yield
    clear_cache()


def user(text: str) -> ChatMessage:
    return ChatMessage(role="user", text=text)


def model(text: str) -> ChatMessage:
    return ChatMessage(role="model", text=text)


class EchoSchema(BaseModel):
    """Minimal schema for structured-output tests."""

    value: str
