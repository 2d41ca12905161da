"""Long-running video job poller.

State machine::

    SUBMITTED -> PENDING* -> DONE | FAILED
    any non-terminal state -> CANCELLED (consumer abandoned the job)

Status is only ever learned by re-fetching the job from the service. There
is no maximum number of polls and no overall timeout.
"""

import logging
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..config import VIDEO_POLL_INTERVAL_SECONDS
from ..errors import InputValidationError, JobFailedError, JobNoResultError
from ..llm import GenerativeProvider, VideoJob
from .periodic import PeriodicTask

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    """Lifecycle of a long-running job."""

    IDLE = "idle"
    SUBMITTED = "submitted"
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (JobState.DONE, JobState.FAILED, JobState.CANCELLED)


class VideoResult(BaseModel):
    """Downloaded output of a finished video job."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="Result locator reported by the service")
    data: bytes = Field(description="Video bytes")
    mime_type: str = Field(default="video/mp4")


StateCallback = Callable[[JobState], None]


class VideoJobPoller:
    """Submits one video job and polls it to a terminal state.

    Hidden design decisions:
    - Poll cadence (fixed interval, first check one interval after submit)
    - What "done" means (result URI present, downloaded exactly once)
    - Cancellation semantics (pending poll cleared, nothing fires afterwards)
    """

    def __init__(
        self,
        provider: GenerativeProvider,
        interval: float = VIDEO_POLL_INTERVAL_SECONDS,
        on_state_change: StateCallback | None = None,
    ):
        self._provider = provider
        self._interval = interval
        self._on_state_change = on_state_change
        self._state = JobState.IDLE
        self._job: VideoJob | None = None
        self._result: VideoResult | None = None
        self._periodic: PeriodicTask | None = None
        self._cancel_requested = False

    @property
    def state(self) -> JobState:
        return self._state

    @property
    def job(self) -> VideoJob | None:
        """Current handle; cleared once the job is terminal."""
        return self._job

    @property
    def result(self) -> VideoResult | None:
        return self._result

    @property
    def polls(self) -> int:
        """Number of status checks issued for the current job."""
        return self._periodic.ticks if self._periodic else 0

    def _set_state(self, state: JobState) -> None:
        if state is self._state:
            return
        logger.info("Video job %s: %s -> %s", self._job.name if self._job else "-", self._state.value, state.value)
        self._state = state
        if state.terminal:
            self._job = None
        if self._on_state_change is not None:
            self._on_state_change(state)

    async def run(self, prompt: str) -> VideoResult | None:
        """Submit a job for ``prompt`` and poll until it finishes.

        Returns:
            The downloaded video, or None if ``cancel()`` was called first

        Raises:
            InputValidationError: If the prompt is blank
            ServiceError: If submission, a status check or the download fails
            JobFailedError: If the service reports the job as failed
            JobNoResultError: If the job finished without a result locator
        """
        if not prompt.strip():
            raise InputValidationError("Please enter a prompt for your video.")
        if self._state in (JobState.SUBMITTED, JobState.PENDING):
            raise RuntimeError("A video job is already in progress")

        self._result = None
        self._periodic = None
        self._cancel_requested = False
        self._state = JobState.IDLE

        try:
            self._job = await self._provider.submit_video_job(prompt)
        except Exception:
            self._set_state(JobState.FAILED)
            raise
        self._set_state(JobState.SUBMITTED)
        if self._cancel_requested:
            self._set_state(JobState.CANCELLED)
            return None

        if self._job.done:
            await self._finish(self._job)
            return self._result

        self._periodic = PeriodicTask(self._tick, self._interval, name=f"video-poll:{self._job.name}")
        self._periodic.start()
        finished = await self._periodic.wait()
        if not finished:
            return None
        return self._result

    async def _tick(self) -> bool:
        """One status check; True once the job is terminal."""
        try:
            job = await self._provider.poll_video_job(self._job)
        except Exception:
            self._set_state(JobState.FAILED)
            raise

        self._job = job
        if not job.done:
            self._set_state(JobState.PENDING)
            return False

        await self._finish(job)
        return True

    async def _finish(self, job: VideoJob) -> None:
        if job.error:
            self._set_state(JobState.FAILED)
            raise JobFailedError(f"Video generation failed: {job.error}")
        if not job.video_uri:
            self._set_state(JobState.FAILED)
            raise JobNoResultError("Video generation finished, but no video URL was found.")

        try:
            data = await self._provider.fetch_video(job.video_uri)
        except Exception:
            self._set_state(JobState.FAILED)
            raise

        self._result = VideoResult(uri=job.video_uri, data=data)
        self._set_state(JobState.DONE)

    def cancel(self) -> None:
        """Abandon the job; no further status checks are issued."""
        self._cancel_requested = True
        if self._periodic is not None:
            self._periodic.cancel()
        if not self._state.terminal and self._state is not JobState.IDLE:
            self._set_state(JobState.CANCELLED)
