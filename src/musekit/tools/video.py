"""Video generator: a long-running job driven by ``VideoJobPoller``."""

from ..config import VIDEO_POLL_INTERVAL_SECONDS, VIDEO_PROGRESS_INTERVAL_SECONDS, VIDEO_PROGRESS_MESSAGES
from ..errors import InputValidationError
from ..jobs import JobState, VideoJobPoller, VideoResult
from ..jobs.poller import StateCallback
from ..llm import GenerativeProvider
from .base import CreativeToolBase, ToolForm


def progress_message(elapsed: float, interval: float = VIDEO_PROGRESS_INTERVAL_SECONDS) -> str:
    """Rotating status line shown while a video job is running."""
    index = int(max(elapsed, 0.0) // interval) % len(VIDEO_PROGRESS_MESSAGES)
    return VIDEO_PROGRESS_MESSAGES[index]


class VideoForm(ToolForm):
    prompt: str = ""


class VideoGenerator(CreativeToolBase[VideoForm, VideoResult | None]):
    """Submits a video job and waits for the downloaded result.

    ``execute`` returns None when ``cancel()`` abandoned the job.
    """

    name = "Video Generator"
    form_model = VideoForm

    def __init__(
        self,
        interval: float = VIDEO_POLL_INTERVAL_SECONDS,
        on_state_change: StateCallback | None = None,
    ):
        self._interval = interval
        self._on_state_change = on_state_change
        self._poller: VideoJobPoller | None = None

    @property
    def state(self) -> JobState:
        return self._poller.state if self._poller else JobState.IDLE

    def validate(self, form: VideoForm) -> None:
        if not form.prompt:
            raise InputValidationError("Please enter a prompt for your video.")

    def failure_message_for(self, form: VideoForm) -> str:
        if self._poller is not None and self._poller.polls > 0:
            return "Failed to poll video operation from Gemini API."
        return "Failed to start video generation with Gemini API."

    async def execute(self, provider: GenerativeProvider, form: VideoForm) -> VideoResult | None:
        self._poller = VideoJobPoller(provider, interval=self._interval, on_state_change=self._on_state_change)
        return await self._poller.run(form.prompt)

    def cancel(self) -> None:
        """Abandon the running job, if any."""
        if self._poller is not None:
            self._poller.cancel()
