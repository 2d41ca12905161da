"""Unit tests for the periodic task and the video job poller."""
import asyncio

import pytest

from musekit.errors import InputValidationError, JobFailedError, JobNoResultError, ServiceError
from musekit.jobs import JobState, PeriodicTask, VideoJobPoller
from musekit.llm import VideoJob

INTERVAL = 0.01


def _done(uri: str | None = "https://example.test/video.mp4", error: str | None = None) -> VideoJob:
    return VideoJob(name="operations/video-1", done=True, video_uri=uri, error=error)


def _pending() -> VideoJob:
    return VideoJob(name="operations/video-1")


class TestPeriodicTask:
    """Tests for PeriodicTask scheduling."""

    @pytest.mark.asyncio
    async def test_runs_until_tick_reports_done(self):
        """Test that ticks repeat until one returns True."""
        results = iter([False, False, True])

        async def tick():
            return next(results)

        task = PeriodicTask(tick, INTERVAL)
        task.start()
        assert await task.wait() is True
        assert task.ticks == 3
        assert not task.running

    @pytest.mark.asyncio
    async def test_first_tick_waits_one_interval(self):
        """Test that nothing runs immediately after start()."""
        ticks = []

        async def tick():
            ticks.append(1)
            return True

        task = PeriodicTask(tick, 0.05)
        task.start()
        await asyncio.sleep(0)
        assert ticks == []
        await task.wait()
        assert ticks == [1]

    @pytest.mark.asyncio
    async def test_cancel_stops_further_ticks(self):
        """Test that no tick fires after cancel()."""
        ticks = []

        async def tick():
            ticks.append(1)
            return False

        task = PeriodicTask(tick, INTERVAL)
        task.start()
        await asyncio.sleep(INTERVAL * 3.5)
        task.cancel()
        assert await task.wait() is False

        count = len(ticks)
        await asyncio.sleep(INTERVAL * 5)
        assert len(ticks) == count
        assert task.cancelled

    @pytest.mark.asyncio
    async def test_tick_error_propagates(self):
        """Test that a failing tick ends the schedule with its error."""
        async def tick():
            raise ServiceError("poll failed")

        task = PeriodicTask(tick, INTERVAL)
        task.start()
        with pytest.raises(ServiceError):
            await task.wait()

    def test_negative_interval_rejected(self):
        """Test that the interval must not be negative."""
        async def tick():
            return True

        with pytest.raises(ValueError):
            PeriodicTask(tick, -1)

    @pytest.mark.asyncio
    async def test_start_twice_fails(self):
        """Test that a task is started at most once."""
        async def tick():
            return True

        task = PeriodicTask(tick, INTERVAL)
        task.start()
        with pytest.raises(RuntimeError):
            task.start()
        await task.wait()


class TestVideoJobPoller:
    """Tests for VideoJobPoller state transitions."""

    @pytest.mark.asyncio
    async def test_polls_until_done_and_downloads_once(self, provider):
        """Test the happy path: pending, pending, done, one download."""
        provider.poll_results = [_pending(), _pending(), _done()]
        states = []
        poller = VideoJobPoller(provider, interval=INTERVAL, on_state_change=states.append)

        result = await poller.run("a cat surfing")

        assert result is not None
        assert result.data == provider.video_bytes
        assert result.uri == "https://example.test/video.mp4"
        assert len(provider.calls_to("poll_video_job")) == 3
        assert len(provider.calls_to("fetch_video")) == 1
        assert states == [JobState.SUBMITTED, JobState.PENDING, JobState.DONE]
        assert poller.state is JobState.DONE
        assert poller.job is None

    @pytest.mark.asyncio
    async def test_no_polls_after_terminal_state(self, provider):
        """Test that polling stops once the job is done."""
        provider.poll_results = [_done()]
        poller = VideoJobPoller(provider, interval=INTERVAL)

        await poller.run("waves")
        await asyncio.sleep(INTERVAL * 5)

        assert len(provider.calls_to("poll_video_job")) == 1

    @pytest.mark.asyncio
    async def test_done_without_uri_is_distinct_failure(self, provider):
        """Test that a finished job without a result raises JobNoResultError."""
        provider.poll_results = [_done(uri=None)]
        poller = VideoJobPoller(provider, interval=INTERVAL)

        with pytest.raises(JobNoResultError, match="no video URL was found"):
            await poller.run("empty")

        assert poller.state is JobState.FAILED
        assert provider.calls_to("fetch_video") == []

    @pytest.mark.asyncio
    async def test_service_reported_error(self, provider):
        """Test that an operation error ends the job as failed."""
        provider.poll_results = [_done(uri=None, error="quota exceeded")]
        poller = VideoJobPoller(provider, interval=INTERVAL)

        with pytest.raises(JobFailedError, match="quota exceeded") as exc_info:
            await poller.run("blocked")

        assert not isinstance(exc_info.value, JobNoResultError)
        assert poller.state is JobState.FAILED

    @pytest.mark.asyncio
    async def test_poll_failure_stops_polling(self, provider):
        """Test that a status check error fails the job and stops the schedule."""
        provider.poll_results = [_pending(), ServiceError("Failed to poll video operation with Gemini API.")]
        poller = VideoJobPoller(provider, interval=INTERVAL)

        with pytest.raises(ServiceError):
            await poller.run("storm")
        await asyncio.sleep(INTERVAL * 5)

        assert poller.state is JobState.FAILED
        assert len(provider.calls_to("poll_video_job")) == 2

    @pytest.mark.asyncio
    async def test_submission_failure(self, provider):
        """Test that a failed submission never polls."""
        provider.failures["submit_video_job"] = ServiceError("Failed to start video generation with Gemini API.")
        poller = VideoJobPoller(provider, interval=INTERVAL)

        with pytest.raises(ServiceError):
            await poller.run("anything")

        assert poller.state is JobState.FAILED
        assert provider.calls_to("poll_video_job") == []

    @pytest.mark.asyncio
    async def test_unexpected_poll_error_fails_job(self, provider):
        """Test that any status check error leaves the poller free for a new run."""
        provider.poll_results = [ValueError("unreadable status")]
        poller = VideoJobPoller(provider, interval=INTERVAL)

        with pytest.raises(ValueError):
            await poller.run("storm")
        assert poller.state is JobState.FAILED

        provider.poll_results = [_done()]
        result = await poller.run("calm")
        assert result is not None
        assert poller.state is JobState.DONE

    @pytest.mark.asyncio
    async def test_cancel_during_submission(self, provider):
        """Test that a cancel issued while submitting stops before any status check."""
        states = []
        poller = VideoJobPoller(provider, interval=INTERVAL, on_state_change=states.append)

        async def submit_then_cancel(prompt):
            poller.cancel()
            return VideoJob(name="operations/video-1")

        provider.submit_video_job = submit_then_cancel

        assert await poller.run("a sunrise") is None
        await asyncio.sleep(INTERVAL * 3)

        assert states == [JobState.SUBMITTED, JobState.CANCELLED]
        assert provider.calls_to("poll_video_job") == []
        assert provider.calls_to("fetch_video") == []

    @pytest.mark.asyncio
    async def test_already_done_on_submit(self, provider):
        """Test that a job finished at submission is downloaded without polling."""
        provider.submitted_job = _done()
        poller = VideoJobPoller(provider, interval=INTERVAL)

        result = await poller.run("instant")

        assert result is not None
        assert provider.calls_to("poll_video_job") == []

    @pytest.mark.asyncio
    async def test_cancel_stops_polling(self, provider):
        """Test that cancelling leaves no timer running and returns None."""
        poller = VideoJobPoller(provider, interval=INTERVAL)
        run = asyncio.create_task(poller.run("forever"))

        await asyncio.sleep(INTERVAL * 3.5)
        poller.cancel()
        assert await run is None

        count = len(provider.calls_to("poll_video_job"))
        await asyncio.sleep(INTERVAL * 5)
        assert len(provider.calls_to("poll_video_job")) == count
        assert poller.state is JobState.CANCELLED
        assert provider.calls_to("fetch_video") == []

    @pytest.mark.asyncio
    async def test_blank_prompt_rejected(self, provider):
        """Test that a blank prompt never submits a job."""
        poller = VideoJobPoller(provider, interval=INTERVAL)
        with pytest.raises(InputValidationError):
            await poller.run("  ")
        assert provider.calls == []
