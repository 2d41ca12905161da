"""Long-running job support: a cancellable periodic task and the video poller."""

from .periodic import PeriodicTask
from .poller import JobState, VideoJobPoller, VideoResult

__all__ = [
    "PeriodicTask",
    "JobState",
    "VideoJobPoller",
    "VideoResult",
]
