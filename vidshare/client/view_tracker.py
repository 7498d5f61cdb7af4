"""
Client-side rule for when a playback session counts as a view.
"""
import logging
from typing import Any, Awaitable, Callable, Union

import httpx

from vidshare.client.api_client import ApiError
from vidshare.shared_lib.duration import parse_duration_seconds

logger = logging.getLogger("vidshare.client.views")

SHORT_VIDEO_SECONDS = 15
SHORT_VIDEO_THRESHOLD = 3.0
MAX_THRESHOLD = 10.0
THRESHOLD_FRACTION = 0.2


def view_threshold_seconds(duration_seconds: float) -> float:
    """Playback position at which a session counts as a view."""
    if duration_seconds < SHORT_VIDEO_SECONDS:
        return SHORT_VIDEO_THRESHOLD
    return min(MAX_THRESHOLD, THRESHOLD_FRACTION * duration_seconds)


class PlaybackViewTracker:
    """
    One tracker per player mount.

    The playback position reported by ``on_progress`` is compared against
    the threshold, so pausing and resuming keeps counting toward the same
    goal. Ticks that arrive while paused, such as a seek, are ignored.
    The view is recorded at most once per tracker.
    """

    def __init__(self, duration: Union[str, int, float], record_view: Callable[[], Awaitable[Any]]):
        if isinstance(duration, str):
            self.duration_seconds = parse_duration_seconds(duration)
        else:
            self.duration_seconds = max(0, duration or 0)
        self.threshold = view_threshold_seconds(self.duration_seconds)
        self._record_view = record_view

        self.playing = False
        self.view_recorded = False

    def on_play(self) -> None:
        self.playing = True

    def on_pause(self) -> None:
        self.playing = False

    async def on_progress(self, position: float) -> bool:
        """
        Handle a progress tick; returns True on the tick that records the view.

        The guard is set before the call is awaited, so ticks that overlap an
        in-flight record never fire a second one.
        """
        if not self.playing or self.view_recorded:
            return False
        if position < self.threshold:
            return False

        self.view_recorded = True
        try:
            await self._record_view()
        except (ApiError, httpx.HTTPError) as e:
            # A lost view is not worth interrupting playback for.
            logger.warning(f"Recording view failed: {e}")
        return True
