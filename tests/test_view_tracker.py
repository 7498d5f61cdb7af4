"""
Tests for the playback view threshold.
"""
import httpx
import pytest

from vidshare.client.api_client import ApiError, VidshareClient
from vidshare.client.view_tracker import PlaybackViewTracker, view_threshold_seconds


class FakeRecorder:
    def __init__(self, error: Exception = None):
        self.calls = 0
        self.error = error

    async def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return "1"


@pytest.mark.parametrize("duration, expected", [
    (5, 3.0),
    (14.9, 3.0),
    (15, 3.0),
    (30, 6.0),
    (50, 10.0),
    (3600, 10.0),
])
def test_view_threshold(duration, expected):
    assert view_threshold_seconds(duration) == pytest.approx(expected)


class TestPlaybackViewTracker:

    async def test_records_once_past_threshold(self):
        recorder = FakeRecorder()
        tracker = PlaybackViewTracker("1:00", recorder)
        tracker.on_play()

        assert await tracker.on_progress(5.0) is False
        assert await tracker.on_progress(10.0) is True
        assert await tracker.on_progress(30.0) is False
        assert recorder.calls == 1

    async def test_requires_playback_to_start(self):
        recorder = FakeRecorder()
        tracker = PlaybackViewTracker(60, recorder)

        assert await tracker.on_progress(20.0) is False
        assert recorder.calls == 0

    async def test_pause_and_resume_keep_position(self):
        recorder = FakeRecorder()
        tracker = PlaybackViewTracker(30, recorder)
        tracker.on_play()
        await tracker.on_progress(4.0)
        tracker.on_pause()
        tracker.on_play()

        assert await tracker.on_progress(6.0) is True
        assert recorder.calls == 1

    async def test_failed_record_is_not_retried(self):
        recorder = FakeRecorder(ApiError(500, "internal_error", "boom"))
        tracker = PlaybackViewTracker(10, recorder)
        tracker.on_play()

        assert await tracker.on_progress(3.5) is True
        assert await tracker.on_progress(8.0) is False
        assert recorder.calls == 1

    async def test_progress_while_paused_is_ignored(self):
        recorder = FakeRecorder()
        tracker = PlaybackViewTracker(30, recorder)
        tracker.on_play()
        tracker.on_pause()

        assert await tracker.on_progress(20.0) is False
        assert recorder.calls == 0

        tracker.on_play()
        assert await tracker.on_progress(20.0) is True
        assert recorder.calls == 1

    async def test_non_json_success_does_not_break_playback(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>ok</html>", headers={"Content-Type": "text/html"})
        )
        async with VidshareClient("http://api.test/api", transport=transport) as client:
            tracker = PlaybackViewTracker(60, lambda: client.record_view("v1"))
            tracker.on_play()

            assert await tracker.on_progress(20.0) is True
            assert tracker.view_recorded is True
