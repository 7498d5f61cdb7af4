"""
Tests for the async API client.
"""
import httpx
import pytest

from vidshare.client.api_client import ApiError, VidshareClient


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def scripted_transport(*responses):
    """Replays ``responses`` in order; an exception instance is raised instead of answered."""
    queue = list(responses)
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return httpx.MockTransport(handler), seen


class TestVidshareClient:

    async def test_success(self):
        transport, seen = scripted_transport(httpx.Response(200, json={"success": True, "views": "12"}))
        sleep = RecordingSleep()

        async with VidshareClient("http://api.test/api", token="abc", transport=transport, sleep=sleep) as client:
            views = await client.record_view("v1")

        assert views == "12"
        assert seen[0].method == "PATCH"
        assert seen[0].url.path == "/api/videos/v1/view"
        assert seen[0].headers["Authorization"] == "Bearer abc"
        assert sleep.delays == []

    async def test_retries_with_exponential_backoff(self):
        transport, seen = scripted_transport(
            httpx.Response(503, json={"success": False, "error": "unavailable"}),
            httpx.ConnectError("connection refused"),
            httpx.Response(429),
            httpx.Response(200, json={"success": True, "data": []}),
        )
        sleep = RecordingSleep()

        async with VidshareClient("http://api.test/api", transport=transport, sleep=sleep) as client:
            body = await client.list_videos()

        assert body == {"success": True, "data": []}
        assert len(seen) == 4
        assert sleep.delays == [1.0, 2.0, 4.0]

    async def test_gives_up_after_max_retries(self):
        transport, seen = scripted_transport(*[httpx.Response(429) for _ in range(4)])
        sleep = RecordingSleep()

        async with VidshareClient("http://api.test/api", transport=transport, sleep=sleep) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.search(q="cats")

        assert exc_info.value.status_code == 429
        assert exc_info.value.kind == "rate_limited"
        assert len(seen) == 4

    async def test_client_errors_are_not_retried(self):
        transport, seen = scripted_transport(
            httpx.Response(404, json={"success": False, "error": "not_found", "message": "Video not found"}),
        )
        sleep = RecordingSleep()

        async with VidshareClient("http://api.test/api", transport=transport, sleep=sleep) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get_video("missing")

        assert exc_info.value.kind == "not_found"
        assert exc_info.value.message == "Video not found"
        assert len(seen) == 1
        assert sleep.delays == []

    async def test_record_view_failure_is_swallowed(self):
        transport, _ = scripted_transport(httpx.Response(404, json={"success": False, "error": "not_found"}))

        async with VidshareClient("http://api.test/api", transport=transport, sleep=RecordingSleep()) as client:
            assert await client.record_view("missing") is None

    async def test_search_omits_empty_filters(self):
        transport, seen = scripted_transport(httpx.Response(200, json={"success": True, "data": []}))

        async with VidshareClient("http://api.test/api", transport=transport, sleep=RecordingSleep()) as client:
            await client.search(q="piano", category="")

        params = dict(seen[0].url.params)
        assert params == {"sort": "createdAt", "page": "1", "limit": "20", "q": "piano"}

    async def test_non_json_success_is_an_api_error(self):
        transport, _ = scripted_transport(httpx.Response(200, text="<html>ok</html>"))

        async with VidshareClient("http://api.test/api", transport=transport, sleep=RecordingSleep()) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get_video("v1")

        assert exc_info.value.kind == "invalid_response"
        assert exc_info.value.status_code == 200
