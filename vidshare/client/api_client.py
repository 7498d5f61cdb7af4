"""
Async HTTP client for the vidshare API.

Transient failures (429, 5xx and transport errors) are retried with
exponential backoff: 1s, 2s, 4s. Any other error response fails at once.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

logger = logging.getLogger("vidshare.client")

MAX_RETRIES = 3
BACKOFF_BASE_SECONDS = 1.0


class ApiError(Exception):
    """An API call that failed for good."""

    def __init__(self, status_code: Optional[int], kind: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind
        self.message = message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or f"Request failed with status {response.status_code}"
        return cls(response.status_code, body.get("error", "error"), message)


def _is_retryable(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code < 600


class VidshareClient:
    """Thin wrapper over the REST surface; returns the decoded JSON bodies."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        max_retries: int = MAX_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        timeout: float = 10.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            transport=transport,
            timeout=timeout,
        )
        self.max_retries = max_retries
        self._sleep = sleep

    async def __aenter__(self) -> "VidshareClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self._client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._client.headers.pop("Authorization", None)

    async def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a request, retrying transient failures, and return the JSON body."""
        for attempt in range(self.max_retries + 1):
            backoff = BACKOFF_BASE_SECONDS * (2 ** attempt)
            last_attempt = attempt >= self.max_retries

            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.TransportError as e:
                if last_attempt:
                    raise ApiError(None, "network_error", f"Network error: {e}") from e
                logger.warning(f"Network error on {method} {path}, retrying in {backoff}s")
                await self._sleep(backoff)
                continue

            if response.is_success:
                return self._decode(response)

            if _is_retryable(response.status_code) and not last_attempt:
                logger.warning(f"{method} {path} returned {response.status_code}, retrying in {backoff}s")
                await self._sleep(backoff)
                continue

            if response.status_code == 429:
                raise ApiError(429, "rate_limited", "Too many requests. Please try again in a few moments.")
            raise ApiError.from_response(response)

        raise ApiError(None, "error", "Request failed after multiple retries")

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, "invalid_response", "Server returned a non-JSON response")
        if not isinstance(body, dict):
            raise ApiError(response.status_code, "invalid_response", "Server returned an unexpected response")
        return body

    # Videos
    async def list_videos(self) -> Dict[str, Any]:
        return await self.request("GET", "/videos")

    async def get_video(self, video_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/videos/{video_id}")

    async def create_video(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", "/videos", json=data)

    async def update_video(self, video_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("PUT", f"/videos/{video_id}", json=data)

    async def delete_video(self, video_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/videos/{video_id}")

    async def record_view(self, video_id: str) -> Optional[str]:
        """Count a view; a failure is logged and otherwise ignored."""
        try:
            body = await self.request("PATCH", f"/videos/{video_id}/view")
        except ApiError as e:
            logger.warning(f"View for {video_id} not recorded: {e.message}")
            return None
        return body.get("views")

    # Likes
    async def toggle_like(self, video_id: str) -> Dict[str, Any]:
        return await self.request("POST", f"/videos/{video_id}/like")

    async def get_like_status(self, video_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/videos/{video_id}/likes")

    # Comments
    async def list_comments(self, video_id: str, cursor: Optional[str] = None,
                            limit: Optional[int] = None) -> Dict[str, Any]:
        params = {}
        if cursor:
            params["cursor"] = cursor
        if limit is not None:
            params["limit"] = limit
        return await self.request("GET", f"/videos/{video_id}/comments", params=params)

    async def add_comment(self, video_id: str, text: str) -> Dict[str, Any]:
        return await self.request("POST", f"/videos/{video_id}/comments", json={"text": text})

    async def delete_comment(self, comment_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/comments/{comment_id}")

    # Search
    async def search(self, q: Optional[str] = None, category: Optional[str] = None,
                     year: Optional[str] = None, sort: str = "createdAt",
                     page: int = 1, limit: int = 20) -> Dict[str, Any]:
        params = {"sort": sort, "page": page, "limit": limit}
        for key, value in (("q", q), ("category", category), ("year", year)):
            if value:
                params[key] = value
        return await self.request("GET", "/videos/search", params=params)

    async def get_filter_options(self) -> Dict[str, Any]:
        return await self.request("GET", "/videos/search/filters")

    # Playlists
    async def list_playlists(self) -> Dict[str, Any]:
        return await self.request("GET", "/playlists")

    async def get_playlist(self, playlist_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/playlists/{playlist_id}")

    async def create_playlist(self, name: str) -> Dict[str, Any]:
        return await self.request("POST", "/playlists", json={"name": name})

    async def update_playlist(self, playlist_id: str, name: Optional[str] = None,
                              thumbnail: Optional[str] = None) -> Dict[str, Any]:
        body = {}
        if name is not None:
            body["name"] = name
        if thumbnail is not None:
            body["thumbnail"] = thumbnail
        return await self.request("PATCH", f"/playlists/{playlist_id}", json=body)

    async def delete_playlist(self, playlist_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/playlists/{playlist_id}")

    async def add_to_playlist(self, playlist_id: str, video_id: str) -> Dict[str, Any]:
        return await self.request("POST", f"/playlists/{playlist_id}/add", json={"videoId": video_id})

    async def remove_from_playlist(self, playlist_id: str, video_id: str) -> Dict[str, Any]:
        return await self.request("POST", f"/playlists/{playlist_id}/remove", json={"videoId": video_id})

    # Stats
    async def get_stats(self) -> Dict[str, Any]:
        return await self.request("GET", "/stats")
