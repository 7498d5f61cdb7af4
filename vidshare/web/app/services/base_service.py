"""
Base class for services that work against a request-scoped database session.
"""
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..errors import NotFoundError
from ..models import Video


class BaseService:
    """Holds the session and settings shared by every service."""

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    async def find_video(self, video_id: str) -> Optional[Video]:
        """
        Look up a video by its application-level id.

        Legacy rows may still be addressed by their storage primary key; that
        lookup is only attempted when the id has the primary-key shape and
        ``LEGACY_NATIVE_ID_LOOKUP`` is on.
        """
        result = await self.db.execute(
            select(Video)
            .where(Video.video_id == video_id)
            .execution_options(populate_existing=True)
        )
        video = result.scalar_one_or_none()
        if video is not None or not self.settings.LEGACY_NATIVE_ID_LOOKUP:
            return video

        native_id = self._as_native_id(video_id)
        if native_id is None:
            return None
        return await self.db.get(Video, native_id, populate_existing=True)

    async def resolve_video(self, video_id: str) -> Video:
        """Like ``find_video`` but raises ``NotFoundError`` when missing."""
        video = await self.find_video(video_id)
        if video is None:
            raise NotFoundError(f"Video with ID '{video_id}' not found", {"video_id": video_id})
        return video

    @staticmethod
    def _as_native_id(value: str) -> Optional[uuid.UUID]:
        try:
            return uuid.UUID(str(value))
        except ValueError:
            return None
