"""
Video likes service.
"""
import logging
import uuid
from typing import Dict, Any, Optional

from sqlalchemy import select, update, delete, case, and_
from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError
from ..models import Video, VideoLike
from .base_service import BaseService
from .logging_service import get_engagement_logger

logger = get_engagement_logger()


class VideoLikesService(BaseService):
    """Service for toggling likes and keeping ``Video.likes_count`` in step."""

    async def toggle_like(self, user_id: uuid.UUID, video_id: str) -> Dict[str, Any]:
        """
        Like a video, or remove the like if the user already liked it.

        The like row and the counter move in the same transaction. A
        concurrent duplicate like trips the (user, video) unique constraint;
        that rolls back without touching the counter and surfaces as a
        conflict.
        """
        video = await self.resolve_video(video_id)
        public_id = video.video_id

        existing_like = await self._get_existing_like(user_id, public_id)

        if existing_like is not None:
            removed = await self.db.execute(
                delete(VideoLike).where(VideoLike.id == existing_like.id)
            )
            if removed.rowcount:
                likes_count = await self._apply_delta(video.id, -1)
            else:
                likes_count = await self._read_count(video.id)
            liked = False
        else:
            self.db.add(VideoLike(user_id=user_id, video_id=public_id))
            try:
                await self.db.flush()
            except IntegrityError:
                await self.db.rollback()
                logger.warning(
                    "Duplicate like rejected",
                    extra={"video_id": public_id, "event_type": "like_conflict"},
                )
                raise ConflictError(
                    "Like is already being recorded for this video",
                    {"video_id": public_id},
                )
            likes_count = await self._apply_delta(video.id, 1)
            liked = True

        await self.db.commit()

        logger.log_engagement_event(
            logging.INFO,
            "like_toggled",
            video_id=public_id,
            message=f"Like {'added' if liked else 'removed'} on {public_id}",
            liked=liked,
            likes_count=likes_count,
        )

        return {"liked": liked, "likesCount": likes_count}

    async def get_like_status(self, video_id: str, user_id: Optional[uuid.UUID] = None) -> Dict[str, Any]:
        """Counter and, for an authenticated caller, whether they liked the video."""
        video = await self.resolve_video(video_id)

        is_liked = False
        if user_id is not None:
            is_liked = await self._get_existing_like(user_id, video.video_id) is not None

        return {"likesCount": video.likes_count or 0, "isLiked": is_liked}

    async def _get_existing_like(self, user_id: uuid.UUID, video_id: str) -> Optional[VideoLike]:
        result = await self.db.execute(
            select(VideoLike).where(
                and_(VideoLike.user_id == user_id, VideoLike.video_id == video_id)
            )
        )
        return result.scalar_one_or_none()

    async def _apply_delta(self, video_pk: uuid.UUID, delta: int) -> int:
        """Atomically move the counter, never below zero."""
        if delta >= 0:
            new_value = Video.likes_count + delta
        else:
            new_value = case(
                (Video.likes_count + delta > 0, Video.likes_count + delta),
                else_=0,
            )

        result = await self.db.execute(
            update(Video)
            .where(Video.id == video_pk)
            .values(likes_count=new_value)
            .returning(Video.likes_count)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one()

    async def _read_count(self, video_pk: uuid.UUID) -> int:
        result = await self.db.execute(select(Video.likes_count).where(Video.id == video_pk))
        return result.scalar_one()
