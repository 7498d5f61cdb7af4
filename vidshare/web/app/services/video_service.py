"""
Video catalogue service.
"""
import logging
import time
import uuid
from typing import Dict, Any, List, Optional

from sqlalchemy import select, delete, func, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError, ForbiddenError, ValidationError
from ..models import ContentRating, Video, VideoComment, VideoLike
from .base_service import BaseService
from .logging_service import get_engagement_logger
from vidshare.shared_lib.view_count import format_view_count, parse_view_count

logger = get_engagement_logger()

_EDITABLE_FIELDS = (
    "title", "description", "thumbnail", "url", "duration",
    "category", "year", "rating", "upload_date", "views",
)


def serialize_video(video: Video) -> Dict[str, Any]:
    """Public representation of a video; ``views`` is derived from the integer count."""
    view_count = video.view_count or 0
    rating = video.rating.value if isinstance(video.rating, ContentRating) else video.rating
    return {
        "id": video.video_id,
        "title": video.title,
        "description": video.description,
        "thumbnail": video.thumbnail,
        "url": video.url,
        "duration": video.duration,
        "views": format_view_count(view_count),
        "viewsNumeric": view_count,
        "category": video.category,
        "year": video.year,
        "rating": rating,
        "uploadDate": video.upload_date,
        "owner": str(video.owner_id) if video.owner_id else None,
        "likesCount": video.likes_count or 0,
        "createdAt": video.created_at.isoformat() + "Z" if video.created_at else None,
        "updatedAt": video.updated_at.isoformat() + "Z" if video.updated_at else None,
    }


class VideoService(BaseService):
    """CRUD over the video catalogue plus the owner-side statistics."""

    async def list_videos(self) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(Video)
            .order_by(desc(Video.created_at), desc(Video.id))
            .execution_options(populate_existing=True)
        )
        return [serialize_video(video) for video in result.scalars().all()]

    async def get_video(self, video_id: str) -> Dict[str, Any]:
        video = await self.resolve_video(video_id)
        return serialize_video(video)

    async def create_video(self, owner_id: Optional[uuid.UUID], data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a video owned by ``owner_id``.

        ``data`` uses the snake_case field names; ``video_url`` is accepted as
        an alias of ``url`` and ``views`` may be a formatted string.
        """
        data = dict(data)
        if not data.get("url") and data.get("video_url"):
            data["url"] = data["video_url"]
        data.pop("video_url", None)

        if not (data.get("title") or "").strip() or not data.get("url"):
            raise ValidationError("Missing required fields: title and url are required")

        public_id = (data.pop("id", None) or "").strip()
        if public_id:
            if await self._video_id_taken(public_id):
                raise ConflictError(f"Video with ID '{public_id}' already exists", {"video_id": public_id})
        else:
            public_id = f"user-{int(time.time() * 1000)}"

        video = Video(video_id=public_id, owner_id=owner_id)
        self._apply_fields(video, data)
        self.db.add(video)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Video with ID '{public_id}' already exists", {"video_id": public_id})

        await self.db.refresh(video)
        logger.info(f"Video created: {public_id}", extra={"video_id": public_id, "event_type": "video_created"})
        return serialize_video(video)

    async def update_video(self, caller, video_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply an owner or admin edit; the public id cannot change."""
        video = await self.resolve_video(video_id)
        self._authorize(caller, video)

        data = dict(data)
        data.pop("id", None)
        if data.get("video_url") and not data.get("url"):
            data["url"] = data["video_url"]
        data.pop("video_url", None)

        if "title" in data and not (data["title"] or "").strip():
            raise ValidationError("Title cannot be empty")
        if "url" in data and not data["url"]:
            raise ValidationError("URL cannot be empty")

        self._apply_fields(video, data)
        await self.db.commit()
        await self.db.refresh(video)
        return serialize_video(video)

    async def delete_video(self, caller, video_id: str) -> Dict[str, Any]:
        """
        Delete a video, then its likes, then its comments.

        Each step commits on its own. When a later step fails the video stays
        deleted and the failure is logged as ``cascade_failed`` for an
        operator to clean up.
        """
        video = await self.resolve_video(video_id)
        self._authorize(caller, video)

        snapshot = serialize_video(video)
        public_id = video.video_id

        await self.db.delete(video)
        await self.db.commit()

        for step, model in (("likes", VideoLike), ("comments", VideoComment)):
            try:
                await self.db.execute(delete(model).where(model.video_id == public_id))
                await self.db.commit()
            except SQLAlchemyError as exc:
                await self.db.rollback()
                logger.log_engagement_event(
                    logging.ERROR,
                    "cascade_failed",
                    video_id=public_id,
                    message=f"Failed to delete {step} of deleted video {public_id}",
                    step=step,
                    error=str(exc),
                )
                break

        logger.log_engagement_event(
            logging.INFO,
            "video_deleted",
            video_id=public_id,
            message=f"Video {public_id} deleted",
        )
        return snapshot

    async def get_user_stats(self, user_id: uuid.UUID) -> Dict[str, int]:
        """Totals over the caller's own uploads."""
        result = await self.db.execute(
            select(
                func.count(Video.id),
                func.coalesce(func.sum(Video.view_count), 0),
                func.coalesce(func.sum(Video.likes_count), 0),
            ).where(Video.owner_id == user_id)
        )
        total_uploads, total_views, total_likes = result.one()

        owned_ids = select(Video.video_id).where(Video.owner_id == user_id)
        comments_result = await self.db.execute(
            select(func.count(VideoComment.id)).where(VideoComment.video_id.in_(owned_ids))
        )
        total_comments = comments_result.scalar() or 0

        return {
            "totalUploads": int(total_uploads or 0),
            "totalViews": int(total_views or 0),
            "totalLikes": int(total_likes or 0),
            "totalComments": int(total_comments),
        }

    async def _video_id_taken(self, public_id: str) -> bool:
        result = await self.db.execute(select(Video.id).where(Video.video_id == public_id))
        return result.first() is not None

    @staticmethod
    def _authorize(caller, video: Video) -> None:
        if caller.is_admin:
            return
        if video.owner_id is None:
            raise ForbiddenError("Only administrators can modify videos without an owner")
        if video.owner_id != caller.user_id:
            raise ForbiddenError("You do not have permission to modify this video")

    @staticmethod
    def _apply_fields(video: Video, data: Dict[str, Any]) -> None:
        """Validate every supplied field first so a rejected edit leaves the row untouched."""
        changes = {}
        for field in _EDITABLE_FIELDS:
            if field not in data or data[field] is None:
                continue
            value = data[field]

            if field == "views":
                try:
                    changes["view_count"] = parse_view_count(value)
                except ValueError:
                    raise ValidationError(f"Invalid view count: {value!r}", {"views": value})
            elif field == "rating":
                try:
                    changes["rating"] = ContentRating(value)
                except ValueError:
                    allowed = ", ".join(r.value for r in ContentRating)
                    raise ValidationError(f"Rating must be one of: {allowed}", {"rating": value})
            elif field == "title":
                changes["title"] = value.strip()
            else:
                changes[field] = value

        for attribute, value in changes.items():
            setattr(video, attribute, value)
