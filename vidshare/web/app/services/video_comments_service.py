"""
Video comments service.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from sqlalchemy import select, and_, desc
from sqlalchemy.orm import selectinload

from ..errors import NotFoundError, ValidationError, ForbiddenError
from ..models import VideoComment
from .base_service import BaseService
from .logging_service import get_engagement_logger
from vidshare.shared_lib.sanitize import validate_comment_text

logger = get_engagement_logger()


def parse_cursor(cursor: Optional[str]) -> Optional[datetime]:
    """Decode an ISO-8601 cursor into the naive UTC form timestamps are stored in."""
    if cursor is None or not str(cursor).strip():
        return None

    raw = str(cursor).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Invalid cursor", {"cursor": cursor})

    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_timestamp(value: datetime) -> str:
    return value.isoformat() + "Z"


class VideoCommentsService(BaseService):
    """Service for the per-video comment feed."""

    async def list_comments(
        self,
        video_id: str,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Newest-first page of a video's comments.

        Keyset pagination on ``created_at``: only comments strictly older than
        the cursor are eligible, and one extra row is fetched to tell whether
        another page exists.
        Ties are ordered by id within a page, but comments sharing the
        timestamp of the last item on a page are not returned by the next
        page, since the cursor carries no id.
        """
        if limit is None:
            limit = self.settings.COMMENT_PAGE_DEFAULT
        limit = max(1, min(int(limit), self.settings.COMMENT_PAGE_MAX))
        before = parse_cursor(cursor)

        video = await self.resolve_video(video_id)

        conditions = [VideoComment.video_id == video.video_id]
        if before is not None:
            conditions.append(VideoComment.created_at < before)

        result = await self.db.execute(
            select(VideoComment)
            .where(and_(*conditions))
            .options(selectinload(VideoComment.user))
            .order_by(desc(VideoComment.created_at), desc(VideoComment.id))
            .limit(limit + 1)
        )
        comments = list(result.scalars().all())

        has_more = len(comments) > limit
        page = comments[:limit]
        next_cursor = format_timestamp(page[-1].created_at) if has_more else None

        return {
            "items": [self.serialize_comment(comment) for comment in page],
            "nextCursor": next_cursor,
            "hasMore": has_more,
        }

    async def add_comment(self, user_id: uuid.UUID, video_id: str, raw_text: Any) -> Dict[str, Any]:
        """Sanitize, validate and store a comment; returns it with the author's identity."""
        valid, outcome = validate_comment_text(raw_text, self.settings.COMMENT_MAX_LENGTH)
        if not valid:
            raise ValidationError(outcome)

        video = await self.resolve_video(video_id)

        comment = VideoComment(video_id=video.video_id, user_id=user_id, text=outcome)
        self.db.add(comment)
        await self.db.commit()

        result = await self.db.execute(
            select(VideoComment)
            .where(VideoComment.id == comment.id)
            .options(selectinload(VideoComment.user))
            .execution_options(populate_existing=True)
        )
        comment = result.scalar_one()

        logger.log_engagement_event(
            logging.INFO,
            "comment_added",
            video_id=video.video_id,
            message=f"Comment added on {video.video_id}",
            comment_id=str(comment.id),
        )
        return self.serialize_comment(comment)

    async def delete_comment(self, user_id: uuid.UUID, comment_id: str) -> None:
        """Delete a comment; only its author may do so."""
        comment = None
        native_id = self._as_native_id(comment_id)
        if native_id is not None:
            comment = await self.db.get(VideoComment, native_id)

        if comment is None:
            raise NotFoundError("Comment not found", {"comment_id": comment_id})

        if comment.user_id != user_id:
            raise ForbiddenError("You can only delete your own comments")

        video_id = comment.video_id
        await self.db.delete(comment)
        await self.db.commit()

        logger.log_engagement_event(
            logging.INFO,
            "comment_deleted",
            video_id=video_id,
            message=f"Comment {comment_id} deleted",
            comment_id=str(comment_id),
        )

    @staticmethod
    def serialize_comment(comment: VideoComment) -> Dict[str, Any]:
        user = comment.user
        return {
            "id": str(comment.id),
            "videoId": comment.video_id,
            "text": comment.text,
            "createdAt": format_timestamp(comment.created_at),
            "user": {
                "id": str(comment.user_id),
                "email": user.email if user is not None else None,
            },
        }
