"""
Video view counting service.
"""
import logging
from typing import Dict

from sqlalchemy import update

from ..models import Video
from .base_service import BaseService
from .logging_service import get_engagement_logger
from vidshare.shared_lib.view_count import format_view_count

logger = get_engagement_logger()


class ViewCounterService(BaseService):
    """Records playback views against a video's view counter."""

    async def increment_view(self, video_id: str) -> Dict[str, str]:
        """
        Count one view and return the new formatted count.

        The increment runs as a single UPDATE keyed by the resolved row's
        primary key, so concurrent viewers never overwrite each other.
        """
        video = await self.resolve_video(video_id)

        result = await self.db.execute(
            update(Video)
            .where(Video.id == video.id)
            .values(view_count=Video.view_count + 1)
            .returning(Video.view_count)
            .execution_options(synchronize_session=False)
        )
        new_count = result.scalar_one()
        await self.db.commit()

        views = format_view_count(new_count)
        logger.log_engagement_event(
            logging.INFO,
            "view_recorded",
            video_id=video.video_id,
            message=f"View recorded for {video.video_id}",
            view_count=new_count,
        )
        return {"views": views}
