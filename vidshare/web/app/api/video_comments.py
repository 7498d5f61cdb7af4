"""
Video comments API endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, Optional

from ..config import Settings
from ..db import get_db
from ..schemas import CommentCreate
from ..services.video_comments_service import VideoCommentsService
from ..services.rate_limiter import comments_rate_limit
from ..dependencies import AuthContext, get_app_settings, get_current_active_user

router = APIRouter(tags=["video_comments"])

@router.get("/videos/{video_id}/comments")
async def list_comments(
    video_id: str,
    cursor: Optional[str] = Query(None, description="ISO-8601 timestamp; only older comments are returned"),
    limit: Optional[int] = Query(None, description="Comments per page"),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Newest-first comments for a video, paginated by cursor."""
    service = VideoCommentsService(db, settings)
    page = await service.list_comments(video_id, cursor=cursor, limit=limit)
    return {
        "success": True,
        "count": len(page["items"]),
        "data": page["items"],
        "nextCursor": page["nextCursor"],
        "hasMore": page["hasMore"],
    }

@router.post(
    "/videos/{video_id}/comments",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(comments_rate_limit)],
)
async def add_comment(
    video_id: str,
    comment_data: CommentCreate,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Add a comment to a video."""
    service = VideoCommentsService(db, settings)
    comment = await service.add_comment(current_user.user_id, video_id, comment_data.text)
    return {"success": True, "message": "Comment added successfully", "data": comment}

@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: str,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Delete a comment (only by the comment author)."""
    service = VideoCommentsService(db, settings)
    await service.delete_comment(current_user.user_id, comment_id)
    return {"success": True, "message": "Comment deleted successfully"}
