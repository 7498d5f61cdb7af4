"""
Video likes API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, Optional

from ..config import Settings
from ..db import get_db
from ..services.video_likes_service import VideoLikesService
from ..services.rate_limiter import general_rate_limit
from ..dependencies import AuthContext, get_app_settings, get_current_active_user, get_optional_user

router = APIRouter(prefix="/videos", tags=["video_likes"])

@router.post("/{video_id}/like", dependencies=[Depends(general_rate_limit)])
async def toggle_like(
    video_id: str,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Like a video, or unlike it if the caller already liked it."""
    service = VideoLikesService(db, settings)
    result = await service.toggle_like(current_user.user_id, video_id)
    return {"success": True, **result}

@router.get("/{video_id}/likes")
async def get_like_status(
    video_id: str,
    current_user: Optional[AuthContext] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Like count, and whether the caller (if any) liked the video."""
    service = VideoLikesService(db, settings)
    user_id = current_user.user_id if current_user else None
    result = await service.get_like_status(video_id, user_id)
    return {"success": True, **result}
