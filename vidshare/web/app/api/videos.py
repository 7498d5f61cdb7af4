"""
Video catalogue and view counting API endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from ..config import Settings
from ..db import get_db
from ..schemas import VideoCreate, VideoUpdate
from ..services.video_service import VideoService
from ..services.view_counter_service import ViewCounterService
from ..services.rate_limiter import general_rate_limit
from ..dependencies import AuthContext, get_app_settings, get_current_active_user

router = APIRouter(prefix="/videos", tags=["videos"])

@router.get("")
async def list_videos(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """All videos, newest first."""
    videos = await VideoService(db, settings).list_videos()
    return {"success": True, "count": len(videos), "data": videos}

@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(general_rate_limit)])
async def create_video(
    video_data: VideoCreate,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Create a video owned by the caller."""
    service = VideoService(db, settings)
    video = await service.create_video(current_user.user_id, video_data.model_dump(exclude_unset=True))
    return {"success": True, "message": "Video created successfully", "data": video}

@router.get("/{video_id}")
async def get_video(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Single video by its public id."""
    video = await VideoService(db, settings).get_video(video_id)
    return {"success": True, "data": video}

@router.put("/{video_id}", dependencies=[Depends(general_rate_limit)])
async def update_video(
    video_id: str,
    video_data: VideoUpdate,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Edit a video (owner or admin)."""
    service = VideoService(db, settings)
    video = await service.update_video(current_user, video_id, video_data.model_dump(exclude_unset=True))
    return {"success": True, "message": "Video updated successfully", "data": video}

@router.delete("/{video_id}", dependencies=[Depends(general_rate_limit)])
async def delete_video(
    video_id: str,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Delete a video with its likes and comments (owner or admin)."""
    service = VideoService(db, settings)
    video = await service.delete_video(current_user, video_id)
    return {"success": True, "message": "Video deleted successfully", "data": video}

@router.patch("/{video_id}/view")
async def record_view(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Count one playback view."""
    result = await ViewCounterService(db, settings).increment_view(video_id)
    return {"success": True, **result}
