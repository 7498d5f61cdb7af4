"""
Uploader statistics API endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from ..config import Settings
from ..db import get_db
from ..services.video_service import VideoService
from ..dependencies import AuthContext, get_app_settings, get_current_active_user

router = APIRouter(prefix="/stats", tags=["stats"])

@router.get("")
async def get_user_stats(
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Upload, view, like and comment totals over the caller's videos."""
    stats = await VideoService(db, settings).get_user_stats(current_user.user_id)
    return {"success": True, "data": stats}
