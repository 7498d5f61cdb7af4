"""
Playlist API endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from ..config import Settings
from ..db import get_db
from ..errors import ValidationError
from ..schemas import PlaylistCreate, PlaylistUpdate, PlaylistMembership
from ..services.playlist_service import PlaylistService
from ..dependencies import AuthContext, get_app_settings, get_current_active_user

router = APIRouter(prefix="/playlists", tags=["playlists"])

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_playlist(
    playlist_data: PlaylistCreate,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Create an empty playlist."""
    playlist = await PlaylistService(db, settings).create_playlist(current_user.user_id, playlist_data.name)
    return {"success": True, "message": "Playlist created successfully", "data": playlist}

@router.get("")
async def list_playlists(
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """The caller's playlists, newest first."""
    playlists = await PlaylistService(db, settings).list_playlists(current_user.user_id)
    return {"success": True, "count": len(playlists), "data": playlists}

@router.get("/{playlist_id}")
async def get_playlist(
    playlist_id: str,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Single playlist with the details of its videos."""
    playlist = await PlaylistService(db, settings).get_playlist(current_user.user_id, playlist_id)
    return {"success": True, "data": playlist}

@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    playlist_data: PlaylistUpdate,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Rename a playlist and/or change its thumbnail."""
    playlist = await PlaylistService(db, settings).update_playlist(
        current_user.user_id, playlist_id, name=playlist_data.name, thumbnail=playlist_data.thumbnail
    )
    return {"success": True, "message": "Playlist updated successfully", "data": playlist}

@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    await PlaylistService(db, settings).delete_playlist(current_user.user_id, playlist_id)
    return {"success": True, "message": "Playlist deleted successfully"}

@router.post("/{playlist_id}/add")
async def add_video(
    playlist_id: str,
    membership: PlaylistMembership,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Add a video to a playlist."""
    service = PlaylistService(db, settings)
    change = await service.add_video(current_user.user_id, playlist_id, membership.video_id)
    if not change.changed:
        raise ValidationError("Video already in playlist", {"reason": change.reason})

    playlist = await service.get_playlist(current_user.user_id, playlist_id)
    return {"success": True, "message": "Video added to playlist", "data": playlist}

@router.post("/{playlist_id}/remove")
async def remove_video(
    playlist_id: str,
    membership: PlaylistMembership,
    current_user: AuthContext = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Remove a video from a playlist."""
    service = PlaylistService(db, settings)
    change = await service.remove_video(current_user.user_id, playlist_id, membership.video_id)
    if not change.changed:
        raise ValidationError("Video not in playlist", {"reason": change.reason})

    playlist = await service.get_playlist(current_user.user_id, playlist_id)
    return {"success": True, "message": "Video removed from playlist", "data": playlist}
