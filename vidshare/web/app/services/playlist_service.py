"""
Playlist management service.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Dict, Any

from sqlalchemy import select, func, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ..errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..models import Video, VideoPlaylist, VideoPlaylistItem
from .base_service import BaseService
from .logging_service import get_logger
from .video_service import serialize_video

logger = get_logger("playlists")

NAME_MAX_LENGTH = 100

ALREADY_PRESENT = "already_present"
NOT_PRESENT = "not_present"


@dataclass(frozen=True)
class MembershipChange:
    """Outcome of an add/remove; ``reason`` explains a no-op."""
    changed: bool
    reason: Optional[str] = None


class PlaylistService(BaseService):
    """Service for managing a user's playlists."""

    async def create_playlist(self, owner_id: uuid.UUID, name: Any) -> Dict[str, Any]:
        """Create an empty playlist; names are unique per owner."""
        name = self._clean_name(name)

        playlist = VideoPlaylist(owner_id=owner_id, name=name)
        self.db.add(playlist)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("You already have a playlist with this name", {"name": name})

        logger.info(f"Playlist created: {name}", extra={"playlist_id": str(playlist.id)})
        playlist = await self._load(playlist.id)
        return self.serialize_playlist(playlist)

    async def list_playlists(self, owner_id: uuid.UUID) -> List[Dict[str, Any]]:
        result = await self.db.execute(
            select(VideoPlaylist)
            .where(VideoPlaylist.owner_id == owner_id)
            .options(selectinload(VideoPlaylist.items))
            .order_by(desc(VideoPlaylist.created_at), desc(VideoPlaylist.id))
        )
        return [self.serialize_playlist(p) for p in result.scalars().all()]

    async def get_playlist(self, owner_id: uuid.UUID, playlist_id: str) -> Dict[str, Any]:
        """Playlist plus the details of member videos that still exist, in insertion order."""
        playlist = await self._get_owned(owner_id, playlist_id, "access")

        video_ids = [item.video_id for item in playlist.items]
        by_id = {}
        if video_ids:
            result = await self.db.execute(
                select(Video)
                .where(Video.video_id.in_(video_ids))
                .execution_options(populate_existing=True)
            )
            by_id = {video.video_id: video for video in result.scalars().all()}

        data = self.serialize_playlist(playlist)
        data["videoDetails"] = [serialize_video(by_id[vid]) for vid in video_ids if vid in by_id]
        return data

    async def update_playlist(
        self,
        owner_id: uuid.UUID,
        playlist_id: str,
        name: Optional[str] = None,
        thumbnail: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Rename and/or re-thumbnail; a blank name leaves the name unchanged."""
        playlist = await self._get_owned(owner_id, playlist_id, "modify")

        if name is not None and str(name).strip():
            playlist.name = self._clean_name(name)
        if thumbnail is not None:
            playlist.thumbnail = thumbnail
        playlist.updated_at = datetime.utcnow()

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("You already have a playlist with this name", {"name": name})

        playlist = await self._load(playlist.id)
        return self.serialize_playlist(playlist)

    async def delete_playlist(self, owner_id: uuid.UUID, playlist_id: str) -> None:
        playlist = await self._get_owned(owner_id, playlist_id, "delete")
        await self.db.delete(playlist)
        await self.db.commit()
        logger.info(f"Playlist deleted: {playlist.name}", extra={"playlist_id": str(playlist.id)})

    async def add_video(self, owner_id: uuid.UUID, playlist_id: str, video_id: str) -> MembershipChange:
        """Append a video; reports ``already_present`` instead of failing on a repeat."""
        if not video_id:
            raise ValidationError("Video ID is required")

        playlist = await self._get_owned(owner_id, playlist_id, "modify")
        video = await self.find_video(video_id)
        if video is None:
            raise NotFoundError("Video not found", {"video_id": video_id})

        if any(item.video_id == video.video_id for item in playlist.items):
            return MembershipChange(False, ALREADY_PRESENT)

        position_result = await self.db.execute(
            select(func.max(VideoPlaylistItem.position))
            .where(VideoPlaylistItem.playlist_id == playlist.id)
        )
        position = (position_result.scalar() or 0) + 1

        playlist.items.append(VideoPlaylistItem(video_id=video.video_id, position=position))
        playlist.updated_at = datetime.utcnow()
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return MembershipChange(False, ALREADY_PRESENT)

        return MembershipChange(True)

    async def remove_video(self, owner_id: uuid.UUID, playlist_id: str, video_id: str) -> MembershipChange:
        """Drop a video; reports ``not_present`` when it was never there."""
        if not video_id:
            raise ValidationError("Video ID is required")

        playlist = await self._get_owned(owner_id, playlist_id, "modify")

        # A deleted video can still be removed by the id stored in the playlist.
        video = await self.find_video(video_id)
        if video is not None:
            video_id = video.video_id

        item = next((i for i in playlist.items if i.video_id == video_id), None)
        if item is None:
            return MembershipChange(False, NOT_PRESENT)

        playlist.items.remove(item)
        playlist.updated_at = datetime.utcnow()
        await self.db.commit()
        return MembershipChange(True)

    async def _load(self, playlist_pk: uuid.UUID) -> Optional[VideoPlaylist]:
        result = await self.db.execute(
            select(VideoPlaylist)
            .where(VideoPlaylist.id == playlist_pk)
            .options(selectinload(VideoPlaylist.items))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_owned(self, owner_id: uuid.UUID, playlist_id: str, action: str) -> VideoPlaylist:
        playlist = None
        native_id = self._as_native_id(playlist_id)
        if native_id is not None:
            playlist = await self._load(native_id)

        if playlist is None:
            raise NotFoundError("Playlist not found", {"playlist_id": str(playlist_id)})
        if playlist.owner_id != owner_id:
            if action == "access":
                raise ForbiddenError("You do not have access to this playlist")
            raise ForbiddenError(f"You do not have permission to {action} this playlist")
        return playlist

    @staticmethod
    def _clean_name(name: Any) -> str:
        name = str(name or "").strip()
        if not name:
            raise ValidationError("Playlist name is required")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Playlist name must not exceed {NAME_MAX_LENGTH} characters")
        return name

    @staticmethod
    def serialize_playlist(playlist: VideoPlaylist) -> Dict[str, Any]:
        return {
            "id": str(playlist.id),
            "owner": str(playlist.owner_id),
            "name": playlist.name,
            "thumbnail": playlist.thumbnail,
            "videos": [item.video_id for item in playlist.items],
            "createdAt": playlist.created_at.isoformat() + "Z",
            "updatedAt": playlist.updated_at.isoformat() + "Z",
        }
