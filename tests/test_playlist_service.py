"""
Tests for playlist service.
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.web.app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from vidshare.web.app.models import User, Video
from vidshare.web.app.services.playlist_service import (
    ALREADY_PRESENT, NOT_PRESENT, MembershipChange, PlaylistService
)


class TestPlaylistService:
    """Test playlist CRUD and membership."""

    async def test_create_playlist(self, db_session: AsyncSession, test_user: User, test_settings):
        playlist = await PlaylistService(db_session, test_settings).create_playlist(test_user.id, "  Favourites ")

        assert playlist["name"] == "Favourites"
        assert playlist["owner"] == str(test_user.id)
        assert playlist["videos"] == []

    async def test_name_is_validated(self, db_session: AsyncSession, test_user: User, test_settings):
        service = PlaylistService(db_session, test_settings)

        with pytest.raises(ValidationError):
            await service.create_playlist(test_user.id, "")
        with pytest.raises(ValidationError):
            await service.create_playlist(test_user.id, "x" * 101)

        playlist = await service.create_playlist(test_user.id, "x" * 100)
        assert len(playlist["name"]) == 100

    async def test_name_unique_per_owner(self, db_session: AsyncSession, test_user: User, another_user: User,
                                         test_settings):
        owner_id, other_id = test_user.id, another_user.id
        service = PlaylistService(db_session, test_settings)
        await service.create_playlist(owner_id, "Watch later")

        with pytest.raises(ConflictError):
            await service.create_playlist(owner_id, "Watch later")

        # A failed insert rolls the session back, so ids are read up front.
        other = await service.create_playlist(other_id, "Watch later")
        assert other["owner"] == str(other_id)

    async def test_list_only_own_playlists(self, db_session: AsyncSession, test_user: User, another_user: User,
                                           test_settings):
        service = PlaylistService(db_session, test_settings)
        await service.create_playlist(test_user.id, "Mine")
        await service.create_playlist(another_user.id, "Theirs")

        playlists = await service.list_playlists(test_user.id)

        assert [p["name"] for p in playlists] == ["Mine"]

    async def test_add_and_remove_video(self, db_session: AsyncSession, test_video: Video, test_user: User,
                                        test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Mix")

        assert await service.add_video(test_user.id, playlist["id"], "v1") == MembershipChange(True)
        detail = await service.get_playlist(test_user.id, playlist["id"])
        assert detail["videos"] == ["v1"]
        assert [v["id"] for v in detail["videoDetails"]] == ["v1"]

        assert await service.remove_video(test_user.id, playlist["id"], "v1") == MembershipChange(True)
        detail = await service.get_playlist(test_user.id, playlist["id"])
        assert detail["videos"] == []

    async def test_membership_noops(self, db_session: AsyncSession, test_video: Video, test_user: User,
                                    test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Mix")
        await service.add_video(test_user.id, playlist["id"], "v1")

        again = await service.add_video(test_user.id, playlist["id"], "v1")
        assert again == MembershipChange(False, ALREADY_PRESENT)

        await service.remove_video(test_user.id, playlist["id"], "v1")
        missing = await service.remove_video(test_user.id, playlist["id"], "v1")
        assert missing == MembershipChange(False, NOT_PRESENT)

    async def test_videos_keep_insertion_order(self, db_session: AsyncSession, make_video, test_user: User,
                                               test_settings):
        for video_id in ("c", "a", "b"):
            await make_video(video_id)
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Ordered")

        for video_id in ("c", "a", "b"):
            await service.add_video(test_user.id, playlist["id"], video_id)

        detail = await service.get_playlist(test_user.id, playlist["id"])
        assert detail["videos"] == ["c", "a", "b"]
        assert [v["id"] for v in detail["videoDetails"]] == ["c", "a", "b"]

    async def test_add_unknown_video(self, db_session: AsyncSession, test_user: User, test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Mix")

        with pytest.raises(NotFoundError):
            await service.add_video(test_user.id, playlist["id"], "missing")
        with pytest.raises(ValidationError):
            await service.add_video(test_user.id, playlist["id"], "")

    async def test_other_users_playlist(self, db_session: AsyncSession, test_video: Video, test_user: User,
                                        another_user: User, test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Private")

        with pytest.raises(ForbiddenError):
            await service.get_playlist(another_user.id, playlist["id"])
        with pytest.raises(ForbiddenError):
            await service.add_video(another_user.id, playlist["id"], "v1")
        with pytest.raises(ForbiddenError):
            await service.delete_playlist(another_user.id, playlist["id"])

    async def test_unknown_playlist(self, db_session: AsyncSession, test_user: User, test_settings):
        service = PlaylistService(db_session, test_settings)

        with pytest.raises(NotFoundError):
            await service.get_playlist(test_user.id, "not-a-uuid")
        with pytest.raises(NotFoundError):
            await service.get_playlist(test_user.id, "00000000-0000-0000-0000-000000000000")

    async def test_update_playlist(self, db_session: AsyncSession, test_user: User, test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Old")

        updated = await service.update_playlist(test_user.id, playlist["id"], name="New", thumbnail="/t.jpg")
        assert updated["name"] == "New"
        assert updated["thumbnail"] == "/t.jpg"

        unchanged = await service.update_playlist(test_user.id, playlist["id"], name="  ")
        assert unchanged["name"] == "New"

    async def test_delete_playlist(self, db_session: AsyncSession, test_video: Video, test_user: User,
                                   test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Temp")
        await service.add_video(test_user.id, playlist["id"], "v1")

        await service.delete_playlist(test_user.id, playlist["id"])

        assert await service.list_playlists(test_user.id) == []
        # The video itself is untouched.
        assert (await service.find_video("v1")) is not None

    async def test_remove_by_legacy_native_id(self, db_session: AsyncSession, test_video: Video, test_user: User,
                                              test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Legacy")
        await service.add_video(test_user.id, playlist["id"], str(test_video.id))

        change = await service.remove_video(test_user.id, playlist["id"], str(test_video.id))

        assert change == MembershipChange(True)
        assert (await service.get_playlist(test_user.id, playlist["id"]))["videos"] == []

    async def test_remove_deleted_video_by_stored_id(self, db_session: AsyncSession, test_video: Video,
                                                     test_user: User, test_settings):
        service = PlaylistService(db_session, test_settings)
        playlist = await service.create_playlist(test_user.id, "Dangling")
        await service.add_video(test_user.id, playlist["id"], "v1")
        await db_session.delete(test_video)
        await db_session.commit()

        change = await service.remove_video(test_user.id, playlist["id"], "v1")

        assert change == MembershipChange(True)
