"""
Tests for optimistic mutations and their rollback.
"""
import pytest

from vidshare.client.api_client import ApiError
from vidshare.client.optimistic import (
    AddComment, CommentFeedState, DeleteComment, LikeState, OptimisticStore,
    PlaylistMembershipState, ToggleLike, TogglePlaylistMembership,
)


def responding(body):
    async def remote():
        return body
    return remote


def failing(status_code=500):
    async def remote():
        raise ApiError(status_code, "internal_error", "Internal server error")
    return remote


class TestToggleLike:

    async def test_reconciles_with_server_count(self):
        store = OptimisticStore(LikeState(liked=False, likes_count=4))

        state = await store.perform(ToggleLike(), responding({"success": True, "liked": True, "likesCount": 7}))

        assert state == LikeState(True, 7)

    async def test_rolls_back_on_failure(self):
        store = OptimisticStore(LikeState(liked=True, likes_count=1))

        with pytest.raises(ApiError):
            await store.perform(ToggleLike(), failing())

        assert store.state == LikeState(True, 1)

    def test_unlike_never_goes_negative(self):
        state, undo = ToggleLike().apply(LikeState(liked=True, likes_count=0))

        assert state == LikeState(False, 0)
        assert undo.restore() == LikeState(True, 0)


class TestComments:

    async def test_placeholder_is_replaced(self):
        store = OptimisticStore(CommentFeedState(({"id": "c1", "text": "first"},)))
        mutation = AddComment("second", author={"id": "u1"})
        stored = {"id": "c2", "text": "second", "user": {"id": "u1", "email": "u1@example.com"}}

        state = await store.perform(mutation, responding({"success": True, "data": stored}))

        assert [item["id"] for item in state.items] == ["c2", "c1"]

    async def test_add_rolls_back_on_failure(self):
        original = CommentFeedState(({"id": "c1", "text": "first"},))
        store = OptimisticStore(original)

        with pytest.raises(ApiError):
            await store.perform(AddComment("spam"), failing(429))

        assert store.state == original

    async def test_delete_rolls_back_on_failure(self):
        original = CommentFeedState(({"id": "c1"}, {"id": "c2"}))
        store = OptimisticStore(original)

        with pytest.raises(ApiError):
            await store.perform(DeleteComment("c1"), failing(403))

        assert store.state == original


class TestPlaylistMembership:

    async def test_add_then_remove(self):
        store = OptimisticStore(PlaylistMembershipState("v1"))
        mutation = TogglePlaylistMembership("p1")
        assert mutation.adding(store.state) is True

        await store.perform(mutation, responding({"success": True}))
        assert store.state.playlist_ids == frozenset({"p1"})

        await store.perform(TogglePlaylistMembership("p1"), responding({"success": True}))
        assert store.state.playlist_ids == frozenset()

    async def test_rolls_back_on_failure(self):
        store = OptimisticStore(PlaylistMembershipState("v1", frozenset({"p1"})))

        with pytest.raises(ApiError):
            await store.perform(TogglePlaylistMembership("p2"), failing())

        assert store.state.playlist_ids == frozenset({"p1"})
