"""
Optimistic UI mutations with a single rollback mechanism.

A mutation applies its change to local state straight away and hands back an
``Undo`` describing how to get the previous state back. ``OptimisticStore``
runs the remote call; on failure it applies the undo and re-raises, on
success it lets the mutation reconcile local state with the server's answer.
"""
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Generic, Optional, Tuple, TypeVar

from vidshare.client.api_client import ApiError

S = TypeVar("S")

Remote = Callable[[], Awaitable[Dict[str, Any]]]


@dataclass(frozen=True)
class Undo(Generic[S]):
    """Reversible descriptor: the state to restore and what it undoes."""
    label: str
    previous: S

    def restore(self) -> S:
        return self.previous


class OptimisticMutation(Generic[S]):
    label = "mutation"

    def apply(self, state: S) -> Tuple[S, Undo[S]]:
        raise NotImplementedError

    def reconcile(self, state: S, response: Dict[str, Any]) -> S:
        return state


class OptimisticStore(Generic[S]):
    """Holds one piece of UI state and runs mutations against it."""

    def __init__(self, state: S):
        self.state = state

    async def perform(self, mutation: OptimisticMutation[S], remote: Remote) -> S:
        self.state, undo = mutation.apply(self.state)
        try:
            response = await remote()
        except ApiError:
            self.state = undo.restore()
            raise
        self.state = mutation.reconcile(self.state, response)
        return self.state


# Likes

@dataclass(frozen=True)
class LikeState:
    liked: bool = False
    likes_count: int = 0


class ToggleLike(OptimisticMutation[LikeState]):
    label = "toggle_like"

    def apply(self, state: LikeState) -> Tuple[LikeState, Undo[LikeState]]:
        if state.liked:
            new_state = LikeState(False, max(0, state.likes_count - 1))
        else:
            new_state = LikeState(True, state.likes_count + 1)
        return new_state, Undo(self.label, state)

    def reconcile(self, state: LikeState, response: Dict[str, Any]) -> LikeState:
        return LikeState(bool(response.get("liked")), int(response.get("likesCount", 0)))


# Comments

@dataclass(frozen=True)
class CommentFeedState:
    items: Tuple[Dict[str, Any], ...] = ()


@dataclass
class AddComment(OptimisticMutation[CommentFeedState]):
    """Prepend a placeholder, swapped for the stored comment once the server answers."""
    text: str
    author: Optional[Dict[str, Any]] = None
    placeholder_id: str = field(default_factory=lambda: f"pending-{uuid.uuid4()}")
    label = "add_comment"

    def apply(self, state: CommentFeedState) -> Tuple[CommentFeedState, Undo[CommentFeedState]]:
        placeholder = {"id": self.placeholder_id, "text": self.text, "user": self.author, "pending": True}
        return CommentFeedState((placeholder,) + state.items), Undo(self.label, state)

    def reconcile(self, state: CommentFeedState, response: Dict[str, Any]) -> CommentFeedState:
        stored = response.get("data", response)
        items = tuple(stored if item.get("id") == self.placeholder_id else item for item in state.items)
        return replace(state, items=items)


@dataclass
class DeleteComment(OptimisticMutation[CommentFeedState]):
    comment_id: str
    label = "delete_comment"

    def apply(self, state: CommentFeedState) -> Tuple[CommentFeedState, Undo[CommentFeedState]]:
        items = tuple(item for item in state.items if item.get("id") != self.comment_id)
        return CommentFeedState(items), Undo(self.label, state)


# Playlist membership

@dataclass(frozen=True)
class PlaylistMembershipState:
    """Which of the user's playlists contain the video being watched."""
    video_id: str
    playlist_ids: FrozenSet[str] = frozenset()


@dataclass
class TogglePlaylistMembership(OptimisticMutation[PlaylistMembershipState]):
    playlist_id: str
    label = "toggle_playlist_membership"

    def adding(self, state: PlaylistMembershipState) -> bool:
        return self.playlist_id not in state.playlist_ids

    def apply(self, state: PlaylistMembershipState) -> Tuple[PlaylistMembershipState, Undo[PlaylistMembershipState]]:
        if self.adding(state):
            ids = state.playlist_ids | {self.playlist_id}
        else:
            ids = state.playlist_ids - {self.playlist_id}
        return replace(state, playlist_ids=frozenset(ids)), Undo(self.label, state)
