"""Like / unlike toggling for posts and comments."""

from collections.abc import Iterable

from readcircle.domain.errors import NotFoundError
from readcircle.ports.likes import LikeState, LikeStorePort


class EngagementToggle:
    """NotLiked ⇄ Liked per (subject, user), one instance per subject type."""

    def __init__(self, store: LikeStorePort, subject: str) -> None:
        self._store = store
        self._subject = subject

    async def toggle(self, subject_id: int, user_id: str) -> LikeState:
        state = await self._store.toggle(subject_id, user_id)
        if state is None:
            raise NotFoundError(f"{self._subject} not found")
        return state

    async def is_liked(self, subject_id: int, user_id: str | None) -> bool:
        if user_id is None:
            return False
        return await self._store.is_liked(subject_id, user_id)

    async def liked_among(self, subject_ids: Iterable[int], user_id: str | None) -> set[int]:
        if user_id is None:
            return set()
        return await self._store.liked_among(subject_ids, user_id)
