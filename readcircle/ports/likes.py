"""Like store port: liker sets with a denormalized counter."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class LikeState:
    """Outcome of a toggle: the caller's like state and the new total."""

    is_liked: bool
    likes_count: int


class LikeStorePort(ABC):
    """Liker rows for one subject type (posts or comments)."""

    @abstractmethod
    async def toggle(self, subject_id: int, user_id: str) -> LikeState | None:
        """
        Remove the user's like if present, insert it otherwise, and move the
        subject's counter by the same amount.

        Returns None when the subject does not exist.
        """
        ...

    @abstractmethod
    async def is_liked(self, subject_id: int, user_id: str) -> bool:
        ...

    @abstractmethod
    async def liked_among(self, subject_ids: Iterable[int], user_id: str) -> set[int]:
        """Return the ids from ``subject_ids`` the user has liked."""
        ...
