"""Recommendation point store port."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class GenreScore:
    genre_id: int
    points: int


class PointStorePort(ABC):
    """Per-(user, genre) counters with atomic relative updates."""

    @abstractmethod
    async def increment(self, user_id: str, genre_id: int) -> int:
        """Add one point, creating the row if needed. Returns the new score."""
        ...

    @abstractmethod
    async def decrement(self, user_id: str, genre_id: int) -> int:
        """Subtract one point, clamped at zero. Returns the new score (0 if absent)."""
        ...

    @abstractmethod
    async def points(self, user_id: str, genre_id: int) -> int:
        ...

    @abstractmethod
    async def top(self, user_id: str, limit: int) -> list[GenreScore]:
        """Highest-scoring genres for a user, best first, zero scores excluded."""
        ...
