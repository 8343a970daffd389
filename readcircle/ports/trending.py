"""Trending signal store port."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass
class TrendingCount:
    book_id: int
    signals: int


class TrendingStorePort(ABC):
    @abstractmethod
    async def record(self, book_id: int) -> None:
        """Append one signal for ``book_id``."""
        ...

    @abstractmethod
    async def count(self, book_id: int) -> int:
        ...

    @abstractmethod
    async def top(self, since: datetime, limit: int) -> list[TrendingCount]:
        """Books with the most signals recorded at or after ``since``."""
        ...
