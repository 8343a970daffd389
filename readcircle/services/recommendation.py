"""Genre recommendation ledger."""

import logging
from collections.abc import Iterable

from readcircle.ports.ledger import GenreScore, PointStorePort

logger = logging.getLogger(__name__)


class RecommendationLedger:
    """
    Per-(user, genre) engagement points.

    The only writer of recommendation points. Scores never drop below zero;
    each change is a single atomic statement in the point store.
    """

    def __init__(self, store: PointStorePort) -> None:
        self._store = store

    async def increment(self, user_id: str, genre_id: int) -> int:
        return await self._store.increment(user_id, genre_id)

    async def decrement(self, user_id: str, genre_id: int) -> int:
        return await self._store.decrement(user_id, genre_id)

    async def points(self, user_id: str, genre_id: int) -> int:
        return await self._store.points(user_id, genre_id)

    async def top_genres(self, user_id: str, limit: int) -> list[GenreScore]:
        return await self._store.top(user_id, limit)

    async def credit(self, user_id: str, genre_ids: Iterable[int]) -> None:
        """Increment once per genre."""
        for genre_id in sorted(set(genre_ids)):
            score = await self.increment(user_id, genre_id)
            logger.debug("Points %s/%s -> %d", user_id, genre_id, score)

    async def debit(self, user_id: str, genre_ids: Iterable[int]) -> None:
        """Decrement once per genre."""
        for genre_id in sorted(set(genre_ids)):
            score = await self.decrement(user_id, genre_id)
            logger.debug("Points %s/%s -> %d", user_id, genre_id, score)
