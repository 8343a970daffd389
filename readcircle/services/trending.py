"""Trending signal recording."""

from datetime import datetime, timedelta

from readcircle.ports.trending import TrendingCount, TrendingStorePort


class TrendingTracker:
    """Records one signal per engagement; ranking is a read-time count over a window."""

    def __init__(self, store: TrendingStorePort, window: timedelta) -> None:
        self._store = store
        self._window = window

    async def record_signal(self, book_id: int) -> None:
        await self._store.record(book_id)

    async def signals(self, book_id: int) -> int:
        return await self._store.count(book_id)

    async def trending(self, limit: int, now: datetime | None = None) -> list[TrendingCount]:
        since = (now or datetime.utcnow()) - self._window
        return await self._store.top(since, limit)
