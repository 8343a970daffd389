"""SQL trending signal store."""

from datetime import datetime

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.domain.models import TrendingBook
from readcircle.ports.trending import TrendingCount, TrendingStorePort

_signals = TrendingBook.__table__


class SqlTrendingStore(TrendingStorePort):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record(self, book_id: int) -> None:
        await self._session.execute(insert(_signals).values(book_id=book_id))

    async def count(self, book_id: int) -> int:
        result = await self._session.execute(
            select(func.count(_signals.c.id)).where(_signals.c.book_id == book_id)
        )
        return result.scalar_one()

    async def top(self, since: datetime, limit: int) -> list[TrendingCount]:
        signals = func.count(_signals.c.id).label("signals")
        result = await self._session.execute(
            select(_signals.c.book_id, signals)
            .where(_signals.c.added_date >= since)
            .group_by(_signals.c.book_id)
            .order_by(signals.desc(), _signals.c.book_id)
            .limit(limit)
        )
        return [TrendingCount(book_id=row.book_id, signals=row.signals) for row in result]
