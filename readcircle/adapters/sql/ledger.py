"""SQL recommendation point store."""

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.adapters.sql.base import upsert_insert
from readcircle.domain.models import RecommendationPoint
from readcircle.ports.ledger import GenreScore, PointStorePort

_points = RecommendationPoint.__table__


class SqlPointStore(PointStorePort):
    """Each change is one statement; the database serializes same-key writers."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def increment(self, user_id: str, genre_id: int) -> int:
        stmt = (
            upsert_insert(self._session, _points)
            .values(user_id=user_id, genre_id=genre_id, points=1)
            .on_conflict_do_update(
                index_elements=[_points.c.user_id, _points.c.genre_id],
                set_={"points": _points.c.points + 1},
            )
            .returning(_points.c.points)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def decrement(self, user_id: str, genre_id: int) -> int:
        stmt = (
            update(_points)
            .where(_points.c.user_id == user_id, _points.c.genre_id == genre_id)
            .values(points=case((_points.c.points > 0, _points.c.points - 1), else_=0))
            .returning(_points.c.points)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() or 0

    async def points(self, user_id: str, genre_id: int) -> int:
        result = await self._session.execute(
            select(_points.c.points).where(
                _points.c.user_id == user_id,
                _points.c.genre_id == genre_id,
            )
        )
        return result.scalar_one_or_none() or 0

    async def top(self, user_id: str, limit: int) -> list[GenreScore]:
        result = await self._session.execute(
            select(_points.c.genre_id, _points.c.points)
            .where(_points.c.user_id == user_id, _points.c.points > 0)
            .order_by(_points.c.points.desc(), _points.c.genre_id)
            .limit(limit)
        )
        return [GenreScore(genre_id=row.genre_id, points=row.points) for row in result]
