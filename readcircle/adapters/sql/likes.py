"""SQL like stores for posts and comments."""

import logging
from collections.abc import Iterable

from sqlalchemy import Table, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.adapters.sql.base import upsert_insert
from readcircle.domain.models import Comment, CommentLike, Post, PostLike
from readcircle.ports.likes import LikeState, LikeStorePort

logger = logging.getLogger(__name__)


class SqlLikeStore(LikeStorePort):
    """
    Liker rows in ``like_table`` keyed by (``subject_column``, user_id), with
    the denormalized ``like_count`` kept on ``subject_table``.

    The toggle never reads the liker set first: it attempts a conditional
    delete, falls back to a conditional insert, and applies the counter delta
    of whichever statement actually changed a row.
    """

    def __init__(
        self,
        session: AsyncSession,
        like_table: Table,
        subject_column: str,
        subject_table: Table,
    ) -> None:
        self._session = session
        self._likes = like_table
        self._subject_column = like_table.c[subject_column]
        self._subjects = subject_table

    async def toggle(self, subject_id: int, user_id: str) -> LikeState | None:
        exists = await self._session.execute(
            select(self._subjects.c.id).where(self._subjects.c.id == subject_id)
        )
        if exists.scalar_one_or_none() is None:
            return None

        removed = await self._session.execute(
            delete(self._likes)
            .where(self._subject_column == subject_id, self._likes.c.user_id == user_id)
            .returning(self._likes.c.user_id)
        )
        if removed.first() is not None:
            delta, is_liked = -1, False
        else:
            inserted = await self._session.execute(
                upsert_insert(self._session, self._likes)
                .values({self._subject_column.name: subject_id, "user_id": user_id})
                .on_conflict_do_nothing()
                .returning(self._likes.c.user_id)
            )
            # A concurrent toggle may have inserted the same row first
            delta = 1 if inserted.first() is not None else 0
            is_liked = True

        count = await self._session.execute(
            update(self._subjects)
            .where(self._subjects.c.id == subject_id)
            .values(like_count=self._subjects.c.like_count + delta)
            .returning(self._subjects.c.like_count)
        )
        likes_count = count.scalar_one()
        logger.debug(
            "%s %s by %s: liked=%s count=%d",
            self._subjects.name, subject_id, user_id, is_liked, likes_count,
        )
        return LikeState(is_liked=is_liked, likes_count=likes_count)

    async def is_liked(self, subject_id: int, user_id: str) -> bool:
        result = await self._session.execute(
            select(self._likes.c.user_id).where(
                self._subject_column == subject_id,
                self._likes.c.user_id == user_id,
            )
        )
        return result.first() is not None

    async def liked_among(self, subject_ids: Iterable[int], user_id: str) -> set[int]:
        ids = set(subject_ids)
        if not ids:
            return set()
        result = await self._session.execute(
            select(self._subject_column).where(
                self._subject_column.in_(ids),
                self._likes.c.user_id == user_id,
            )
        )
        return set(result.scalars().all())


def post_like_store(session: AsyncSession) -> SqlLikeStore:
    return SqlLikeStore(session, PostLike.__table__, "post_id", Post.__table__)


def comment_like_store(session: AsyncSession) -> SqlLikeStore:
    return SqlLikeStore(session, CommentLike.__table__, "comment_id", Comment.__table__)
