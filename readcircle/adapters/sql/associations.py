"""SQL association adapter for book↔genre, book↔author, playlist↔book, discussion↔book."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import Table, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.adapters.sql.base import upsert_insert
from readcircle.domain.associations import MemberRef, RelationKind
from readcircle.domain.models import (
    Author,
    Base,
    Book,
    Genre,
    book_authors,
    book_genres,
    discussion_books,
    playlist_books,
)
from readcircle.ports.associations import AssociationPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Relation:
    table: Table
    owner_column: str
    member_column: str
    member_model: type[Base]


_RELATIONS = {
    RelationKind.BOOK_GENRE: _Relation(book_genres, "book_id", "genre_id", Genre),
    RelationKind.BOOK_AUTHOR: _Relation(book_authors, "book_id", "author_id", Author),
    RelationKind.PLAYLIST_BOOK: _Relation(playlist_books, "playlist_id", "book_id", Book),
    RelationKind.DISCUSSION_BOOK: _Relation(discussion_books, "discussion_id", "book_id", Book),
}


class SqlAssociationAdapter(AssociationPort):
    """Association rows written with single conflict-aware statements."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def member_ids(self, relation: RelationKind, owner_id: int) -> set[int]:
        rel = _RELATIONS[relation]
        owner = rel.table.c[rel.owner_column]
        member = rel.table.c[rel.member_column]
        result = await self._session.execute(select(member).where(owner == owner_id))
        return set(result.scalars().all())

    async def existing_member_ids(self, relation: RelationKind, member_ids: Iterable[int]) -> set[int]:
        ids = set(member_ids)
        if not ids:
            return set()
        model = _RELATIONS[relation].member_model
        result = await self._session.execute(select(model.id).where(model.id.in_(ids)))
        return set(result.scalars().all())

    async def link(self, owner_id: int, refs: Iterable[MemberRef]) -> set[int]:
        by_relation: dict[RelationKind, set[int]] = defaultdict(set)
        for ref in refs:
            by_relation[ref.relation].add(ref.member_id)

        inserted: set[int] = set()
        for relation, ids in by_relation.items():
            rel = _RELATIONS[relation]
            member = rel.table.c[rel.member_column]
            rows = [{rel.owner_column: owner_id, rel.member_column: member_id} for member_id in sorted(ids)]
            stmt = (
                upsert_insert(self._session, rel.table)
                .values(rows)
                .on_conflict_do_nothing()
                .returning(member)
            )
            result = await self._session.execute(stmt)
            added = set(result.scalars().all())
            logger.debug("Linked %s %s -> %s", relation.value, owner_id, sorted(added))
            inserted |= added
        return inserted

    async def unlink(self, relation: RelationKind, owner_id: int, member_ids: Iterable[int]) -> set[int]:
        ids = set(member_ids)
        if not ids:
            return set()
        rel = _RELATIONS[relation]
        owner = rel.table.c[rel.owner_column]
        member = rel.table.c[rel.member_column]
        stmt = delete(rel.table).where(owner == owner_id, member.in_(ids)).returning(member)
        result = await self._session.execute(stmt)
        removed = set(result.scalars().all())
        logger.debug("Unlinked %s %s -> %s", relation.value, owner_id, sorted(removed))
        return removed
