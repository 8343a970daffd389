"""SQL repositories for catalog and community entities."""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, with_polymorphic

from readcircle.adapters.sql.base import page_offset
from readcircle.api.schemas import DiscussionTag, ReviewSortField, SortDirection
from readcircle.domain.errors import UnknownContentKindError
from readcircle.domain.models import (
    Author,
    Book,
    Comment,
    Discussion,
    Genre,
    Playlist,
    Post,
    Review,
)
from readcircle.ports.repositories import CatalogRepositoryPort, CommunityRepositoryPort

# Association rows are written with Core statements, so every read refreshes
# already-loaded instances instead of trusting the identity map.
_FRESH = {"populate_existing": True}

_posts = Post.__table__

_REVIEW_ORDER = {
    ReviewSortField.CREATED_AT: Review.created_at,
    ReviewSortField.RATE: Review.rate,
    ReviewSortField.LIKES: Review.like_count,
}


def _polymorphic_posts():
    """Select every post variant with its book references loaded."""
    posts = with_polymorphic(Post, [Review, Playlist, Discussion])
    stmt = (
        select(posts)
        .options(
            selectinload(posts.Review.book),
            selectinload(posts.Playlist.books),
            selectinload(posts.Discussion.books),
        )
        .execution_options(**_FRESH)
    )
    return posts, stmt


def _require_mapped_kinds(kinds: Iterable[str]) -> None:
    """The polymorphic loader cannot build a row whose kind has no mapped class."""
    mapped = Post.__mapper__.polymorphic_map
    for kind in kinds:
        if kind not in mapped:
            raise UnknownContentKindError(kind)


def _post_filters(
    user_ids: Iterable[str] | None,
    kind: str | None,
    tag: DiscussionTag | None,
) -> list:
    clauses = []
    if user_ids is not None:
        clauses.append(_posts.c.user_id.in_(set(user_ids)))
    if kind is not None:
        clauses.append(_posts.c.kind == kind)
    if tag is not None:
        clauses.append(_posts.c.kind == "discussion")
        clauses.append(_posts.c.tag == tag.value)
    return clauses


class SqlCatalogRepository(CatalogRepositoryPort):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_book(self, book_id: int) -> Book | None:
        result = await self._session.execute(
            select(Book).where(Book.id == book_id).execution_options(**_FRESH)
        )
        return result.scalar_one_or_none()

    async def get_books(self, book_ids: Iterable[int]) -> list[Book]:
        ids = set(book_ids)
        if not ids:
            return []
        result = await self._session.execute(
            select(Book).where(Book.id.in_(ids)).order_by(Book.id).execution_options(**_FRESH)
        )
        return list(result.scalars().all())

    async def add(self, entity: Book | Genre | Author) -> Book | Genre | Author:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def delete_book(self, book: Book) -> None:
        await self._session.delete(book)
        await self._session.flush()

    async def book_rates(self, book_id: int) -> list[int]:
        result = await self._session.execute(
            select(Review.rate).where(Review.book_id == book_id)
        )
        return [rate for rate in result.scalars().all() if rate is not None]

    async def book_reviews(
        self,
        book_id: int,
        page: int,
        size: int,
        sort_by: ReviewSortField = ReviewSortField.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
    ) -> list[Review]:
        column = _REVIEW_ORDER[sort_by]
        if direction is SortDirection.DESC:
            order = (column.desc(), Review.id.desc())
        else:
            order = (column.asc(), Review.id.asc())
        result = await self._session.execute(
            select(Review)
            .where(Review.book_id == book_id)
            .order_by(*order)
            .offset(page_offset(page, size))
            .limit(size)
            .execution_options(**_FRESH)
        )
        return list(result.scalars().all())


class SqlCommunityRepository(CommunityRepositoryPort):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _one(self, model: type[Post], post_id: int):
        result = await self._session.execute(
            select(model).where(model.id == post_id).execution_options(**_FRESH)
        )
        return result.scalar_one_or_none()

    async def _load_posts(self, post_ids: list[int]) -> list[Post]:
        """Load posts polymorphically, keeping the order of ``post_ids``."""
        if not post_ids:
            return []
        posts, stmt = _polymorphic_posts()
        result = await self._session.execute(stmt.where(posts.id.in_(post_ids)))
        by_id = {post.id: post for post in result.scalars().all()}
        return [by_id[post_id] for post_id in post_ids if post_id in by_id]

    async def get_post(self, post_id: int) -> Post | None:
        result = await self._session.execute(select(_posts.c.kind).where(_posts.c.id == post_id))
        kind = result.scalar_one_or_none()
        if kind is None:
            return None
        _require_mapped_kinds([kind])
        posts = await self._load_posts([post_id])
        return posts[0] if posts else None

    async def get_review(self, review_id: int) -> Review | None:
        return await self._one(Review, review_id)

    async def get_playlist(self, playlist_id: int) -> Playlist | None:
        return await self._one(Playlist, playlist_id)

    async def get_discussion(self, discussion_id: int) -> Discussion | None:
        return await self._one(Discussion, discussion_id)

    async def save(self, entity: Post | Comment) -> Post | Comment:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def delete(self, entity: Post | Comment) -> None:
        await self._session.delete(entity)
        await self._session.flush()

    async def has_review(self, user_id: str, book_id: int) -> bool:
        result = await self._session.execute(
            select(Review.id).where(Review.user_id == user_id, Review.book_id == book_id).limit(1)
        )
        return result.first() is not None

    async def recent_posts(
        self,
        page: int,
        size: int,
        user_ids: Iterable[str] | None = None,
        kind: str | None = None,
        tag: DiscussionTag | None = None,
    ) -> list[Post]:
        # Page over (id, kind) first so unmapped kinds surface before the ORM load
        result = await self._session.execute(
            select(_posts.c.id, _posts.c.kind)
            .where(*_post_filters(user_ids, kind, tag))
            .order_by(_posts.c.created_at.desc(), _posts.c.id.desc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        rows = result.all()
        _require_mapped_kinds(row.kind for row in rows)
        return await self._load_posts([row.id for row in rows])

    async def count_posts(
        self,
        user_ids: Iterable[str] | None = None,
        kind: str | None = None,
        tag: DiscussionTag | None = None,
    ) -> int:
        result = await self._session.execute(
            select(func.count(_posts.c.id)).where(*_post_filters(user_ids, kind, tag))
        )
        return result.scalar_one()

    async def get_comment(self, comment_id: int) -> Comment | None:
        result = await self._session.execute(
            select(Comment).where(Comment.id == comment_id).execution_options(**_FRESH)
        )
        return result.scalar_one_or_none()

    async def post_comments(self, post_id: int, page: int, size: int) -> list[Comment]:
        result = await self._session.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id)
            .offset(page_offset(page, size))
            .limit(size)
            .execution_options(**_FRESH)
        )
        return list(result.scalars().all())

    async def count_comments(self, post_id: int) -> int:
        result = await self._session.execute(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        )
        return result.scalar_one()
