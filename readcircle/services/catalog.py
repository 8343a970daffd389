"""Book catalog: books, their genres and authors, ratings and trending."""

import logging

from readcircle.api.schemas import (
    AuthorCreateRequest,
    AuthorView,
    BookCreateRequest,
    BookView,
    GenreCreateRequest,
    GenreView,
    ReviewSortField,
    ReviewView,
    SortDirection,
    TrendingBookView,
)
from readcircle.config import settings
from readcircle.domain.associations import RelationKind
from readcircle.domain.errors import NotFoundError
from readcircle.domain.models import Author, Book, Genre
from readcircle.ports.associations import AssociationPort
from readcircle.ports.repositories import CatalogRepositoryPort
from readcircle.services.projection import project_book, project_review
from readcircle.services.rating import RatingAggregator
from readcircle.services.reconciler import SetReconciler
from readcircle.services.result import enveloped
from readcircle.services.trending import TrendingTracker

logger = logging.getLogger(__name__)


class CatalogService:
    """Catalog operations. Book↔genre and book↔author changes emit no engagement events."""

    def __init__(
        self,
        catalog: CatalogRepositoryPort,
        associations: AssociationPort,
        trending: TrendingTracker,
        rating: RatingAggregator,
    ) -> None:
        self._catalog = catalog
        self._associations = associations
        self._reconciler = SetReconciler(associations)
        self._trending = trending
        self._rating = rating

    async def _view(self, book: Book) -> BookView:
        rates = await self._catalog.book_rates(book.id)
        return project_book(book, self._rating.aggregate(rates))

    async def _require_book(self, book_id: int) -> Book:
        book = await self._catalog.get_book(book_id)
        if book is None:
            raise NotFoundError("book not found")
        return book

    async def _require_members(self, relation: RelationKind, ids: set[int]) -> None:
        known = await self._associations.existing_member_ids(relation, ids)
        missing = ids - known
        if missing:
            raise NotFoundError(f"{relation.member_label} not found: {sorted(missing)}")

    @enveloped
    async def add_genre(self, data: GenreCreateRequest) -> GenreView:
        genre = await self._catalog.add(Genre(name=data.name))
        logger.info("Added genre %s (%s)", genre.id, genre.name)
        return GenreView.model_validate(genre)

    @enveloped
    async def add_author(self, data: AuthorCreateRequest) -> AuthorView:
        author = await self._catalog.add(Author(name=data.name, bio=data.bio))
        logger.info("Added author %s (%s)", author.id, author.name)
        return AuthorView.model_validate(author)

    @enveloped
    async def add_book(self, data: BookCreateRequest) -> BookView:
        """Create a book linked to existing genres and authors, all validated up front."""
        await self._require_members(RelationKind.BOOK_GENRE, data.genre_ids)
        await self._require_members(RelationKind.BOOK_AUTHOR, data.author_ids)

        book = await self._catalog.add(
            Book(
                title=data.title,
                description=data.description,
                number_of_pages=data.number_of_pages,
            )
        )
        if data.genre_ids:
            await self._reconciler.add(RelationKind.BOOK_GENRE, book.id, data.genre_ids)
        if data.author_ids:
            await self._reconciler.add(RelationKind.BOOK_AUTHOR, book.id, data.author_ids)
        logger.info("Added book %s (%s)", book.id, book.title)
        return await self._view(await self._require_book(book.id))

    @enveloped
    async def get_book(self, book_id: int) -> BookView:
        return await self._view(await self._require_book(book_id))

    @enveloped
    async def delete_book(self, book_id: int) -> str:
        book = await self._require_book(book_id)
        await self._catalog.delete_book(book)
        logger.info("Deleted book %s", book_id)
        return "book deleted successfully"

    async def _add_members(self, relation: RelationKind, book_id: int, ids: set[int]) -> BookView:
        await self._require_book(book_id)
        await self._reconciler.add(relation, book_id, ids)
        return await self._view(await self._require_book(book_id))

    async def _remove_members(self, relation: RelationKind, book_id: int, ids: set[int]) -> BookView:
        await self._require_book(book_id)
        await self._reconciler.remove(relation, book_id, ids)
        return await self._view(await self._require_book(book_id))

    @enveloped
    async def add_genres_to_book(self, book_id: int, genre_ids: set[int]) -> BookView:
        return await self._add_members(RelationKind.BOOK_GENRE, book_id, genre_ids)

    @enveloped
    async def remove_genres_from_book(self, book_id: int, genre_ids: set[int]) -> BookView:
        return await self._remove_members(RelationKind.BOOK_GENRE, book_id, genre_ids)

    @enveloped
    async def add_authors_to_book(self, book_id: int, author_ids: set[int]) -> BookView:
        return await self._add_members(RelationKind.BOOK_AUTHOR, book_id, author_ids)

    @enveloped
    async def remove_authors_from_book(self, book_id: int, author_ids: set[int]) -> BookView:
        return await self._remove_members(RelationKind.BOOK_AUTHOR, book_id, author_ids)

    @enveloped
    async def get_book_reviews(
        self,
        book_id: int,
        page: int = 1,
        sort_by: ReviewSortField = ReviewSortField.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
    ) -> list[ReviewView]:
        await self._require_book(book_id)
        reviews = await self._catalog.book_reviews(book_id, page, settings.posts_page_size, sort_by, direction)
        return [project_review(review) for review in reviews]

    @enveloped
    async def get_trending_books(self, limit: int | None = None) -> list[TrendingBookView]:
        counts = await self._trending.trending(limit or settings.trending_limit)
        books = {book.id: book for book in await self._catalog.get_books(c.book_id for c in counts)}
        trending: list[TrendingBookView] = []
        for count in counts:
            book = books.get(count.book_id)
            if book is not None:
                trending.append(TrendingBookView(book=await self._view(book), signals=count.signals))
        return trending
