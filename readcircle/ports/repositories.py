"""Repository ports: entity-level fetch / save / delete / count."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from readcircle.api.schemas import DiscussionTag, ReviewSortField, SortDirection
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


class CatalogRepositoryPort(ABC):
    """Books, genres and authors."""

    @abstractmethod
    async def get_book(self, book_id: int) -> Book | None:
        ...

    @abstractmethod
    async def get_books(self, book_ids: Iterable[int]) -> list[Book]:
        ...

    @abstractmethod
    async def add(self, entity: Book | Genre | Author) -> Book | Genre | Author:
        """Persist a new catalog entity and return it with its id assigned."""
        ...

    @abstractmethod
    async def delete_book(self, book: Book) -> None:
        ...

    @abstractmethod
    async def book_rates(self, book_id: int) -> list[int]:
        """All review scores attached to a book."""
        ...

    @abstractmethod
    async def book_reviews(
        self,
        book_id: int,
        page: int,
        size: int,
        sort_by: ReviewSortField = ReviewSortField.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
    ) -> list[Review]:
        """Reviews for a book, newest first unless another order is asked for."""
        ...


class CommunityRepositoryPort(ABC):
    """Posts and comments."""

    @abstractmethod
    async def get_post(self, post_id: int) -> Post | None:
        ...

    @abstractmethod
    async def get_review(self, review_id: int) -> Review | None:
        ...

    @abstractmethod
    async def get_playlist(self, playlist_id: int) -> Playlist | None:
        ...

    @abstractmethod
    async def get_discussion(self, discussion_id: int) -> Discussion | None:
        ...

    @abstractmethod
    async def save(self, entity: Post | Comment) -> Post | Comment:
        """Persist a new or modified post or comment."""
        ...

    @abstractmethod
    async def delete(self, entity: Post | Comment) -> None:
        ...

    @abstractmethod
    async def has_review(self, user_id: str, book_id: int) -> bool:
        ...

    @abstractmethod
    async def recent_posts(
        self,
        page: int,
        size: int,
        user_ids: Iterable[str] | None = None,
        kind: str | None = None,
        tag: DiscussionTag | None = None,
    ) -> list[Post]:
        """
        Posts newest first, optionally restricted to some authors, one kind
        or one discussion tag.

        Raises ``UnknownContentKindError`` when a stored post has a kind no
        post type is registered for.
        """
        ...

    @abstractmethod
    async def count_posts(
        self,
        user_ids: Iterable[str] | None = None,
        kind: str | None = None,
        tag: DiscussionTag | None = None,
    ) -> int:
        """Number of posts ``recent_posts`` pages over with the same filters."""
        ...

    @abstractmethod
    async def get_comment(self, comment_id: int) -> Comment | None:
        ...

    @abstractmethod
    async def post_comments(self, post_id: int, page: int, size: int) -> list[Comment]:
        """Comments of a post, oldest first."""
        ...

    @abstractmethod
    async def count_comments(self, post_id: int) -> int:
        ...
