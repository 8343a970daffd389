"""Stateless projections from ORM entities to views."""

from readcircle.api.schemas import (
    AuthorView,
    BookSummary,
    BookView,
    CommentView,
    DiscussionView,
    GenreView,
    PlaylistView,
    ReviewView,
)
from readcircle.domain.models import Book, Comment, Discussion, Playlist, Review
from readcircle.services.rating import RatingResult


def project_book(book: Book, rating: RatingResult) -> BookView:
    return BookView(
        id=book.id,
        title=book.title,
        description=book.description,
        number_of_pages=book.number_of_pages,
        added_date=book.added_date,
        genres=[GenreView.model_validate(genre) for genre in book.genres],
        authors=[AuthorView.model_validate(author) for author in book.authors],
        rating=rating.as_float(),
        rate=rating.display,
    )


def _summaries(books: list[Book]) -> list[BookSummary]:
    return [BookSummary.model_validate(book) for book in books]


def project_review(review: Review) -> ReviewView:
    return ReviewView(
        id=review.id,
        user_id=review.user_id,
        created_at=review.created_at,
        like_count=review.like_count,
        book=BookSummary.model_validate(review.book) if review.book is not None else None,
        rate=review.rate,
        content=review.content,
    )


def project_playlist(playlist: Playlist) -> PlaylistView:
    return PlaylistView(
        id=playlist.id,
        user_id=playlist.user_id,
        created_at=playlist.created_at,
        like_count=playlist.like_count,
        name=playlist.title,
        description=playlist.description,
        books=_summaries(playlist.books),
    )


def project_discussion(discussion: Discussion) -> DiscussionView:
    return DiscussionView(
        id=discussion.id,
        user_id=discussion.user_id,
        created_at=discussion.created_at,
        like_count=discussion.like_count,
        title=discussion.title,
        content=discussion.content,
        tag=discussion.tag,
        books=_summaries(discussion.books),
    )


def project_comment(comment: Comment) -> CommentView:
    return CommentView.model_validate(comment)
