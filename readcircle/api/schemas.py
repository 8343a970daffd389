"""Pydantic request bodies and projected views."""

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class DiscussionTag(str, Enum):
    DISCUSSION = "discussion"
    ARTICLE = "article"
    NEWS = "news"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ReviewSortField(str, Enum):
    CREATED_AT = "created_at"
    RATE = "rate"
    LIKES = "likes"


# ── Requests ────────────────────────────────────────


class GenreCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class AuthorCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=300)
    bio: str | None = None


class BookCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    number_of_pages: int | None = Field(default=None, ge=1)
    genre_ids: set[int] = Field(default_factory=set)
    author_ids: set[int] = Field(default_factory=set)


class MemberIdsRequest(BaseModel):
    ids: set[int] = Field(min_length=1)


class ReviewCreateRequest(BaseModel):
    book_id: int
    rate: int
    content: str = Field(min_length=1)


class ReviewUpdateRequest(BaseModel):
    rate: int | None = None
    content: str | None = Field(default=None, min_length=1)


class PlaylistCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=300)
    description: str | None = None
    book_ids: set[int] = Field(default_factory=set)


class PlaylistUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    book_ids: set[int] | None = None


class DiscussionCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    tag: DiscussionTag = DiscussionTag.DISCUSSION
    book_ids: set[int] = Field(default_factory=set)


class DiscussionUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = Field(default=None, min_length=1)
    tag: DiscussionTag | None = None
    book_ids: set[int] | None = None


class CommentRequest(BaseModel):
    content: str = Field(min_length=1)


# ── Views ───────────────────────────────────────────


class GenreView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class AuthorView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    bio: str | None = None


class BookSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str


class BookView(BaseModel):
    id: int
    title: str
    description: str | None
    number_of_pages: int | None
    added_date: datetime | None
    genres: list[GenreView]
    authors: list[AuthorView]
    rating: float | None
    rate: str


class TrendingBookView(BaseModel):
    book: BookView
    signals: int


class ReviewView(BaseModel):
    kind: Literal["review"] = "review"
    id: int
    user_id: str
    created_at: datetime
    like_count: int
    book: BookSummary | None
    rate: int
    content: str


class PlaylistView(BaseModel):
    kind: Literal["playlist"] = "playlist"
    id: int
    user_id: str
    created_at: datetime
    like_count: int
    name: str
    description: str | None
    books: list[BookSummary]


class DiscussionView(BaseModel):
    kind: Literal["discussion"] = "discussion"
    id: int
    user_id: str
    created_at: datetime
    like_count: int
    title: str
    content: str
    tag: DiscussionTag
    books: list[BookSummary]


FeedEntry = Annotated[ReviewView | PlaylistView | DiscussionView, Field(discriminator="kind")]


class CommentView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: str
    content: str
    like_count: int
    created_at: datetime


class GenreScoreView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    genre_id: int
    points: int


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a listing. ``total_pages`` is 0 when the listing is empty."""

    page_number: int
    page_size: int
    total_pages: int
    data: list[T]

    @classmethod
    def build(cls, data: list[T], page: int, size: int, total: int) -> "Page[T]":
        return cls(
            page_number=max(page, 1),
            page_size=size,
            total_pages=math.ceil(total / size),
            data=data,
        )

    @classmethod
    def empty(cls, page: int, size: int) -> "Page[T]":
        return cls.build([], page, size, 0)
