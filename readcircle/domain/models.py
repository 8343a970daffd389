"""SQLAlchemy ORM models."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


# ── Association tables ──────────────────────────────
# Composite primary keys: an owner can hold a member at most once.

book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)

book_authors = Table(
    "book_authors",
    Base.metadata,
    Column("book_id", Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("author_id", Integer, ForeignKey("authors.id", ondelete="CASCADE"), primary_key=True),
)

playlist_books = Table(
    "playlist_books",
    Base.metadata,
    Column("playlist_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("book_id", Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
)

discussion_books = Table(
    "discussion_books",
    Base.metadata,
    Column("discussion_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("book_id", Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
)


# ── Catalog ─────────────────────────────────────────


class Genre(Base):
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)


class Author(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True)
    name = Column(String(300), nullable=False, index=True)
    bio = Column(Text, nullable=True)


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String(500), nullable=False, index=True)
    description = Column(Text, nullable=True)
    number_of_pages = Column(Integer, nullable=True)
    added_date = Column(DateTime, default=datetime.utcnow)

    genres = relationship("Genre", secondary=book_genres, lazy="selectin", order_by="Genre.id")
    authors = relationship("Author", secondary=book_authors, lazy="selectin", order_by="Author.id")


class TrendingBook(Base):
    """One engagement signal for a book. Append-only."""

    __tablename__ = "trending_books"

    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    added_date = Column(DateTime, default=datetime.utcnow, nullable=False)


# ── Community posts ─────────────────────────────────


class Post(Base):
    """Common columns for reviews, playlists and discussions.

    Rows share one table; ``kind`` is the discriminator and the only thing
    the feed uses to tell the variants apart.
    """

    __tablename__ = "posts"
    __table_args__ = (
        # One review per user per book
        Index(
            "uq_review_user_book",
            "user_id",
            "book_id",
            unique=True,
            postgresql_where=text("kind = 'review'"),
            sqlite_where=text("kind = 'review'"),
        ),
    )

    id = Column(Integer, primary_key=True)
    kind = Column(String(20), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    like_count = Column(Integer, default=0, nullable=False)

    # Review columns
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=True)
    rate = Column(Integer, nullable=True)
    content = Column(Text, nullable=True)

    # Playlist / discussion columns
    title = Column(String(300), nullable=True)
    description = Column(Text, nullable=True)
    tag = Column(String(20), nullable=True)

    __mapper_args__ = {"polymorphic_on": kind}


class Review(Post):
    book = relationship("Book", lazy="selectin")

    __mapper_args__ = {"polymorphic_identity": "review"}


class Playlist(Post):
    books = relationship("Book", secondary=playlist_books, lazy="selectin", order_by="Book.id")

    __mapper_args__ = {"polymorphic_identity": "playlist"}


class Discussion(Post):
    books = relationship("Book", secondary=discussion_books, lazy="selectin", order_by="Book.id")

    __mapper_args__ = {"polymorphic_identity": "discussion"}


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(64), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    content = Column(Text, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class CommentLike(Base):
    __tablename__ = "comment_likes"

    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(64), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)


# ── Recommendations ─────────────────────────────────


class RecommendationPoint(Base):
    __tablename__ = "recommendation_points"
    __table_args__ = (CheckConstraint("points >= 0", name="ck_points_non_negative"),)

    user_id = Column(String(64), primary_key=True)
    genre_id = Column(Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True)
    points = Column(Integer, default=0, nullable=False)
