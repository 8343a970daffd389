"""Initial schema.

Revision ID: 001
Revises:
Create Date: 2025-01-01 00:00:00.000000
"""

import sqlalchemy as sa

from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Catalog
    op.create_table(
        "genres",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
    )
    op.create_table(
        "authors",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(300), nullable=False, index=True),
        sa.Column("bio", sa.Text, nullable=True),
    )
    op.create_table(
        "books",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(500), nullable=False, index=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("number_of_pages", sa.Integer, nullable=True),
        sa.Column("added_date", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_table(
        "book_genres",
        sa.Column("book_id", sa.Integer, sa.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("genre_id", sa.Integer, sa.ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "book_authors",
        sa.Column("book_id", sa.Integer, sa.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("authors.id", ondelete="CASCADE"), primary_key=True),
    )

    # Trending signals (append-only)
    op.create_table(
        "trending_books",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "book_id",
            sa.Integer,
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("added_date", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )

    # Posts: reviews, playlists and discussions share one table
    op.create_table(
        "posts",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("kind", sa.String(20), nullable=False, index=True),
        sa.Column("user_id", sa.String(64), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False, index=True),
        sa.Column("like_count", sa.Integer, server_default="0", nullable=False),
        sa.Column("book_id", sa.Integer, sa.ForeignKey("books.id", ondelete="CASCADE"), nullable=True),
        sa.Column("rate", sa.Integer, nullable=True),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("tag", sa.String(20), nullable=True),
    )
    # Partial unique index: one review per user per book
    op.create_index(
        "uq_review_user_book",
        "posts",
        ["user_id", "book_id"],
        unique=True,
        postgresql_where=sa.text("kind = 'review'"),
    )
    op.create_table(
        "playlist_books",
        sa.Column("playlist_id", sa.Integer, sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("book_id", sa.Integer, sa.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "discussion_books",
        sa.Column("discussion_id", sa.Integer, sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("book_id", sa.Integer, sa.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    )

    # Likes and comments
    op.create_table(
        "post_likes",
        sa.Column("post_id", sa.Integer, sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_table(
        "comments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "post_id",
            sa.Integer,
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("like_count", sa.Integer, server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "comment_likes",
        sa.Column("comment_id", sa.Integer, sa.ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
    )

    # Recommendation ledger
    op.create_table(
        "recommendation_points",
        sa.Column("user_id", sa.String(64), primary_key=True),
        sa.Column("genre_id", sa.Integer, sa.ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("points", sa.Integer, server_default="0", nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_points_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("recommendation_points")
    op.drop_table("comment_likes")
    op.drop_table("comments")
    op.drop_table("post_likes")
    op.drop_table("discussion_books")
    op.drop_table("playlist_books")
    op.drop_index("uq_review_user_book", table_name="posts")
    op.drop_table("posts")
    op.drop_table("trending_books")
    op.drop_table("book_authors")
    op.drop_table("book_genres")
    op.drop_table("books")
    op.drop_table("authors")
    op.drop_table("genres")
