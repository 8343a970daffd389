"""Community posts: reviews, playlists, discussions, comments, likes and feeds."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from readcircle.api.schemas import (
    CommentRequest,
    CommentView,
    DiscussionCreateRequest,
    DiscussionTag,
    DiscussionUpdateRequest,
    DiscussionView,
    FeedEntry,
    GenreScoreView,
    Page,
    PlaylistCreateRequest,
    PlaylistUpdateRequest,
    PlaylistView,
    ReviewCreateRequest,
    ReviewUpdateRequest,
    ReviewView,
)
from readcircle.config import settings
from readcircle.domain.associations import RelationKind
from readcircle.domain.errors import DuplicateReviewError, ForbiddenError, NotFoundError
from readcircle.domain.models import Comment, Discussion, Playlist, Post, Review
from readcircle.ports.associations import AssociationPort
from readcircle.ports.likes import LikeState
from readcircle.ports.repositories import CatalogRepositoryPort, CommunityRepositoryPort
from readcircle.services.engagement import EngagementToggle
from readcircle.services.events import EngagementEvents
from readcircle.services.feed import FeedMerger
from readcircle.services.projection import (
    project_comment,
    project_discussion,
    project_playlist,
    project_review,
)
from readcircle.services.rating import RatingAggregator
from readcircle.services.reconciler import SetReconciler
from readcircle.services.recommendation import RecommendationLedger
from readcircle.services.result import enveloped

logger = logging.getLogger(__name__)

OwnedT = TypeVar("OwnedT", Post, Comment)


class CommunityService:
    """
    Orchestrates community operations.

    Membership changes go through the reconciler first; the books that were
    actually linked or unlinked are then reported to ``EngagementEvents``.
    Only the owner of a post or comment may change or delete it.
    """

    def __init__(
        self,
        posts: CommunityRepositoryPort,
        catalog: CatalogRepositoryPort,
        associations: AssociationPort,
        events: EngagementEvents,
        ledger: RecommendationLedger,
        post_likes: EngagementToggle,
        comment_likes: EngagementToggle,
        rating: RatingAggregator,
        feed: FeedMerger | None = None,
    ) -> None:
        self._posts = posts
        self._catalog = catalog
        self._associations = associations
        self._reconciler = SetReconciler(associations)
        self._events = events
        self._ledger = ledger
        self._post_likes = post_likes
        self._comment_likes = comment_likes
        self._rating = rating
        self._feed = feed or FeedMerger()

    # ── Helpers ─────────────────────────────────────

    @staticmethod
    async def _owned(
        fetch: Callable[[int], Awaitable[OwnedT | None]],
        post_id: int,
        user_id: str,
        label: str,
    ) -> OwnedT:
        post = await fetch(post_id)
        if post is None:
            raise NotFoundError(f"{label} not found")
        if post.user_id != user_id:
            raise ForbiddenError(f"this {label} isn't yours")
        return post

    async def _require_books(self, relation: RelationKind, book_ids: set[int]) -> None:
        known = await self._associations.existing_member_ids(relation, book_ids)
        missing = book_ids - known
        if missing:
            raise NotFoundError(f"books not found: {sorted(missing)}")

    async def _link_books(self, relation: RelationKind, post_id: int, user_id: str, book_ids: Iterable[int]) -> None:
        linked = await self._reconciler.add(relation, post_id, book_ids)
        for book_id in sorted(linked):
            await self._events.book_engaged(user_id, book_id)

    async def _unlink_books(self, relation: RelationKind, post_id: int, user_id: str, book_ids: Iterable[int]) -> None:
        unlinked = await self._reconciler.remove(relation, post_id, book_ids)
        for book_id in sorted(unlinked):
            await self._events.book_dropped(user_id, book_id)

    async def _replace_books(self, relation: RelationKind, post_id: int, user_id: str, requested: set[int]) -> None:
        """Explicit remove of dropped books, then explicit add of new ones."""
        current = await self._associations.member_ids(relation, post_id)
        dropped = current - requested
        added = requested - current
        if added:
            await self._require_books(relation, added)
        if dropped:
            await self._unlink_books(relation, post_id, user_id, dropped)
        if added:
            await self._link_books(relation, post_id, user_id, added)

    async def _playlist_view(self, playlist_id: int) -> PlaylistView:
        playlist = await self._posts.get_playlist(playlist_id)
        if playlist is None:
            raise NotFoundError("playlist not found")
        return project_playlist(playlist)

    async def _discussion_view(self, discussion_id: int) -> DiscussionView:
        discussion = await self._posts.get_discussion(discussion_id)
        if discussion is None:
            raise NotFoundError("discussion not found")
        return project_discussion(discussion)

    async def _review_view(self, review_id: int) -> ReviewView:
        review = await self._posts.get_review(review_id)
        if review is None:
            raise NotFoundError("review not found")
        return project_review(review)

    # ── Reviews ─────────────────────────────────────

    @enveloped
    async def add_review(self, user_id: str, data: ReviewCreateRequest) -> ReviewView:
        if await self._posts.has_review(user_id, data.book_id):
            raise DuplicateReviewError("You already reviewed this book")
        if await self._catalog.get_book(data.book_id) is None:
            raise NotFoundError("book not found")
        self._rating.check(data.rate)

        review = await self._posts.save(
            Review(user_id=user_id, book_id=data.book_id, rate=data.rate, content=data.content)
        )
        await self._events.book_engaged(user_id, data.book_id)
        logger.info("User %s reviewed book %s (rate=%d)", user_id, data.book_id, data.rate)
        return await self._review_view(review.id)

    @enveloped
    async def update_review(self, review_id: int, user_id: str, data: ReviewUpdateRequest) -> ReviewView:
        review = await self._owned(self._posts.get_review, review_id, user_id, "review")
        if data.rate is not None:
            review.rate = self._rating.check(data.rate)
        if data.content is not None:
            review.content = data.content
        await self._posts.save(review)
        return await self._review_view(review_id)

    @enveloped
    async def get_review(self, review_id: int) -> ReviewView:
        return await self._review_view(review_id)

    # ── Playlists ───────────────────────────────────

    @enveloped
    async def add_playlist(self, user_id: str, data: PlaylistCreateRequest) -> PlaylistView:
        if data.book_ids:
            await self._require_books(RelationKind.PLAYLIST_BOOK, data.book_ids)
        playlist = await self._posts.save(
            Playlist(user_id=user_id, title=data.name, description=data.description)
        )
        if data.book_ids:
            await self._link_books(RelationKind.PLAYLIST_BOOK, playlist.id, user_id, data.book_ids)
        logger.info("User %s created playlist %s", user_id, playlist.id)
        return await self._playlist_view(playlist.id)

    @enveloped
    async def add_books_to_playlist(self, playlist_id: int, user_id: str, book_ids: set[int]) -> PlaylistView:
        await self._owned(self._posts.get_playlist, playlist_id, user_id, "playlist")
        await self._link_books(RelationKind.PLAYLIST_BOOK, playlist_id, user_id, book_ids)
        return await self._playlist_view(playlist_id)

    @enveloped
    async def remove_books_from_playlist(self, playlist_id: int, user_id: str, book_ids: set[int]) -> PlaylistView:
        await self._owned(self._posts.get_playlist, playlist_id, user_id, "playlist")
        await self._unlink_books(RelationKind.PLAYLIST_BOOK, playlist_id, user_id, book_ids)
        return await self._playlist_view(playlist_id)

    @enveloped
    async def update_playlist(self, playlist_id: int, user_id: str, data: PlaylistUpdateRequest) -> PlaylistView:
        playlist = await self._owned(self._posts.get_playlist, playlist_id, user_id, "playlist")
        if data.book_ids is not None:
            await self._replace_books(RelationKind.PLAYLIST_BOOK, playlist_id, user_id, data.book_ids)
        if data.name is not None:
            playlist.title = data.name
        if data.description is not None:
            playlist.description = data.description
        await self._posts.save(playlist)
        return await self._playlist_view(playlist_id)

    @enveloped
    async def get_playlist(self, playlist_id: int) -> PlaylistView:
        return await self._playlist_view(playlist_id)

    # ── Discussions ─────────────────────────────────

    @enveloped
    async def add_discussion(self, user_id: str, data: DiscussionCreateRequest) -> DiscussionView:
        if data.book_ids:
            await self._require_books(RelationKind.DISCUSSION_BOOK, data.book_ids)
        discussion = await self._posts.save(
            Discussion(user_id=user_id, title=data.title, content=data.content, tag=data.tag.value)
        )
        if data.book_ids:
            await self._link_books(RelationKind.DISCUSSION_BOOK, discussion.id, user_id, data.book_ids)
        logger.info("User %s started discussion %s", user_id, discussion.id)
        return await self._discussion_view(discussion.id)

    @enveloped
    async def add_books_to_discussion(self, discussion_id: int, user_id: str, book_ids: set[int]) -> DiscussionView:
        await self._owned(self._posts.get_discussion, discussion_id, user_id, "discussion")
        await self._link_books(RelationKind.DISCUSSION_BOOK, discussion_id, user_id, book_ids)
        return await self._discussion_view(discussion_id)

    @enveloped
    async def remove_books_from_discussion(
        self, discussion_id: int, user_id: str, book_ids: set[int]
    ) -> DiscussionView:
        await self._owned(self._posts.get_discussion, discussion_id, user_id, "discussion")
        await self._unlink_books(RelationKind.DISCUSSION_BOOK, discussion_id, user_id, book_ids)
        return await self._discussion_view(discussion_id)

    @enveloped
    async def update_discussion(
        self, discussion_id: int, user_id: str, data: DiscussionUpdateRequest
    ) -> DiscussionView:
        discussion = await self._owned(self._posts.get_discussion, discussion_id, user_id, "discussion")
        if data.book_ids is not None:
            await self._replace_books(RelationKind.DISCUSSION_BOOK, discussion_id, user_id, data.book_ids)
        if data.title is not None:
            discussion.title = data.title
        if data.content is not None:
            discussion.content = data.content
        if data.tag is not None:
            discussion.tag = data.tag.value
        await self._posts.save(discussion)
        return await self._discussion_view(discussion_id)

    @enveloped
    async def get_discussion(self, discussion_id: int) -> DiscussionView:
        return await self._discussion_view(discussion_id)

    # ── Posts & likes ───────────────────────────────

    @enveloped
    async def delete_post(self, post_id: int, user_id: str) -> str:
        post = await self._owned(self._posts.get_post, post_id, user_id, "post")
        await self._posts.delete(post)
        logger.info("User %s deleted post %s", user_id, post_id)
        return "post deleted successfully"

    @enveloped
    async def like_post(self, post_id: int, user_id: str) -> LikeState:
        return await self._post_likes.toggle(post_id, user_id)

    @enveloped
    async def is_post_liked(self, post_id: int, user_id: str | None) -> bool:
        return await self._post_likes.is_liked(post_id, user_id)

    @enveloped
    async def liked_posts(self, post_ids: Iterable[int], user_id: str | None) -> list[int]:
        return sorted(await self._post_likes.liked_among(post_ids, user_id))

    # ── Comments ────────────────────────────────────

    @enveloped
    async def add_comment(self, post_id: int, user_id: str, data: CommentRequest) -> CommentView:
        if await self._posts.get_post(post_id) is None:
            raise NotFoundError("post not found")
        comment = await self._posts.save(Comment(post_id=post_id, user_id=user_id, content=data.content))
        return project_comment(comment)

    @enveloped
    async def get_comment(self, comment_id: int) -> CommentView:
        comment = await self._posts.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("comment not found")
        return project_comment(comment)

    @enveloped
    async def update_comment(self, comment_id: int, user_id: str, data: CommentRequest) -> CommentView:
        comment = await self._owned(self._posts.get_comment, comment_id, user_id, "comment")
        comment.content = data.content
        await self._posts.save(comment)
        return project_comment(comment)

    @enveloped
    async def delete_comment(self, comment_id: int, user_id: str) -> str:
        comment = await self._owned(self._posts.get_comment, comment_id, user_id, "comment")
        await self._posts.delete(comment)
        return "comment deleted successfully"

    @enveloped
    async def like_comment(self, comment_id: int, user_id: str) -> LikeState:
        return await self._comment_likes.toggle(comment_id, user_id)

    @enveloped
    async def is_comment_liked(self, comment_id: int, user_id: str | None) -> bool:
        return await self._comment_likes.is_liked(comment_id, user_id)

    @enveloped
    async def liked_comments(self, comment_ids: Iterable[int], user_id: str | None) -> list[int]:
        return sorted(await self._comment_likes.liked_among(comment_ids, user_id))

    @enveloped
    async def get_post_comments(self, post_id: int, page: int = 1) -> Page[CommentView]:
        if await self._posts.get_post(post_id) is None:
            raise NotFoundError("post not found")
        size = settings.comments_page_size
        comments = await self._posts.post_comments(post_id, page, size)
        total = await self._posts.count_comments(post_id)
        return Page.build([project_comment(comment) for comment in comments], page, size, total)

    # ── Listings & feeds ────────────────────────────

    async def _posts_page(
        self,
        page: int,
        user_ids: Iterable[str] | None = None,
        kind: str | None = None,
        tag: DiscussionTag | None = None,
    ) -> Page[FeedEntry]:
        size = settings.posts_page_size
        posts = await self._posts.recent_posts(page, size, user_ids=user_ids, kind=kind, tag=tag)
        total = await self._posts.count_posts(user_ids=user_ids, kind=kind, tag=tag)
        return Page.build(self._feed.merge(posts), page, size, total)

    @enveloped
    async def get_feed(self, page: int = 1) -> Page[FeedEntry]:
        return await self._posts_page(page)

    @enveloped
    async def get_following_feed(self, user_ids: Iterable[str], page: int = 1) -> Page[FeedEntry]:
        ids = set(user_ids)
        if not ids:
            return Page.empty(page, settings.posts_page_size)
        return await self._posts_page(page, user_ids=ids)

    @enveloped
    async def get_reviews(self, page: int = 1) -> Page[ReviewView]:
        return await self._posts_page(page, kind="review")

    @enveloped
    async def get_playlists(self, page: int = 1) -> Page[PlaylistView]:
        return await self._posts_page(page, kind="playlist")

    @enveloped
    async def get_discussions(self, page: int = 1, tag: DiscussionTag | None = None) -> Page[DiscussionView]:
        return await self._posts_page(page, kind="discussion", tag=tag)

    # No users table: an unknown user simply has no posts
    @enveloped
    async def get_user_reviews(self, user_id: str, page: int = 1) -> Page[ReviewView]:
        return await self._posts_page(page, user_ids=[user_id], kind="review")

    @enveloped
    async def get_user_playlists(self, user_id: str, page: int = 1) -> Page[PlaylistView]:
        return await self._posts_page(page, user_ids=[user_id], kind="playlist")

    @enveloped
    async def get_user_discussions(self, user_id: str, page: int = 1) -> Page[DiscussionView]:
        return await self._posts_page(page, user_ids=[user_id], kind="discussion")

    # ── Recommendations ─────────────────────────────

    @enveloped
    async def get_recommended_genres(self, user_id: str, limit: int | None = None) -> list[GenreScoreView]:
        scores = await self._ledger.top_genres(user_id, limit or settings.recommended_genres_limit)
        return [GenreScoreView.model_validate(score) for score in scores]
