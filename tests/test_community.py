"""Community service: reviews, playlists, discussions, comments and feeds."""

import pytest
from sqlalchemy import insert

from readcircle.adapters.sql.ledger import SqlPointStore
from readcircle.adapters.sql.trending import SqlTrendingStore
from readcircle.api.schemas import (
    CommentRequest,
    DiscussionCreateRequest,
    DiscussionTag,
    DiscussionUpdateRequest,
    PlaylistCreateRequest,
    PlaylistUpdateRequest,
    ReviewCreateRequest,
    ReviewUpdateRequest,
)
from readcircle.config import settings
from readcircle.domain.errors import UnknownContentKindError
from readcircle.domain.models import Post
from readcircle.services.factory import build_community_service
from readcircle.services.feed import FeedMerger
from readcircle.services.projection import project_review

USER = "reader-1"


@pytest.fixture
def points(session):
    store = SqlPointStore(session)

    async def lookup(genre_id: int) -> int:
        return await store.points(USER, genre_id)

    return lookup


@pytest.fixture
def signals(session):
    return SqlTrendingStore(session).count


# ── Playlists ──────────────────────────────────────


async def test_playlist_round_trip_restores_points(community, library, points, signals):
    playlist = await community.add_playlist(USER, PlaylistCreateRequest(name="Summer"))
    assert playlist.succeeded
    assert playlist.result.books == []

    added = await community.add_books_to_playlist(playlist.result.id, USER, {library.dune})
    assert [b.id for b in added.result.books] == [library.dune]
    assert await points(library.scifi) == 1
    assert await points(library.classic) == 1
    assert await points(library.poetry) == 0
    assert await signals(library.dune) == 1

    removed = await community.remove_books_from_playlist(playlist.result.id, USER, {library.dune})
    assert removed.succeeded
    assert removed.result.books == []
    assert await points(library.scifi) == 0
    assert await points(library.classic) == 0
    # Removal records no trending signal
    assert await signals(library.dune) == 1


async def test_create_playlist_with_books_credits_genres(community, library, points, signals):
    result = await community.add_playlist(
        USER, PlaylistCreateRequest(name="Mix", description="All sorts", book_ids={library.dune, library.odes})
    )

    assert result.result.name == "Mix"
    assert [b.id for b in result.result.books] == sorted([library.dune, library.odes])
    assert await points(library.scifi) == 1
    assert await points(library.poetry) == 1
    assert await signals(library.odes) == 1


async def test_create_playlist_with_unknown_book_fails_cleanly(community, library, signals):
    result = await community.add_playlist(USER, PlaylistCreateRequest(name="Bad", book_ids={library.dune, 999}))

    assert not result.succeeded
    assert "books not found" in result.error_message
    assert await signals(library.dune) == 0
    assert (await community.get_feed()).result.data == []


async def test_adding_linked_book_again_changes_nothing(community, library, points, signals):
    playlist = await community.add_playlist(USER, PlaylistCreateRequest(name="Once", book_ids={library.dune}))

    again = await community.add_books_to_playlist(playlist.result.id, USER, {library.dune})

    assert not again.succeeded
    assert again.error_message == "books already exist"
    assert await points(library.scifi) == 1
    assert await signals(library.dune) == 1


async def test_removing_unlinked_book_changes_nothing(community, library, points):
    playlist = await community.add_playlist(USER, PlaylistCreateRequest(name="Empty"))

    result = await community.remove_books_from_playlist(playlist.result.id, USER, {library.dune})

    assert result.error_message == "no books to remove"
    assert await points(library.scifi) == 0


async def test_points_are_kept_per_user(community, library, points):
    other = await community.add_playlist("someone-else", PlaylistCreateRequest(name="Theirs", book_ids={library.dune}))
    await community.remove_books_from_playlist(other.result.id, "someone-else", {library.dune})

    assert await points(library.scifi) == 0


async def test_only_owner_changes_playlist(community, library):
    playlist = await community.add_playlist(USER, PlaylistCreateRequest(name="Mine"))

    result = await community.add_books_to_playlist(playlist.result.id, "intruder", {library.dune})

    assert not result.succeeded
    assert result.error_message == "this playlist isn't yours"


async def test_update_playlist_replaces_books(community, library, points, signals):
    playlist = await community.add_playlist(USER, PlaylistCreateRequest(name="Old", book_ids={library.dune}))

    updated = await community.update_playlist(
        playlist.result.id, USER, PlaylistUpdateRequest(name="New", book_ids={library.odes})
    )

    assert updated.result.name == "New"
    assert [b.id for b in updated.result.books] == [library.odes]
    assert await points(library.scifi) == 0
    assert await points(library.poetry) == 1
    assert await signals(library.odes) == 1


async def test_missing_playlist(community):
    result = await community.get_playlist(42)
    assert result.error_message == "playlist not found"


# ── Discussions ────────────────────────────────────


async def test_discussion_books_drive_points(community, library, points):
    discussion = await community.add_discussion(
        USER,
        DiscussionCreateRequest(title="Spice", content="Thoughts?", tag=DiscussionTag.NEWS, book_ids={library.dune}),
    )
    assert discussion.result.tag == DiscussionTag.NEWS
    assert await points(library.classic) == 1

    added = await community.add_books_to_discussion(discussion.result.id, USER, {library.odes})
    assert len(added.result.books) == 2

    await community.remove_books_from_discussion(discussion.result.id, USER, {library.dune, library.odes})
    assert await points(library.classic) == 0
    assert await points(library.poetry) == 0


async def test_create_discussion_with_unknown_book_fails_cleanly(community, library, points):
    result = await community.add_discussion(
        USER, DiscussionCreateRequest(title="Lost", content="x", book_ids={library.dune, 999})
    )

    assert not result.succeeded
    assert result.error_message == "books not found: [999]"
    assert await points(library.scifi) == 0
    assert (await community.get_discussions()).result.data == []


async def test_update_discussion(community, library):
    discussion = await community.add_discussion(USER, DiscussionCreateRequest(title="Draft", content="..."))

    updated = await community.update_discussion(
        discussion.result.id,
        USER,
        DiscussionUpdateRequest(title="Final", tag=DiscussionTag.ARTICLE, book_ids={library.odes}),
    )

    assert updated.result.title == "Final"
    assert updated.result.content == "..."
    assert updated.result.tag == DiscussionTag.ARTICLE
    assert [b.id for b in updated.result.books] == [library.odes]


async def test_only_owner_updates_discussion(community):
    discussion = await community.add_discussion(USER, DiscussionCreateRequest(title="Mine", content="x"))

    result = await community.update_discussion(discussion.result.id, "intruder", DiscussionUpdateRequest(title="Hi"))

    assert result.error_message == "this discussion isn't yours"


# ── Reviews ────────────────────────────────────────


async def test_review_credits_genres(community, library, points, signals):
    review = await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=5, content="Epic"))

    assert review.succeeded
    assert review.result.book.title == "Dune"
    assert await points(library.scifi) == 1
    assert await signals(library.dune) == 1


async def test_one_review_per_book(community, library):
    await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=5, content="Epic"))

    again = await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=1, content="Changed"))

    assert not again.succeeded
    assert again.error_message == "You already reviewed this book"


@pytest.mark.parametrize("rate", [-1, 6])
async def test_review_rate_out_of_range(community, library, rate, signals):
    result = await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=rate, content="?"))

    assert not result.succeeded
    assert result.error_message == "rate must be between 0 and 5"
    assert await signals(library.dune) == 0


async def test_review_of_missing_book(community):
    result = await community.add_review(USER, ReviewCreateRequest(book_id=999, rate=3, content="?"))
    assert result.error_message == "book not found"


async def test_update_review(community, library):
    review = await community.add_review(USER, ReviewCreateRequest(book_id=library.odes, rate=2, content="Hmm"))

    updated = await community.update_review(review.result.id, USER, ReviewUpdateRequest(rate=4))
    assert updated.result.rate == 4
    assert updated.result.content == "Hmm"

    invalid = await community.update_review(review.result.id, USER, ReviewUpdateRequest(rate=9))
    assert not invalid.succeeded

    forbidden = await community.update_review(review.result.id, "intruder", ReviewUpdateRequest(content="mine"))
    assert forbidden.error_message == "this review isn't yours"


# ── Posts & comments ───────────────────────────────


async def test_delete_post_checks_owner(community):
    discussion = await community.add_discussion(USER, DiscussionCreateRequest(title="Bye", content="x"))
    post_id = discussion.result.id

    assert (await community.delete_post(post_id, "intruder")).error_message == "this post isn't yours"
    assert (await community.delete_post(post_id, USER)).result == "post deleted successfully"
    assert (await community.get_discussion(post_id)).error_message == "discussion not found"
    assert (await community.delete_post(post_id, USER)).error_message == "post not found"


async def test_comment_lifecycle(community):
    discussion = await community.add_discussion(USER, DiscussionCreateRequest(title="Talk", content="x"))
    post_id = discussion.result.id

    first = await community.add_comment(post_id, "u2", CommentRequest(content="First!"))
    second = await community.add_comment(post_id, "u3", CommentRequest(content="Second"))
    assert first.result.post_id == post_id

    listing = await community.get_post_comments(post_id)
    assert [c.id for c in listing.result.data] == [first.result.id, second.result.id]
    assert listing.result.total_pages == 1

    edited = await community.update_comment(first.result.id, "u2", CommentRequest(content="Edited"))
    assert edited.result.content == "Edited"
    assert (await community.get_comment(first.result.id)).result.content == "Edited"

    forbidden = await community.delete_comment(first.result.id, "u3")
    assert forbidden.error_message == "this comment isn't yours"

    liked = await community.like_comment(second.result.id, "u2")
    assert liked.result.likes_count == 1
    assert (await community.is_comment_liked(second.result.id, "u2")).result is True
    assert (await community.is_comment_liked(first.result.id, "u2")).result is False
    assert (await community.is_comment_liked(second.result.id, None)).result is False
    ids = [first.result.id, second.result.id, 999]
    assert (await community.liked_comments(ids, "u2")).result == [second.result.id]
    assert (await community.liked_comments(ids, None)).result == []

    deleted = await community.delete_comment(first.result.id, "u2")
    assert deleted.result == "comment deleted successfully"
    assert (await community.get_comment(first.result.id)).error_message == "comment not found"


async def test_comment_on_missing_post(community):
    result = await community.add_comment(999, "u1", CommentRequest(content="Hello?"))
    assert result.error_message == "post not found"
    assert (await community.get_post_comments(999)).error_message == "post not found"


# ── Feeds & recommendations ────────────────────────


async def test_feed_merges_every_kind_newest_first(community, library):
    review = await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=4, content="Good"))
    playlist = await community.add_playlist("u2", PlaylistCreateRequest(name="List", book_ids={library.odes}))
    discussion = await community.add_discussion("u3", DiscussionCreateRequest(title="Chat", content="x"))

    feed = (await community.get_feed()).result.data

    assert [(entry.kind, entry.id) for entry in feed] == [
        ("discussion", discussion.result.id),
        ("playlist", playlist.result.id),
        ("review", review.result.id),
    ]
    assert [b.id for b in feed[1].books] == [library.odes]


async def test_following_feed_filters_authors(community, library):
    await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=4, content="Good"))
    await community.add_discussion("u2", DiscussionCreateRequest(title="Chat", content="x"))
    await community.add_playlist("u3", PlaylistCreateRequest(name="List"))

    feed = (await community.get_following_feed([USER, "u3"])).result.data
    assert [entry.kind for entry in feed] == ["playlist", "review"]
    assert (await community.get_following_feed([])).result.data == []


async def test_feed_pages_past_the_end_are_empty(community):
    await community.add_discussion(USER, DiscussionCreateRequest(title="Only", content="x"))
    assert len((await community.get_feed(page=0)).result.data) == 1
    assert (await community.get_feed(page=2)).result.data == []


async def test_feed_page_counts_every_post(community, monkeypatch):
    monkeypatch.setattr(settings, "posts_page_size", 2)
    for title in ("a", "b", "c"):
        await community.add_discussion(USER, DiscussionCreateRequest(title=title, content="x"))

    first = (await community.get_feed()).result
    assert (first.page_number, first.page_size, first.total_pages) == (1, 2, 2)
    assert [entry.title for entry in first.data] == ["c", "b"]

    last = (await community.get_feed(page=2)).result
    assert [entry.title for entry in last.data] == ["a"]
    assert last.total_pages == 2

    empty = (await community.get_following_feed([])).result
    assert (empty.total_pages, empty.data) == (0, [])


async def test_listings_by_kind(community, library):
    review = await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=4, content="Good"))
    playlist = await community.add_playlist("u2", PlaylistCreateRequest(name="List", book_ids={library.odes}))
    await community.add_discussion("u3", DiscussionCreateRequest(title="Chat", content="x"))

    reviews = (await community.get_reviews()).result
    assert [(entry.kind, entry.id) for entry in reviews.data] == [("review", review.result.id)]
    assert reviews.total_pages == 1

    playlists = (await community.get_playlists()).result
    assert [entry.id for entry in playlists.data] == [playlist.result.id]
    assert [b.id for b in playlists.data[0].books] == [library.odes]


async def test_discussions_filter_by_tag(community):
    news = await community.add_discussion(
        USER, DiscussionCreateRequest(title="Release", content="x", tag=DiscussionTag.NEWS)
    )
    chat = await community.add_discussion(USER, DiscussionCreateRequest(title="Chat", content="x"))

    everything = (await community.get_discussions()).result.data
    assert [entry.id for entry in everything] == [chat.result.id, news.result.id]

    only_news = (await community.get_discussions(tag=DiscussionTag.NEWS)).result
    assert [entry.id for entry in only_news.data] == [news.result.id]
    assert only_news.total_pages == 1
    assert (await community.get_discussions(tag=DiscussionTag.ARTICLE)).result.total_pages == 0


async def test_user_listings(community, library):
    mine = await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=4, content="Good"))
    await community.add_review("u2", ReviewCreateRequest(book_id=library.dune, rate=2, content="Meh"))
    playlist = await community.add_playlist(USER, PlaylistCreateRequest(name="List"))
    await community.add_discussion("u2", DiscussionCreateRequest(title="Chat", content="x"))

    assert [e.id for e in (await community.get_user_reviews(USER)).result.data] == [mine.result.id]
    assert [e.id for e in (await community.get_user_playlists(USER)).result.data] == [playlist.result.id]
    assert (await community.get_user_discussions(USER)).result.data == []

    stranger = await community.get_user_reviews("nobody")
    assert stranger.succeeded
    assert stranger.result.total_pages == 0


async def test_stored_kind_without_a_mapping_is_not_enveloped(community, session):
    await community.add_discussion(USER, DiscussionCreateRequest(title="Chat", content="x"))
    await session.execute(insert(Post.__table__).values(kind="poll", user_id=USER, like_count=0))

    with pytest.raises(UnknownContentKindError):
        await community.get_feed()
    with pytest.raises(UnknownContentKindError):
        await community.get_following_feed([USER])


async def test_single_post_of_unmapped_kind_is_not_enveloped(community, session):
    inserted = await session.execute(
        insert(Post.__table__).values(kind="poll", user_id=USER, like_count=0).returning(Post.__table__.c.id)
    )
    post_id = inserted.scalar_one()

    with pytest.raises(UnknownContentKindError):
        await community.delete_post(post_id, USER)


async def test_undisplayable_kind_is_not_enveloped(session, library):
    service = build_community_service(session, feed=FeedMerger({"review": project_review}))
    await service.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=4, content="Good"))
    await service.add_playlist(USER, PlaylistCreateRequest(name="List"))

    with pytest.raises(UnknownContentKindError):
        await service.get_feed()


async def test_recommended_genres(community, library):
    await community.add_review(USER, ReviewCreateRequest(book_id=library.dune, rate=4, content="Good"))
    await community.add_playlist(USER, PlaylistCreateRequest(name="Poems", book_ids={library.odes}))
    await community.add_discussion(USER, DiscussionCreateRequest(title="Sci", content="x", book_ids={library.dune}))

    top = (await community.get_recommended_genres(USER)).result

    # Ties are broken by genre id
    assert [(g.genre_id, g.points) for g in top] == [
        (library.scifi, 2),
        (library.classic, 2),
        (library.poetry, 1),
    ]
    assert len((await community.get_recommended_genres(USER, limit=1)).result) == 1
