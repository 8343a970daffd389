"""Like toggling for posts and comments."""

import pytest

from readcircle.adapters.sql.likes import post_like_store
from readcircle.api.schemas import CommentRequest, DiscussionCreateRequest
from readcircle.domain.errors import NotFoundError
from readcircle.ports.likes import LikeState
from readcircle.services.engagement import EngagementToggle


@pytest.fixture
async def discussion_id(community):
    result = await community.add_discussion("author", DiscussionCreateRequest(title="Hello", content="First post"))
    return result.result.id


async def test_post_like_round_trip(community, discussion_id):
    liked = await community.like_post(discussion_id, "u1")
    assert liked.succeeded
    assert liked.result == LikeState(is_liked=True, likes_count=1)
    assert (await community.is_post_liked(discussion_id, "u1")).result is True

    unliked = await community.like_post(discussion_id, "u1")
    assert unliked.result == LikeState(is_liked=False, likes_count=0)
    assert (await community.is_post_liked(discussion_id, "u1")).result is False


async def test_like_count_tracks_distinct_users(community, discussion_id):
    await community.like_post(discussion_id, "u1")
    state = (await community.like_post(discussion_id, "u2")).result
    assert state == LikeState(is_liked=True, likes_count=2)

    state = (await community.like_post(discussion_id, "u1")).result
    assert state == LikeState(is_liked=False, likes_count=1)

    view = (await community.get_discussion(discussion_id)).result
    assert view.like_count == 1


async def test_like_missing_post_fails(community):
    result = await community.like_post(404, "u1")
    assert not result.succeeded
    assert result.error_message == "post not found"


async def test_anonymous_user_likes_nothing(community, discussion_id):
    await community.like_post(discussion_id, "u1")
    assert (await community.is_post_liked(discussion_id, None)).result is False
    assert (await community.liked_posts([discussion_id], None)).result == []


async def test_liked_posts_filters_to_liked_ids(community, discussion_id):
    other = await community.add_discussion("author", DiscussionCreateRequest(title="Second", content="More"))
    await community.like_post(other.result.id, "u1")

    result = await community.liked_posts([discussion_id, other.result.id, 999], "u1")
    assert result.result == [other.result.id]


async def test_comment_like_round_trip(community, discussion_id):
    comment = (await community.add_comment(discussion_id, "u2", CommentRequest(content="Nice"))).result

    assert (await community.like_comment(comment.id, "u1")).result == LikeState(is_liked=True, likes_count=1)
    assert (await community.like_comment(comment.id, "u1")).result == LikeState(is_liked=False, likes_count=0)

    missing = await community.like_comment(comment.id + 100, "u1")
    assert missing.error_message == "comment not found"


async def test_toggle_store_reports_missing_subject(session):
    toggle = EngagementToggle(post_like_store(session), "post")
    with pytest.raises(NotFoundError):
        await toggle.toggle(1, "u1")
