from datetime import datetime
from types import SimpleNamespace

import pytest

from readcircle.api.schemas import DiscussionView, PlaylistView, ReviewView
from readcircle.domain.errors import UnknownContentKindError
from readcircle.domain.models import Book, Discussion, Playlist, Review
from readcircle.services.feed import FeedMerger
from readcircle.services.projection import project_review

NOW = datetime(2024, 5, 1, 12, 0)


def _review() -> Review:
    return Review(
        id=1, user_id="u1", created_at=NOW, like_count=2,
        rate=4, content="Loved it", book=Book(id=7, title="Dune"),
    )


def _playlist() -> Playlist:
    return Playlist(
        id=2, user_id="u2", created_at=NOW, like_count=0,
        title="Summer", description=None, books=[Book(id=7, title="Dune")],
    )


def _discussion() -> Discussion:
    return Discussion(
        id=3, user_id="u3", created_at=NOW, like_count=0,
        title="Best opening line?", content="Go", tag="article", books=[],
    )


def test_merge_keeps_order_and_tags_each_entry():
    entries = FeedMerger().merge([_review(), _playlist(), _discussion()])

    assert [type(e) for e in entries] == [ReviewView, PlaylistView, DiscussionView]
    assert [e.kind for e in entries] == ["review", "playlist", "discussion"]
    assert entries[0].book.title == "Dune"
    assert entries[1].name == "Summer"
    assert [b.id for b in entries[1].books] == [7]
    assert entries[2].tag.value == "article"


def test_merge_of_nothing_is_empty():
    assert FeedMerger().merge([]) == []


def test_unknown_kind_is_rejected():
    with pytest.raises(UnknownContentKindError) as exc:
        FeedMerger().merge([_review(), SimpleNamespace(kind="poll")])
    assert exc.value.kind == "poll"


def test_missing_kind_is_rejected():
    with pytest.raises(UnknownContentKindError):
        FeedMerger().merge([object()])


def test_registry_decides_what_is_displayable():
    merger = FeedMerger({"review": project_review})
    assert len(merger.merge([_review()])) == 1
    with pytest.raises(UnknownContentKindError):
        merger.merge([_playlist()])
