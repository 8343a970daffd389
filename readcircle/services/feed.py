"""Merging of reviews, playlists and discussions into one typed feed."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from readcircle.api.schemas import FeedEntry
from readcircle.domain.errors import UnknownContentKindError
from readcircle.services.projection import project_discussion, project_playlist, project_review

Projector = Callable[[Any], FeedEntry]

DEFAULT_PROJECTORS: Mapping[str, Projector] = {
    "review": project_review,
    "playlist": project_playlist,
    "discussion": project_discussion,
}


class FeedMerger:
    """
    Projects posts into feed entries by their ``kind`` tag.

    Input order is kept (the fetch already sorts by recency). There is no
    fallback projector: a kind missing from the registry is a contract
    violation and raises ``UnknownContentKindError``.
    """

    def __init__(self, projectors: Mapping[str, Projector] | None = None) -> None:
        self._projectors = dict(DEFAULT_PROJECTORS if projectors is None else projectors)

    def merge(self, posts: Iterable[Any]) -> list[FeedEntry]:
        entries: list[FeedEntry] = []
        for post in posts:
            kind = getattr(post, "kind", None)
            try:
                project = self._projectors[kind]
            except (KeyError, TypeError):
                raise UnknownContentKindError(kind) from None
            entries.append(project(post))
        return entries
