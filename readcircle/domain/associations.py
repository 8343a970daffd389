"""Relation kinds and identity-only member references."""

from dataclasses import dataclass
from enum import Enum


class RelationKind(str, Enum):
    """The many-to-many memberships the core reconciles."""

    BOOK_GENRE = "book_genre"
    BOOK_AUTHOR = "book_author"
    PLAYLIST_BOOK = "playlist_book"
    DISCUSSION_BOOK = "discussion_book"

    @property
    def member_label(self) -> str:
        """Plural noun for the member side, used in result messages."""
        return _MEMBER_LABELS[self]


_MEMBER_LABELS = {
    RelationKind.BOOK_GENRE: "genres",
    RelationKind.BOOK_AUTHOR: "authors",
    RelationKind.PLAYLIST_BOOK: "books",
    RelationKind.DISCUSSION_BOOK: "books",
}


@dataclass(frozen=True)
class MemberRef:
    """
    A member identified by id only.

    The core never loads the member row before linking it; the persistence
    adapter attaches the reference by id without creating a new member.
    """

    relation: RelationKind
    member_id: int
