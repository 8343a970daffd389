"""Engagement events fanned out to the recommendation ledger and trending tracker."""

import logging

from readcircle.domain.associations import RelationKind
from readcircle.ports.associations import AssociationPort
from readcircle.services.recommendation import RecommendationLedger
from readcircle.services.trending import TrendingTracker

logger = logging.getLogger(__name__)


class EngagementEvents:
    """
    Consequences of a user engaging with, or dropping, a book.

    Engaging (new review, book newly linked to a playlist or discussion)
    records a trending signal and credits every genre of the book. Dropping
    (book unlinked from a playlist or discussion) debits every genre and
    records no signal.
    """

    def __init__(
        self,
        associations: AssociationPort,
        ledger: RecommendationLedger,
        trending: TrendingTracker,
    ) -> None:
        self._associations = associations
        self._ledger = ledger
        self._trending = trending

    async def book_engaged(self, user_id: str, book_id: int) -> None:
        await self._trending.record_signal(book_id)
        genre_ids = await self._associations.member_ids(RelationKind.BOOK_GENRE, book_id)
        await self._ledger.credit(user_id, genre_ids)
        logger.info("User %s engaged with book %s (%d genres)", user_id, book_id, len(genre_ids))

    async def book_dropped(self, user_id: str, book_id: int) -> None:
        genre_ids = await self._associations.member_ids(RelationKind.BOOK_GENRE, book_id)
        await self._ledger.debit(user_id, genre_ids)
        logger.info("User %s dropped book %s (%d genres)", user_id, book_id, len(genre_ids))
