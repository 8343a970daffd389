"""Compose services over the SQL adapters for one session."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.adapters.sql.associations import SqlAssociationAdapter
from readcircle.adapters.sql.ledger import SqlPointStore
from readcircle.adapters.sql.likes import comment_like_store, post_like_store
from readcircle.adapters.sql.repositories import SqlCatalogRepository, SqlCommunityRepository
from readcircle.adapters.sql.trending import SqlTrendingStore
from readcircle.config import settings
from readcircle.services.catalog import CatalogService
from readcircle.services.community import CommunityService
from readcircle.services.engagement import EngagementToggle
from readcircle.services.events import EngagementEvents
from readcircle.services.feed import FeedMerger
from readcircle.services.rating import RatingAggregator
from readcircle.services.recommendation import RecommendationLedger
from readcircle.services.trending import TrendingTracker


def build_trending_tracker(session: AsyncSession) -> TrendingTracker:
    return TrendingTracker(
        SqlTrendingStore(session),
        window=timedelta(days=settings.trending_window_days),
    )


def build_catalog_service(session: AsyncSession) -> CatalogService:
    return CatalogService(
        catalog=SqlCatalogRepository(session),
        associations=SqlAssociationAdapter(session),
        trending=build_trending_tracker(session),
        rating=RatingAggregator(settings.rating_scale),
    )


def build_community_service(session: AsyncSession, feed: FeedMerger | None = None) -> CommunityService:
    associations = SqlAssociationAdapter(session)
    ledger = RecommendationLedger(SqlPointStore(session))
    return CommunityService(
        posts=SqlCommunityRepository(session),
        catalog=SqlCatalogRepository(session),
        associations=associations,
        events=EngagementEvents(associations, ledger, build_trending_tracker(session)),
        ledger=ledger,
        post_likes=EngagementToggle(post_like_store(session), "post"),
        comment_likes=EngagementToggle(comment_like_store(session), "comment"),
        rating=RatingAggregator(settings.rating_scale),
        feed=feed,
    )
