"""Feed and recommendation routes."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from readcircle.api.dependencies import get_community_service, get_current_user_id, respond
from readcircle.services.community import CommunityService

router = APIRouter(tags=["Feed"])


@router.get("/feed")
async def feed(
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    """Newest posts of every kind, as one tagged sequence."""
    return respond(await service.get_feed(page))


@router.get("/feed/following")
async def following_feed(
    user_ids: list[str] = Query(default=[]),
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    """Newest posts by the given users; the follow graph lives outside this service."""
    return respond(await service.get_following_feed(user_ids, page))


@router.get("/recommendations/genres")
async def recommended_genres(
    limit: int | None = Query(default=None, ge=1, le=50),
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    """The acting user's highest-scoring genres."""
    return respond(await service.get_recommended_genres(user_id, limit))
