"""Comment routes."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from readcircle.api.dependencies import (
    get_community_service,
    get_current_user_id,
    get_optional_user_id,
    respond,
)
from readcircle.api.schemas import CommentRequest
from readcircle.services.community import CommunityService

router = APIRouter(tags=["Comments"])


@router.post("/posts/{post_id}/comments")
async def create_comment(
    post_id: int,
    data: CommentRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.add_comment(post_id, user_id, data), status.HTTP_201_CREATED)


@router.get("/posts/{post_id}/comments")
async def post_comments(
    post_id: int,
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_post_comments(post_id, page))


@router.get("/comments/liked")
async def liked_comments(
    ids: list[int] = Query(default=[]),
    user_id: str | None = Depends(get_optional_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    """Which of the given comments the acting user likes."""
    return respond(await service.liked_comments(ids, user_id))


@router.get("/comments/{comment_id}")
async def get_comment(
    comment_id: int,
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_comment(comment_id))


@router.put("/comments/{comment_id}")
async def update_comment(
    comment_id: int,
    data: CommentRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.update_comment(comment_id, user_id, data))


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: int,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.delete_comment(comment_id, user_id))


@router.post("/comments/{comment_id}/like")
async def like_comment(
    comment_id: int,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.like_comment(comment_id, user_id))


@router.get("/comments/{comment_id}/liked")
async def is_comment_liked(
    comment_id: int,
    user_id: str | None = Depends(get_optional_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.is_comment_liked(comment_id, user_id))
