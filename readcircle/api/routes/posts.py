"""Community post routes: reviews, playlists, discussions and likes."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from readcircle.api.dependencies import (
    get_community_service,
    get_current_user_id,
    get_optional_user_id,
    respond,
)
from readcircle.api.schemas import (
    DiscussionCreateRequest,
    DiscussionTag,
    DiscussionUpdateRequest,
    MemberIdsRequest,
    PlaylistCreateRequest,
    PlaylistUpdateRequest,
    ReviewCreateRequest,
    ReviewUpdateRequest,
)
from readcircle.services.community import CommunityService

router = APIRouter(tags=["Community"])


# ── Reviews ────────────────────────────────────────


@router.post("/reviews")
async def create_review(
    data: ReviewCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.add_review(user_id, data), status.HTTP_201_CREATED)


@router.get("/reviews/{review_id}")
async def get_review(
    review_id: int,
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_review(review_id))


@router.put("/reviews/{review_id}")
async def update_review(
    review_id: int,
    data: ReviewUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.update_review(review_id, user_id, data))


# ── Playlists ──────────────────────────────────────


@router.post("/playlists")
async def create_playlist(
    data: PlaylistCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.add_playlist(user_id, data), status.HTTP_201_CREATED)


@router.get("/playlists/{playlist_id}")
async def get_playlist(
    playlist_id: int,
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_playlist(playlist_id))


@router.put("/playlists/{playlist_id}")
async def update_playlist(
    playlist_id: int,
    data: PlaylistUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.update_playlist(playlist_id, user_id, data))


@router.post("/playlists/{playlist_id}/books")
async def add_playlist_books(
    playlist_id: int,
    data: MemberIdsRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.add_books_to_playlist(playlist_id, user_id, data.ids))


@router.delete("/playlists/{playlist_id}/books")
async def remove_playlist_books(
    playlist_id: int,
    data: MemberIdsRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.remove_books_from_playlist(playlist_id, user_id, data.ids))


# ── Discussions ────────────────────────────────────


@router.post("/discussions")
async def create_discussion(
    data: DiscussionCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.add_discussion(user_id, data), status.HTTP_201_CREATED)


@router.get("/discussions/{discussion_id}")
async def get_discussion(
    discussion_id: int,
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_discussion(discussion_id))


@router.put("/discussions/{discussion_id}")
async def update_discussion(
    discussion_id: int,
    data: DiscussionUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.update_discussion(discussion_id, user_id, data))


@router.post("/discussions/{discussion_id}/books")
async def add_discussion_books(
    discussion_id: int,
    data: MemberIdsRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.add_books_to_discussion(discussion_id, user_id, data.ids))


@router.delete("/discussions/{discussion_id}/books")
async def remove_discussion_books(
    discussion_id: int,
    data: MemberIdsRequest,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.remove_books_from_discussion(discussion_id, user_id, data.ids))


# ── Posts ──────────────────────────────────────────


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: int,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.delete_post(post_id, user_id))


@router.post("/posts/{post_id}/like")
async def like_post(
    post_id: int,
    user_id: str = Depends(get_current_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.like_post(post_id, user_id))


@router.get("/posts/{post_id}/liked")
async def is_post_liked(
    post_id: int,
    user_id: str | None = Depends(get_optional_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.is_post_liked(post_id, user_id))


@router.get("/posts/liked")
async def liked_posts(
    ids: list[int] = Query(default=[]),
    user_id: str | None = Depends(get_optional_user_id),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.liked_posts(ids, user_id))


# ── Listings ───────────────────────────────────────


@router.get("/reviews")
async def list_reviews(
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_reviews(page))


@router.get("/playlists")
async def list_playlists(
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_playlists(page))


@router.get("/discussions")
async def list_discussions(
    page: int = Query(default=1, ge=0),
    tag: DiscussionTag | None = Query(default=None),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_discussions(page, tag))


@router.get("/users/{user_id}/reviews")
async def user_reviews(
    user_id: str,
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_user_reviews(user_id, page))


@router.get("/users/{user_id}/playlists")
async def user_playlists(
    user_id: str,
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_user_playlists(user_id, page))


@router.get("/users/{user_id}/discussions")
async def user_discussions(
    user_id: str,
    page: int = Query(default=1, ge=0),
    service: CommunityService = Depends(get_community_service),
) -> JSONResponse:
    return respond(await service.get_user_discussions(user_id, page))
