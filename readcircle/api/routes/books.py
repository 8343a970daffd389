"""Catalog routes: books, genres, authors and trending."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from readcircle.api.dependencies import get_catalog_service, respond
from readcircle.api.schemas import (
    AuthorCreateRequest,
    BookCreateRequest,
    GenreCreateRequest,
    MemberIdsRequest,
    ReviewSortField,
    SortDirection,
)
from readcircle.services.catalog import CatalogService

router = APIRouter(tags=["Catalog"])


@router.post("/genres")
async def create_genre(
    data: GenreCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.add_genre(data), status.HTTP_201_CREATED)


@router.post("/authors")
async def create_author(
    data: AuthorCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.add_author(data), status.HTTP_201_CREATED)


@router.post("/books")
async def create_book(
    data: BookCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.add_book(data), status.HTTP_201_CREATED)


@router.get("/books/trending")
async def trending_books(
    limit: int | None = Query(default=None, ge=1, le=100),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.get_trending_books(limit))


@router.get("/books/{book_id}")
async def get_book(
    book_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.get_book(book_id))


@router.delete("/books/{book_id}")
async def delete_book(
    book_id: int,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.delete_book(book_id))


@router.get("/books/{book_id}/reviews")
async def book_reviews(
    book_id: int,
    page: int = Query(default=1, ge=0),
    sort_by: ReviewSortField = Query(default=ReviewSortField.CREATED_AT),
    direction: SortDirection = Query(default=SortDirection.DESC),
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.get_book_reviews(book_id, page, sort_by, direction))


@router.post("/books/{book_id}/genres")
async def add_genres(
    book_id: int,
    data: MemberIdsRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.add_genres_to_book(book_id, data.ids))


@router.delete("/books/{book_id}/genres")
async def remove_genres(
    book_id: int,
    data: MemberIdsRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.remove_genres_from_book(book_id, data.ids))


@router.post("/books/{book_id}/authors")
async def add_authors(
    book_id: int,
    data: MemberIdsRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.add_authors_to_book(book_id, data.ids))


@router.delete("/books/{book_id}/authors")
async def remove_authors(
    book_id: int,
    data: MemberIdsRequest,
    service: CatalogService = Depends(get_catalog_service),
) -> JSONResponse:
    return respond(await service.remove_authors_from_book(book_id, data.ids))
