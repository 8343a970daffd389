"""FastAPI dependencies and response helpers."""

from fastapi import Depends, Header, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from readcircle.database import get_session
from readcircle.services.catalog import CatalogService
from readcircle.services.community import CommunityService
from readcircle.services.factory import build_catalog_service, build_community_service
from readcircle.services.result import ServiceResult


async def get_current_user_id(x_user_id: str = Header(min_length=1, max_length=64)) -> str:
    """Acting user id, set by the authenticating gateway in front of this service."""
    return x_user_id


async def get_optional_user_id(x_user_id: str | None = Header(default=None, max_length=64)) -> str | None:
    return x_user_id


def get_catalog_service(session: AsyncSession = Depends(get_session)) -> CatalogService:
    return build_catalog_service(session)


def get_community_service(session: AsyncSession = Depends(get_session)) -> CommunityService:
    return build_community_service(session)


def respond(outcome: ServiceResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize an envelope; failed results are 400s with the same body shape."""
    status_code = success_status if outcome.succeeded else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=status_code, content=jsonable_encoder(outcome))
