from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from readcircle.api.schemas import AuthorCreateRequest, BookCreateRequest, GenreCreateRequest
from readcircle.domain.models import Base
from readcircle.services.catalog import CatalogService
from readcircle.services.community import CommunityService
from readcircle.services.factory import build_catalog_service, build_community_service

# In-memory database shared by every session of one test (override in CI with a real PG URL)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh schema per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def catalog(session: AsyncSession) -> CatalogService:
    return build_catalog_service(session)


@pytest.fixture
def community(session: AsyncSession) -> CommunityService:
    return build_community_service(session)


@pytest.fixture
async def library(catalog: CatalogService) -> SimpleNamespace:
    """
    Three genres, one author and two books:

    * ``dune`` belongs to ``scifi`` and ``classic``
    * ``odes`` belongs to ``poetry`` only
    """
    scifi = (await catalog.add_genre(GenreCreateRequest(name="Science Fiction"))).result
    classic = (await catalog.add_genre(GenreCreateRequest(name="Classic"))).result
    poetry = (await catalog.add_genre(GenreCreateRequest(name="Poetry"))).result
    author = (await catalog.add_author(AuthorCreateRequest(name="Frank Herbert"))).result

    dune = await catalog.add_book(
        BookCreateRequest(title="Dune", genre_ids={scifi.id, classic.id}, author_ids={author.id})
    )
    odes = await catalog.add_book(BookCreateRequest(title="Odes", genre_ids={poetry.id}))
    assert dune.succeeded and odes.succeeded

    return SimpleNamespace(
        scifi=scifi.id,
        classic=classic.id,
        poetry=poetry.id,
        author=author.id,
        dune=dune.result.id,
        odes=odes.result.id,
    )
