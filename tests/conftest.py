"""
Test infrastructure for the News App.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces every session to share the same in-memory database
  connection; a new connection would see an empty database.
- A fresh engine (and schema) is built per test, so each test starts from
  an empty ``posts`` table.
- Repository tests run twice, once against ``SQLPostRepository`` and once
  against ``InMemoryPostRepository``, so both honour the same contract.
- HTTP tests override the ``get_post_service`` dependency with a service
  wired to the test engine; Redis is never involved.
"""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from news_app.database import create_engine, create_schema, create_session_factory
from news_app.dependencies import get_post_service
from news_app.domain import Post
from news_app.domain.ids import new_id
from news_app.main import app
from news_app.repositories import InMemoryPostRepository, SQLPostRepository
from news_app.services import PostService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_post(index: int, title: str | None = None, content: str | None = None) -> Post:
    """Build a valid post whose ``created_at`` grows with *index*."""
    created = BASE_TIME + timedelta(minutes=index)
    return Post(
        id=new_id(),
        title=title if title is not None else f"Title {index}",
        content=content if content is not None else f"Body text for post number {index}",
        created_at=created,
        updated_at=created,
    )


async def seed_posts(repository, count: int) -> list[Post]:
    """Store posts titled "Title 1" .. "Title <count>", oldest first."""
    posts = [make_post(i) for i in range(1, count + 1)]
    for post in posts:
        await repository.create(post)
    return posts


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def engine():
    """Yield an engine bound to a fresh in-memory database with the schema created."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(params=["sql", "memory"])
async def repository(request, engine):
    """Each repository test runs against both implementations."""
    if request.param == "sql":
        return SQLPostRepository(create_session_factory(engine))
    return InMemoryPostRepository()


@pytest.fixture
def memory_repository() -> InMemoryPostRepository:
    return InMemoryPostRepository()


@pytest.fixture
def service(memory_repository) -> PostService:
    return PostService(memory_repository)


@pytest_asyncio.fixture
async def sql_service(engine) -> PostService:
    return PostService(SQLPostRepository(create_session_factory(engine)))


@pytest_asyncio.fixture
async def async_client(sql_service):
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport.

    ASGITransport does not run the lifespan, so the service normally built
    there is supplied through a dependency override instead.
    """
    app.dependency_overrides[get_post_service] = lambda: sql_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
