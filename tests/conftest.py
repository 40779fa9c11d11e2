"""
Test infrastructure for the rocket-fuel API.

Strategy
--------
- SQLite in-memory via aiosqlite stands in for Postgres, keeping the suite
  self-contained.
- StaticPool makes every session share the one in-memory connection;
  a second connection would see an empty database.
- Each test gets its own ``Container`` wired to the test session factory,
  a ``FakeChatWorkspace`` that records messages, and a ``CacheManager``
  that is never connected (no-op reads and writes).
- Notifications run as detached tasks.  Tests that post answers call
  ``container.notifications.drain()`` before touching the database again,
  since the tasks share the single test connection.
- All tables are created before each test and dropped after it.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from rocketfuel import models
from rocketfuel.cache import CacheManager
from rocketfuel.container import Container
from rocketfuel.database import Base
from rocketfuel.interfaces import ChatWorkspace
from rocketfuel.main import create_app
from rocketfuel.middleware import install_query_counter

OWNER_ID = 7
HELPER_ID = 9

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Chat workspace double
# ---------------------------------------------------------------------------

class FakeChatWorkspace(ChatWorkspace):
    """Records posted messages; set ``fail_with`` to make every call raise."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, list[dict]]] = []
        self.lookups: list[str] = []
        self.fail_with: Exception | None = None

    async def get_user_id(self, email: str) -> str:
        if self.fail_with:
            raise self.fail_with
        self.lookups.append(email)
        return f"U-{email}"

    async def post_message_as_bot_user(self, channel: str, blocks: list[dict]) -> None:
        if self.fail_with:
            raise self.fail_with
        self.messages.append((channel, blocks))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def chat_workspace() -> FakeChatWorkspace:
    return FakeChatWorkspace()


@pytest_asyncio.fixture
async def container(chat_workspace: FakeChatWorkspace) -> Container:
    container = Container.build(
        async_session_test,
        chat_workspace=chat_workspace,
        cache=CacheManager(),
    )
    yield container
    await container.notifications.drain(timeout=5)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live session for seeding rows and asserting on them directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def users(db_session: AsyncSession) -> dict[int, models.User]:
    """The question owner (id 7, a@x) and a helper who answers (id 9, b@x)."""
    owner = models.User(id=OWNER_ID, name="Olivia Owner", email="a@x")
    helper = models.User(id=HELPER_ID, name="Harry Helper", email="b@x")
    db_session.add_all([owner, helper])
    await db_session.commit()
    return {OWNER_ID: owner, HELPER_ID: helper}


@pytest_asyncio.fixture
async def async_client(container: Container) -> AsyncClient:
    """An httpx.AsyncClient wired to an app built around the test container."""
    transport = ASGITransport(app=create_app(container))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fetch():
    """Load a row by primary key through a fresh session (no stale identity map)."""

    async def _fetch(model, pk):
        async with async_session_test() as session:
            return await session.get(model, pk)

    return _fetch
