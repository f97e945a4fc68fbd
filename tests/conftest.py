"""
Test infrastructure for the Cards API.

Strategy
--------
- SQLite in-memory via aiosqlite replaces Postgres; StaticPool keeps every
  session on the one connection that holds the in-memory database.
- The app's get_db dependency is overridden so every request uses the test
  session factory rather than the production one.
- Tables are created before each test and dropped after, so each test
  starts from an empty database.
- Object storage is replaced by ``InMemoryBlobStore`` through the
  get_blob_store dependency override.  The fake records every call in
  order and can be told to fail deletes or uploads.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from cards_api.database import Base, get_db
from cards_api.dependencies import get_blob_store
from cards_api.exceptions import StorageError
from cards_api.main import app
from cards_api.middleware import install_query_counter
from cards_api.schemas import UploadedFile

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
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


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# In-memory blob store
# ---------------------------------------------------------------------------

class InMemoryBlobStore:
    """BlobStore fake keeping objects in a dict and logging calls in order."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_delete = False
        self.fail_upload = False

    async def upload_file(self, file: UploadedFile, key: str) -> None:
        self.calls.append(("upload", key))
        if self.fail_upload:
            raise StorageError("upload", key, "simulated outage")
        self.objects[key] = file.content

    async def delete_file(self, key: str) -> None:
        self.calls.append(("delete", key))
        if self.fail_delete:
            raise StorageError("delete", key, "simulated outage")
        if key not in self.objects:
            raise StorageError("delete", key, "object does not exist")
        del self.objects[key]

    async def get_presigned_url(self, key: str) -> str:
        self.calls.append(("presign", key))
        return f"https://blobs.test/{key}?X-Amz-Expires=3600"

    def ops(self, op: str) -> list[str]:
        """Keys passed to every call of *op*, in call order."""
        return [key for name, key in self.calls if name == op]


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
def blob_store() -> InMemoryBlobStore:
    """A fresh in-memory blob store, also wired into the app."""
    store = InMemoryBlobStore()
    app.dependency_overrides[get_blob_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_blob_store, None)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Yield a live AsyncSession for service-level tests."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(blob_store: InMemoryBlobStore) -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
