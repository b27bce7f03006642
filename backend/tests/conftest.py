"""Test configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from memshelf.database import Base, get_db  # noqa: E402
from memshelf.main import app  # noqa: E402
from memshelf.models import Note, User, Workspace  # noqa: E402
from memshelf.services.auth import create_user  # noqa: E402
from memshelf.services.permissions import grant_permission  # noqa: E402


@pytest.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async client sharing the test session with the app."""

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {user.api_key}"}

    return _headers


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make(name: str = "user") -> User:
        user = await create_user(db_session, name)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_workspace(db_session: AsyncSession):
    """Create a workspace, optionally granting ``owner`` write access to it."""

    async def _make(name: str, owner: User | None = None) -> Workspace:
        workspace = Workspace(name=name)
        db_session.add(workspace)
        await db_session.flush()
        if owner is not None:
            await grant_permission(db_session, owner.id, workspace.id, can_write=True)
        await db_session.commit()
        return workspace

    return _make


@pytest.fixture
def grant(db_session: AsyncSession):
    async def _grant(user: User, workspace: Workspace, can_write: bool = False) -> None:
        await grant_permission(db_session, user.id, workspace.id, can_write=can_write)
        await db_session.commit()

    return _grant


@pytest.fixture
def make_note(db_session: AsyncSession):
    async def _make(workspace: Workspace, title: str = "note", content: str = "") -> Note:
        note = Note(workspace_id=workspace.id, title=title, content=content, version=1)
        db_session.add(note)
        await db_session.commit()
        await db_session.refresh(note)
        return note

    return _make


@pytest.fixture
async def alice(make_user) -> User:
    return await make_user("alice")


@pytest.fixture
async def bob(make_user) -> User:
    return await make_user("bob")
