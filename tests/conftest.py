import uuid
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from vidshare.shared_lib.security import create_access_token
from vidshare.web.app.config import Settings
from vidshare.web.app.db import get_db
from vidshare.web.app.main import create_app
from vidshare.web.app.models import Base, User, Video


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET_KEY="test-secret-key",
        RATE_LIMIT_ENABLED=False,
        LOG_JSON=False,
        LEGACY_NATIVE_ID_LOOKUP=True,
    )


@pytest.fixture(scope="function")
async def db_session() -> AsyncSession:
    """
    Provide an in-memory database session for each test function.
    The database schema is created from scratch for each test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory for users."""
    async def _make(email: str = None, is_admin: bool = False, is_active: bool = True) -> User:
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        user = User(
            id=uuid.uuid4(),
            email=email,
            display_label=email.split("@")[0],
            is_admin=is_admin,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def make_video(db_session: AsyncSession):
    """Factory for videos; ``created_at`` can be pinned for ordering tests."""
    async def _make(video_id: str = "v1", **fields) -> Video:
        values = {
            "title": f"Video {video_id}",
            "description": "",
            "url": f"/media/{video_id}.mp4",
            "duration": "4:20",
            "category": "Music",
            "year": "2024",
            "view_count": 0,
            "likes_count": 0,
        }
        values.update(fields)
        video = Video(video_id=video_id, **values)
        db_session.add(video)
        await db_session.commit()
        await db_session.refresh(video)
        return video
    return _make


@pytest.fixture
async def test_user(make_user) -> User:
    return await make_user("test@example.com")


@pytest.fixture
async def another_user(make_user) -> User:
    return await make_user("another@example.com")


@pytest.fixture
async def test_video(make_video, test_user: User) -> Video:
    return await make_video("v1", owner_id=test_user.id, created_at=datetime(2024, 1, 1))


@pytest.fixture
def auth_headers(test_settings: Settings):
    """Bearer headers for a user, signed with the test secret."""
    def _headers(user: User) -> dict:
        token = create_access_token(
            user.id, test_settings.JWT_SECRET_KEY, email=user.email, is_admin=user.is_admin
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
async def app(db_session: AsyncSession, test_settings: Settings):
    """The API wired to the per-test database."""
    app = create_app(test_settings)

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver/api") as client:
        yield client


@pytest.fixture
def fake_redis():
    """Factory for a Redis stand-in whose pipeline reports ``count`` requests in the window."""
    def _make(count: int, oldest_score: float = None, error: Exception = None):
        oldest = [(b"member", oldest_score)] if oldest_score is not None else []
        pipe = MagicMock()
        pipe.__aenter__ = AsyncMock(return_value=pipe)
        pipe.__aexit__ = AsyncMock(return_value=False)
        if error is not None:
            pipe.execute = AsyncMock(side_effect=error)
        else:
            pipe.execute = AsyncMock(return_value=[0, 1, count, oldest, True])

        redis = MagicMock()
        redis.pipeline.return_value = pipe
        return redis
    return _make
