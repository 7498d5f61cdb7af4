from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from vidshare.web.app.config import Settings, get_settings
from vidshare.web.app.models import Base

settings = get_settings()

def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, pool_pre_ping=True)

def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Process-wide defaults, used by scripts and by apps built from the global settings.
engine = build_engine(settings)
AsyncSessionLocal = build_sessionmaker(engine)

async def get_db(request: Request) -> AsyncSession:
    """Session from the application's own sessionmaker (see ``create_app``)."""
    session_factory = getattr(request.app.state, "session_factory", AsyncSessionLocal)
    async with session_factory() as session:
        yield session

async def create_tables(bind: AsyncEngine = None):
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
