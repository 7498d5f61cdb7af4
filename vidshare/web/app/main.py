from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from vidshare.web.app import db
from vidshare.web.app.config import Settings, get_settings
from vidshare.web.app.middleware.error_handlers import register_exception_handlers
from vidshare.web.app.services.logging_service import LoggingMiddleware, get_logger, setup_logging

# Import API routes
from vidshare.web.app.api import (
    search, videos, video_likes, video_comments, playlists, stats
)

logger = get_logger("app")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application; tests pass their own settings."""
    settings = settings or get_settings()

    # Reuse the process-wide engine unless these settings point elsewhere.
    owns_engine = settings.DATABASE_URL != db.settings.DATABASE_URL
    db_engine = db.build_engine(settings) if owns_engine else db.engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL, settings.LOG_JSON, settings.LOG_DIR)
        if settings.RATE_LIMIT_ENABLED and getattr(app.state, "redis", None) is None:
            app.state.redis = Redis.from_url(settings.REDIS_URL)
        logger.info(f"{settings.APP_NAME} {settings.VERSION} started")
        yield
        redis = getattr(app.state, "redis", None)
        if redis is not None:
            await redis.aclose()
        if owns_engine:
            await db_engine.dispose()
        logger.info(f"{settings.APP_NAME} stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Video sharing API: views, likes, comments, playlists and search.",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db_engine = db_engine
    app.state.session_factory = db.build_sessionmaker(db_engine)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # API routes; search must precede /videos/{video_id}
    app.include_router(search.router, prefix="/api")
    app.include_router(videos.router, prefix="/api")
    app.include_router(video_likes.router, prefix="/api")
    app.include_router(video_comments.router, prefix="/api")
    app.include_router(playlists.router, prefix="/api")
    app.include_router(stats.router, prefix="/api")

    @app.get("/")
    async def root():
        return {"service": settings.APP_NAME, "version": settings.VERSION, "docs": app.docs_url}

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "web", "version": settings.VERSION}

    return app


app = create_app()
