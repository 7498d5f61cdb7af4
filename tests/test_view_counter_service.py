"""
Tests for the view counter service.
"""
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.web.app.errors import NotFoundError
from vidshare.web.app.models import Video
from vidshare.web.app.services.view_counter_service import ViewCounterService


class TestViewCounterService:
    """Test view counting."""

    async def test_first_view(self, db_session: AsyncSession, test_video: Video, test_settings):
        service = ViewCounterService(db_session, test_settings)

        result = await service.increment_view("v1")

        assert result == {"views": "1"}

    async def test_sequential_increments_are_exact(self, db_session: AsyncSession, test_video: Video, test_settings):
        service = ViewCounterService(db_session, test_settings)

        for _ in range(25):
            result = await service.increment_view("v1")

        assert result == {"views": "25"}
        await db_session.refresh(test_video)
        assert test_video.view_count == 25

    async def test_formats_large_counts(self, db_session: AsyncSession, make_video, test_settings):
        await make_video("popular", view_count=1199)
        service = ViewCounterService(db_session, test_settings)

        result = await service.increment_view("popular")

        assert result == {"views": "1.2K"}

    async def test_unknown_video(self, db_session: AsyncSession, test_settings):
        service = ViewCounterService(db_session, test_settings)

        with pytest.raises(NotFoundError) as exc_info:
            await service.increment_view("missing")

        assert "missing" in exc_info.value.message

    async def test_legacy_native_id_lookup(self, db_session: AsyncSession, test_video: Video, test_settings):
        service = ViewCounterService(db_session, test_settings)

        result = await service.increment_view(str(test_video.id))

        assert result == {"views": "1"}

    async def test_native_id_lookup_disabled(self, db_session: AsyncSession, test_video: Video, test_settings):
        settings = test_settings.model_copy(update={"LEGACY_NATIVE_ID_LOOKUP": False})
        service = ViewCounterService(db_session, settings)

        with pytest.raises(NotFoundError):
            await service.increment_view(str(test_video.id))

    async def test_unknown_native_id(self, db_session: AsyncSession, test_settings):
        service = ViewCounterService(db_session, test_settings)

        with pytest.raises(NotFoundError):
            await service.increment_view(str(uuid.uuid4()))
