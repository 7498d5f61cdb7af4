"""
Video search API endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any, Optional

from ..config import Settings
from ..db import get_db
from ..services.search_service import SearchService
from ..services.rate_limiter import search_rate_limit
from ..dependencies import get_app_settings

router = APIRouter(prefix="/videos/search", tags=["search"])

@router.get("", dependencies=[Depends(search_rate_limit)])
async def search_videos(
    q: Optional[str] = Query(None, description="Free-text query"),
    category: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    sort: Optional[str] = Query("createdAt", description="createdAt, views or relevance"),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Search and filter videos."""
    service = SearchService(db, settings)
    result = await service.search(
        query=q, category=category, year=year, sort=sort, page=page, limit=limit
    )
    return {
        "success": True,
        "data": result["items"],
        "pagination": result["pagination"],
        "filters": result["filters"],
    }

@router.get("/filters")
async def get_filter_options(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Categories, years and sort orders for building search controls."""
    service = SearchService(db, settings)
    return {"success": True, "data": await service.get_filter_options()}
