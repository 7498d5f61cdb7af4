"""
Video search and ranking service.
"""
import logging
import math
from typing import Dict, Any, List, Optional

from sqlalchemy import select, func, and_, or_, desc, case, literal, true

from ..errors import ValidationError
from ..models import Video
from .base_service import BaseService
from .logging_service import get_engagement_logger
from .video_service import serialize_video

logger = get_engagement_logger()

SORT_CREATED_AT = "createdAt"
SORT_VIEWS = "views"
SORT_RELEVANCE = "relevance"
SORT_CHOICES = (SORT_CREATED_AT, SORT_VIEWS, SORT_RELEVANCE)

SORT_OPTIONS = [
    {"value": SORT_CREATED_AT, "label": "Latest"},
    {"value": SORT_VIEWS, "label": "Most Viewed"},
    {"value": SORT_RELEVANCE, "label": "Relevance"},
]

# Relevance weight per field a query term occurs in.
TITLE_WEIGHT = 3
CATEGORY_WEIGHT = 2
DESCRIPTION_WEIGHT = 1

# Largest OFFSET a 64-bit SQL integer can hold.
MAX_OFFSET = 2 ** 63 - 1


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SearchService(BaseService):
    """Filters the catalogue and orders it by recency, views or relevance."""

    async def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        year: Optional[str] = None,
        sort: Optional[str] = SORT_CREATED_AT,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Run a filtered, sorted, paginated search.

        The total is counted over the same filter before the page window is
        applied. ``filters`` in the result echoes what was actually applied,
        so ``relevance`` without a query is reported as ``createdAt``.
        """
        sort = _clean(sort) or SORT_CREATED_AT
        if sort not in SORT_CHOICES:
            raise ValidationError(
                f"Invalid sort '{sort}'. Expected one of: {', '.join(SORT_CHOICES)}",
                {"sort": sort},
            )

        if limit is None:
            limit = self.settings.SEARCH_PAGE_DEFAULT
        if page < 1:
            raise ValidationError("page must be at least 1", {"page": page})
        if limit < 1 or limit > self.settings.SEARCH_PAGE_MAX:
            raise ValidationError(
                f"limit must be between 1 and {self.settings.SEARCH_PAGE_MAX}", {"limit": limit}
            )
        if (page - 1) * limit > MAX_OFFSET:
            raise ValidationError("page is out of range", {"page": page})

        query = _clean(query)
        category = _clean(category)
        year = _clean(year)
        terms = query.split() if query else []

        conditions = []
        if terms:
            conditions.append(or_(*[self._term_matches(term) for term in terms]))
        if category:
            conditions.append(Video.category == category)
        if year:
            conditions.append(Video.year == year)
        where_clause = and_(*conditions) if conditions else true()

        count_result = await self.db.execute(
            select(func.count(Video.id)).where(where_clause)
        )
        total = count_result.scalar() or 0

        effective_sort = sort
        if sort == SORT_RELEVANCE and not terms:
            effective_sort = SORT_CREATED_AT

        if effective_sort == SORT_VIEWS:
            order_by = [desc(Video.view_count), desc(Video.created_at)]
        elif effective_sort == SORT_RELEVANCE:
            order_by = [desc(self._relevance_score(terms)), desc(Video.created_at)]
        else:
            order_by = [desc(Video.created_at)]
        order_by.append(desc(Video.id))

        result = await self.db.execute(
            select(Video)
            .where(where_clause)
            .order_by(*order_by)
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        videos = result.scalars().all()

        total_pages = math.ceil(total / limit) if total else 0
        filters = {
            "query": query,
            "category": category,
            "year": year,
            "sort": effective_sort,
        }

        logger.log_engagement_event(
            logging.INFO,
            "search_executed",
            message=f"Search returned {total} results",
            filters=filters,
            total=total,
        )

        return {
            "items": [serialize_video(video) for video in videos],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": total_pages,
                "hasMore": page < total_pages,
            },
            "filters": filters,
        }

    async def get_filter_options(self) -> Dict[str, Any]:
        """Distinct categories (lexical) and years (newest first) for building filter controls."""
        category_result = await self.db.execute(select(Video.category).distinct())
        categories = sorted(c for c in category_result.scalars().all() if c and c.strip())

        year_result = await self.db.execute(select(Video.year).distinct())
        years = [y for y in year_result.scalars().all() if y and y.strip()]
        years.sort(key=self._year_key, reverse=True)

        return {
            "categories": categories,
            "years": years,
            "sortOptions": [dict(option) for option in SORT_OPTIONS],
        }

    @staticmethod
    def _year_key(year: str) -> int:
        try:
            return int(year)
        except ValueError:
            return 0

    @staticmethod
    def _term_matches(term: str):
        pattern = _like_pattern(term)
        return or_(
            Video.title.ilike(pattern, escape="\\"),
            Video.description.ilike(pattern, escape="\\"),
            Video.category.ilike(pattern, escape="\\"),
        )

    @staticmethod
    def _relevance_score(terms: List[str]):
        score = literal(0)
        for term in terms:
            pattern = _like_pattern(term)
            score = score + case((Video.title.ilike(pattern, escape="\\"), TITLE_WEIGHT), else_=0)
            score = score + case((Video.category.ilike(pattern, escape="\\"), CATEGORY_WEIGHT), else_=0)
            score = score + case((Video.description.ilike(pattern, escape="\\"), DESCRIPTION_WEIGHT), else_=0)
        return score
