"""Shared listing helpers for marketplace routers."""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from libs.common.config import get_settings
from services.marketplace_service.schemas import Pagination
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

settings = get_settings()


@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, limit=limit)


async def paginate(
    db: AsyncSession, query: Select, params: PageParams
) -> tuple[list[Any], Pagination]:
    """Run ``query`` for one page and count the full result set."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.limit))
    items = list(result.scalars().unique().all())
    return items, Pagination.build(total, params.page, params.limit)


def ilike_any(term: str, *columns):
    """Case-insensitive substring match across any of ``columns``."""
    pattern = f"%{term.strip()}%"
    clause = columns[0].ilike(pattern)
    for column in columns[1:]:
        clause = clause | column.ilike(pattern)
    return clause
