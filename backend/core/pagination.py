from typing import Optional

from fastapi import Query

from core.config import settings
from core.errors import InvalidInput
from schemas.pagination import PageParams


async def page_params(
    page: int = Query(0, description="Zero-based page index"),
    size: Optional[int] = Query(None, description="Page size"),
    sort_by: str = Query("name"),
    sort_dir: str = Query("asc", description="asc or desc"),
) -> PageParams:
    """Paging query parameters; bad values are reported as 400, not 422"""
    if size is None:
        size = settings.default_page_size
    if page < 0:
        raise InvalidInput("page must be >= 0")
    if size < 1:
        raise InvalidInput("size must be >= 1")
    if size > settings.max_page_size:
        raise InvalidInput(f"size must be at most {settings.max_page_size}")
    sort_dir = sort_dir.lower()
    if sort_dir not in ("asc", "desc"):
        raise InvalidInput("sort_dir must be 'asc' or 'desc'")
    return PageParams(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)
