"""Offset pagination over SQLAlchemy selects."""
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InvalidInput
from schemas.pagination import PageParams


def order_clause(params: PageParams, sortable: Dict[str, Any]):
    column = sortable.get(params.sort_by)
    if column is None:
        raise InvalidInput(
            f"Cannot sort by '{params.sort_by}'. Allowed: {', '.join(sorted(sortable))}"
        )
    return column.desc() if params.sort_dir == "desc" else column.asc()


async def fetch_page(
    session: AsyncSession,
    stmt: Select,
    params: PageParams,
    sortable: Dict[str, Any],
    options: Sequence[Any] = (),
) -> Tuple[List[Any], int]:
    """Run ``stmt`` for one page and return ``(rows, total)``."""
    total = await session.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    # Tie-break on the sort key so pages stay stable
    page_stmt = (
        stmt.options(*options)
        .order_by(order_clause(params, sortable), sortable["id"].asc())
        .offset(params.offset)
        .limit(params.size)
    )
    result = await session.execute(page_stmt)
    return list(result.scalars().all()), int(total or 0)
