"""
Synapse API — Offset Pagination Helper
========================================

What:  Runs a filtered SELECT as one page plus a total count.
How:   The count wraps the filtered query (ordering stripped) in a subquery,
       so the same WHERE clauses drive both numbers. Relations are attached
       with selectinload options, which avoids the duplicate rows a joined
       eager load would produce under LIMIT/OFFSET.
Who:   Every service list_* method.

Query plan:
    SELECT count(*) FROM (<filtered query>) AS anon
    SELECT ... <filtered query> ORDER BY <sort>, id LIMIT :size OFFSET :offset
    SELECT ... WHERE <fk> IN (...)          (one per selectinload option)
"""

from typing import Any, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from synapse.schemas.common import Page

SchemaT = TypeVar("SchemaT", bound=BaseModel)


async def paginate(
    db: AsyncSession,
    query: Select,
    *,
    page: int,
    size: int,
    item_schema: Type[SchemaT],
    options: Sequence[Any] = (),
) -> Page[SchemaT]:
    """
    Executes `query` for the requested page.

    Args:
        db:           Async database session
        query:        Filtered and ordered SELECT of a single entity
        page:         1-based page number
        size:         Rows per page
        item_schema:  Pydantic model each row is validated into
        options:      Loader options (selectinload) for embedded relations

    Returns:
        Page envelope with data, page, size, total and total_pages
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    if total == 0:
        return Page[item_schema](data=[], page=page, size=size, total=0, total_pages=0)

    page_query = query.offset((page - 1) * size).limit(size)
    if options:
        page_query = page_query.options(*options)
    rows = (await db.execute(page_query)).scalars().all()

    return Page[item_schema](
        data=[item_schema.model_validate(row) for row in rows],
        page=page,
        size=size,
        total=total,
        total_pages=Page.count_pages(total, size),
    )
