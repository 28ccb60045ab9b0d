"""Queries for the lines of a solutions project."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linecomplete.db.models import SolutionsLineModel
from linecomplete.models import Line


async def fetch_project_lines(session: AsyncSession, project_id: str) -> list[Line]:
    """Get every line of a solutions project, ordered by name.

    Raises:
        SQLAlchemyError: If the query fails
    """
    stmt = (
        select(SolutionsLineModel)
        .where(SolutionsLineModel.solutions_project_id == project_id)
        .order_by(SolutionsLineModel.line_name)
    )
    result = await session.execute(stmt)

    return [
        Line(
            id=row.id,
            line_name=row.line_name,
            min_speed=row.min_speed,
            max_speed=row.max_speed,
            line_description=row.line_description,
            product_description=row.product_description,
            photos_url=row.photos_url,
            number_of_products=row.number_of_products,
            number_of_artworks=row.number_of_artworks,
        )
        for row in result.scalars().all()
    ]
