"""Line classification resolution.

Maps line names to their declared capability (vision / iot / both) by walking
portal → factories → groups → group lines for a solutions project. Lookup
failures degrade to an empty mapping: an unclassified line is evaluated under
the ``both`` rule rather than blocking its evaluation.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from linecomplete.db.connection import SessionFactory, get_session
from linecomplete.db.models import (
    FactoryGroupLineModel,
    FactoryGroupModel,
    SolutionFactoryModel,
    SolutionPortalModel,
)
from linecomplete.errors import ClassificationLookupError
from linecomplete.models import Classification

logger = logging.getLogger(__name__)


def parse_classification(value: str | None) -> Classification:
    """Normalize a stored solution type, defaulting to ``both``."""
    if not value:
        return Classification.BOTH
    try:
        return Classification(value.strip().lower())
    except ValueError:
        logger.warning(f"Unknown solution type '{value}', treating as 'both'")
        return Classification.BOTH


class ClassificationResolver:
    """Resolves ``line name → Classification`` for a solutions project."""

    def __init__(self, session_factory: SessionFactory | None = None):
        self._session_factory = session_factory or get_session

    async def resolve(self, project_id: str) -> dict[str, Classification]:
        """Build the classification map for a project.

        Never raises: any lookup failure is logged and yields an empty mapping,
        which callers read as "every line is ``both``".
        """
        try:
            return await self.lookup(project_id)
        except ClassificationLookupError as e:
            logger.error(f"Classification lookup failed for project {project_id}: {e}")
            return {}
        except Exception as e:
            # Configuration or driver errors that SQLAlchemy does not wrap
            logger.error(
                f"Classification lookup failed for project {project_id}: {e}",
                exc_info=True,
            )
            return {}

    async def lookup(self, project_id: str) -> dict[str, Classification]:
        """Walk the lookup chain.

        Raises:
            ClassificationLookupError: If any query in the chain fails
        """
        try:
            async with self._session_factory() as session:
                return await self._walk_chain(session, project_id)
        except (SQLAlchemyError, OSError) as e:
            raise ClassificationLookupError(str(e)) from e

    async def _walk_chain(
        self, session: AsyncSession, project_id: str
    ) -> dict[str, Classification]:
        mapping: dict[str, Classification] = {}

        portal_id = (
            await session.execute(
                select(SolutionPortalModel.id)
                .where(SolutionPortalModel.solutions_project_id == project_id)
                .limit(1)
            )
        ).scalar_one_or_none()
        if portal_id is None:
            logger.debug(f"No portal for project {project_id}")
            return mapping

        factory_ids = (
            await session.execute(
                select(SolutionFactoryModel.id).where(
                    SolutionFactoryModel.portal_id == portal_id
                )
            )
        ).scalars().all()
        if not factory_ids:
            return mapping

        group_ids = (
            await session.execute(
                select(FactoryGroupModel.id).where(
                    FactoryGroupModel.factory_id.in_(factory_ids)
                )
            )
        ).scalars().all()
        if not group_ids:
            return mapping

        rows = (
            await session.execute(
                select(FactoryGroupLineModel.name, FactoryGroupLineModel.solution_type)
                .where(FactoryGroupLineModel.group_id.in_(group_ids))
            )
        ).all()

        for name, solution_type in rows:
            mapping[name] = parse_classification(solution_type)

        logger.info(f"Resolved {len(mapping)} line classifications for project {project_id}")
        return mapping
