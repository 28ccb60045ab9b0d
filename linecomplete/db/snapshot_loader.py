"""Configuration snapshot loading.

A line's full hierarchy (positions → equipment → cameras / IoT devices) is
assembled server-side by the ``get_line_full_data`` SQL function, so one
round trip returns everything the scorer needs.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import JSON, func, select
from sqlalchemy.exc import SQLAlchemyError

from linecomplete.db.connection import SessionFactory, get_session
from linecomplete.errors import SnapshotLoadError
from linecomplete.models import LineSnapshot, LineTableKind

logger = logging.getLogger(__name__)


class SnapshotLoader:
    """Loads one line's configuration snapshot per call. No retries."""

    def __init__(self, session_factory: SessionFactory | None = None):
        self._session_factory = session_factory or get_session

    async def fetch_raw(self, line_id: str, kind: LineTableKind) -> Any:
        """Run ``get_line_full_data`` and return its JSON payload as-is."""
        stmt = select(
            func.get_line_full_data(line_id, kind.value, type_=JSON)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar()

    async def load(
        self, line_id: str, kind: LineTableKind = LineTableKind.SOLUTIONS
    ) -> LineSnapshot:
        """Load and parse a line's snapshot.

        Args:
            line_id: Line identifier
            kind: Table the id belongs to

        Returns:
            Parsed LineSnapshot

        Raises:
            SnapshotLoadError: If the query fails, the line is unknown, or the
                payload does not parse
        """
        try:
            payload = await self.fetch_raw(line_id, kind)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Snapshot query failed for line {line_id}: {e}")
            raise SnapshotLoadError(line_id, f"query failed: {e}") from e

        if payload is None:
            raise SnapshotLoadError(line_id, "line not found")

        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise SnapshotLoadError(line_id, f"malformed JSON: {e}") from e

        try:
            snapshot = LineSnapshot.model_validate(payload)
        except ValidationError as e:
            raise SnapshotLoadError(line_id, f"invalid snapshot: {e}") from e

        logger.debug(
            f"Loaded snapshot for line {line_id} ({len(snapshot.positions)} positions)"
        )
        return snapshot
