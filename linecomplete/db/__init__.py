"""Read-only database access with async SQLAlchemy."""

from linecomplete.db.connection import SessionFactory, close_db, get_session
from linecomplete.db.line_queries import fetch_project_lines
from linecomplete.db.models import (
    Base,
    FactoryGroupLineModel,
    FactoryGroupModel,
    SolutionFactoryModel,
    SolutionPortalModel,
    SolutionsLineModel,
)
from linecomplete.db.snapshot_loader import SnapshotLoader

__all__ = [
    "Base",
    "SolutionsLineModel",
    "SolutionPortalModel",
    "SolutionFactoryModel",
    "FactoryGroupModel",
    "FactoryGroupLineModel",
    "SessionFactory",
    "SnapshotLoader",
    "close_db",
    "fetch_project_lines",
    "get_session",
]
