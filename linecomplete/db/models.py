"""SQLAlchemy mappings for the tables the completeness engine reads.

The engine never writes to these tables; the mappings exist for typed queries
(and so tests can build them on SQLite).
"""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class SolutionsLineModel(Base):
    """Line configured under a solutions project."""

    __tablename__ = "solutions_lines"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    solutions_project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    line_name: Mapped[str] = mapped_column(Text, nullable=False)

    min_speed: Mapped[float | None] = mapped_column(Float)
    max_speed: Mapped[float | None] = mapped_column(Float)
    line_description: Mapped[str | None] = mapped_column(Text)
    product_description: Mapped[str | None] = mapped_column(Text)
    photos_url: Mapped[str | None] = mapped_column(Text)
    number_of_products: Mapped[int | None] = mapped_column(Integer)
    number_of_artworks: Mapped[int | None] = mapped_column(Integer)


class SolutionPortalModel(Base):
    """Customer portal; one per solutions project."""

    __tablename__ = "solution_portals"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    solutions_project_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    url: Mapped[str | None] = mapped_column(Text)


class SolutionFactoryModel(Base):
    __tablename__ = "solution_factories"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    portal_id: Mapped[str] = mapped_column(
        Text, ForeignKey("solution_portals.id"), nullable=False, index=True
    )
    name: Mapped[str | None] = mapped_column(Text)


class FactoryGroupModel(Base):
    __tablename__ = "factory_groups"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    factory_id: Mapped[str] = mapped_column(
        Text, ForeignKey("solution_factories.id"), nullable=False, index=True
    )
    name: Mapped[str | None] = mapped_column(Text)


class FactoryGroupLineModel(Base):
    """Line entry within a factory group; carries the line's solution type."""

    __tablename__ = "factory_group_lines"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    group_id: Mapped[str] = mapped_column(
        Text, ForeignKey("factory_groups.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    solution_type: Mapped[str | None] = mapped_column(Text)  # vision, iot, both
