"""Pydantic models for line configuration snapshots and completeness results.

Inputs mirror the JSON returned by the backend's ``get_line_full_data``
function. Lists that the backend returns as ``null`` are coerced to empty
lists so rule code can iterate without guards.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Classification(str, Enum):
    """Declared capability need of a line."""

    VISION = "vision"
    IOT = "iot"
    BOTH = "both"  # Default when no explicit classification exists


class LineTableKind(str, Enum):
    """Table a line id refers to when loading its snapshot."""

    SOLUTIONS = "solutions_lines"
    LEGACY = "lines"


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


class Line(BaseModel):
    """Line record with the scalar attributes scored under Line Information."""

    id: str
    line_name: str | None = None
    min_speed: float | None = None
    max_speed: float | None = None
    line_description: str | None = None
    product_description: str | None = None
    photos_url: str | None = None
    number_of_products: int | None = None
    number_of_artworks: int | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "5f0c1a2e-8d7b-4a52-9d1e-0d7c8e1f2a3b",
                "line_name": "Line 1",
                "min_speed": 120,
                "max_speed": 300,
                "line_description": "Bottling line, 4 heads",
                "product_description": "500ml PET bottles",
                "photos_url": "https://example.com/photos/line-1",
                "number_of_products": 6,
                "number_of_artworks": 14,
            }
        }


class PositionTitle(BaseModel):
    id: str | None = None
    title: str


class IotDevice(BaseModel):
    id: str | None = None
    name: str | None = None


class Camera(BaseModel):
    """Camera sensor attached to a piece of equipment."""

    id: str | None = None
    name: str | None = None
    camera_type: str | None = None  # Camera model
    mac_address: str | None = None

    # Measurements: numbers from the database, strings from form input
    horizontal_fov: float | str | None = None
    working_distance: float | str | None = None
    smallest_text: str | None = None

    use_case_ids: list[str] = Field(default_factory=list)
    attributes: list[Any] = Field(default_factory=list)

    # View
    product_flow: str | None = None
    camera_view_description: str | None = None

    # Tri-state confirmations: None means "not answered yet"
    light_required: bool | None = None
    light_id: str | None = None
    plc_attached: bool | None = None
    plc_master_id: str | None = None
    relay_outputs: list[Any] = Field(default_factory=list)
    hmi_required: bool | None = None

    # Placement
    placement_camera_can_fit: bool | None = None
    placement_fabrication_confirmed: bool | None = None
    placement_fov_suitable: bool | None = None
    placement_position_description: str | None = None

    @field_validator("use_case_ids", "attributes", "relay_outputs", mode="before")
    @classmethod
    def coerce_null_lists(cls, v: Any) -> Any:
        return _none_as_empty(v)

    @property
    def display_name(self) -> str:
        return self.name or self.mac_address or "Unnamed"


class Equipment(BaseModel):
    id: str | None = None
    name: str | None = None
    equipment_type: str | None = None
    cameras: list[Camera] = Field(default_factory=list)
    iot_devices: list[IotDevice] = Field(default_factory=list)

    @field_validator("cameras", "iot_devices", mode="before")
    @classmethod
    def coerce_null_lists(cls, v: Any) -> Any:
        return _none_as_empty(v)


class Position(BaseModel):
    id: str | None = None
    name: str | None = None
    position_titles: list[PositionTitle] = Field(default_factory=list)
    equipment: list[Equipment] = Field(default_factory=list)

    @field_validator("position_titles", "equipment", mode="before")
    @classmethod
    def coerce_null_lists(cls, v: Any) -> Any:
        return _none_as_empty(v)

    def has_title(self, title: str) -> bool:
        return any(t.title == title for t in self.position_titles)


class LineSnapshot(BaseModel):
    """Full nested hierarchy of one line: positions → equipment → sensors."""

    line_data: dict[str, Any] | None = Field(default=None, alias="lineData")
    positions: list[Position] = Field(default_factory=list)

    @field_validator("positions", mode="before")
    @classmethod
    def coerce_null_lists(cls, v: Any) -> Any:
        return _none_as_empty(v)

    class Config:
        populate_by_name = True


class LineGap(BaseModel):
    """Missing items for one category of a line."""

    category: str
    items: list[str]


class CompletenessResult(BaseModel):
    """Outcome of evaluating one line."""

    line_id: str
    is_complete: bool
    percentage: int
    gaps: list[LineGap] = Field(default_factory=list)

    @field_validator("percentage")
    @classmethod
    def validate_percentage(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("percentage must be between 0 and 100")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "line_id": "5f0c1a2e-8d7b-4a52-9d1e-0d7c8e1f2a3b",
                "is_complete": False,
                "percentage": 96,
                "gaps": [
                    {
                        "category": "Positions & Equipment",
                        "items": ["OP title must be assigned to a position"],
                    }
                ],
            }
        }


class ProjectCompleteness(BaseModel):
    """Batch view over every line of a project."""

    results: dict[str, CompletenessResult] = Field(default_factory=dict)
    loading: bool = False
    superseded: bool = False  # A newer run started before this one settled

    @property
    def all_complete(self) -> bool:
        return bool(self.results) and all(r.is_complete for r in self.results.values())
