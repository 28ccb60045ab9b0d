"""Pytest configuration and fixtures for linecomplete tests.

Provides a fully configured line and factories for snapshots so each test
only spells out the fields it cares about.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from linecomplete.config import reset_config
from linecomplete.models import Camera, Line, LineSnapshot


@pytest.fixture
def test_project_id() -> str:
    """Test solutions project ID."""
    return "test-project"


@pytest.fixture
def complete_line() -> Line:
    """Line with every Line Information field filled in."""
    return Line(
        id="line-1",
        line_name="Line 1",
        min_speed=120,
        max_speed=300,
        line_description="Bottling line, 4 heads",
        product_description="500ml PET bottles",
        photos_url="https://example.com/photos/line-1",
        number_of_products=6,
        number_of_artworks=14,
    )


@pytest.fixture
def complete_camera_data() -> dict[str, Any]:
    """Camera payload that passes every camera check (no cascades unlocked)."""
    return {
        "id": "cam-1",
        "name": "Cam 1",
        "camera_type": "Basler ace 2",
        "mac_address": "00:11:22:33:44:55",
        "horizontal_fov": "300mm",
        "working_distance": "500mm",
        "smallest_text": "2mm",
        "use_case_ids": ["uc-ocr"],
        "attributes": [{"id": "attr-1", "title": "Best before date"}],
        "product_flow": "left_to_right",
        "camera_view_description": "Top-down over the labeller exit",
        "light_required": False,
        "plc_attached": False,
        "hmi_required": False,
        "placement_camera_can_fit": True,
        "placement_fabrication_confirmed": True,
        "placement_fov_suitable": True,
        "placement_position_description": "Bracket above conveyor, 40cm after labeller",
    }


@pytest.fixture
def make_camera(complete_camera_data) -> Callable[..., Camera]:
    """Build a camera from the complete payload with overrides."""

    def _make(**overrides: Any) -> Camera:
        return Camera.model_validate({**complete_camera_data, **overrides})

    return _make


@pytest.fixture
def make_snapshot(complete_camera_data) -> Callable[..., LineSnapshot]:
    """Build a one-position, one-equipment snapshot.

    Args (keyword):
        titles: Position role tags (default RLE and OP)
        cameras: Camera payloads (default one complete camera)
        iot_devices: IoT device payloads (default none)
    """

    def _make(
        titles: tuple[str, ...] = ("RLE", "OP"),
        cameras: list[dict[str, Any]] | None = None,
        iot_devices: list[dict[str, Any]] | None = None,
    ) -> LineSnapshot:
        if cameras is None:
            cameras = [complete_camera_data]
        return LineSnapshot.model_validate(
            {
                "lineData": {"id": "line-1"},
                "positions": [
                    {
                        "id": "pos-1",
                        "name": "Labeller",
                        "position_titles": [
                            {"id": f"title-{t}", "title": t} for t in titles
                        ],
                        "equipment": [
                            {
                                "id": "eq-1",
                                "name": "Labeller Exit",
                                "cameras": cameras,
                                "iot_devices": iot_devices or [],
                            }
                        ],
                    }
                ],
            }
        )

    return _make


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    reset_config()
    yield
    reset_config()
