"""Completeness rule catalog.

Builds the rule groups for one line from its snapshot and classification.
Each function returns a rule or a ``RuleGroup`` (one group per camera); nothing
here counts or scores, that is left to ``linecomplete.rules.engine``.
"""

from __future__ import annotations

from typing import Any

from linecomplete.models import Camera, Classification, Equipment, Line, LineSnapshot
from linecomplete.rules.engine import ConditionalRule, FixedRule, Rule, RuleGroup

LINE_INFORMATION = "Line Information"
PROCESS_FLOW = "Process Flow"
POSITIONS_AND_EQUIPMENT = "Positions & Equipment"

RLE_TITLE = "RLE"
OP_TITLE = "OP"

_LINE_FIELDS: tuple[tuple[str, str], ...] = (
    ("Line Name", "line_name"),
    ("Min Speed", "min_speed"),
    ("Max Speed", "max_speed"),
    ("Line Description", "line_description"),
    ("Product Description", "product_description"),
    ("Photos URL", "photos_url"),
    ("Number of Products", "number_of_products"),
    ("Number of Artworks", "number_of_artworks"),
)

_MEASUREMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("Horizontal FOV", "horizontal_fov"),
    ("Working Distance", "working_distance"),
    ("Smallest Text", "smallest_text"),
)


def is_present(value: Any) -> bool:
    """Presence test: not None, not an empty string, not zero."""
    if value is None:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0
    return True


def line_information_rules(line: Line) -> RuleGroup:
    rules = tuple(
        FixedRule.check(is_present(getattr(line, attr)), label)
        for label, attr in _LINE_FIELDS
    )
    return RuleGroup(LINE_INFORMATION, rules)


def process_flow_rules(snapshot: LineSnapshot) -> RuleGroup:
    return RuleGroup(
        PROCESS_FLOW,
        (FixedRule.check(len(snapshot.positions) > 0, "At least 1 position required"),),
    )


def device_requirement_rule(equipment: Equipment, classification: Classification) -> FixedRule:
    """Presence of the device type the line's classification calls for."""
    has_camera = len(equipment.cameras) > 0
    has_iot = len(equipment.iot_devices) > 0

    if classification == Classification.VISION:
        return FixedRule.check(has_camera, f'"{equipment.name}" needs a camera (Vision)')
    if classification == Classification.IOT:
        return FixedRule.check(has_iot, f'"{equipment.name}" needs an IoT device')
    return FixedRule.check(
        has_camera or has_iot, f'"{equipment.name}" needs a camera or IoT device'
    )


def positions_and_equipment_rules(
    snapshot: LineSnapshot, classification: Classification
) -> RuleGroup:
    rules: list[Rule] = []

    for position in snapshot.positions:
        rules.append(
            FixedRule.check(
                len(position.equipment) > 0,
                f'Position "{position.name}" needs equipment',
            )
        )
        for equipment in position.equipment:
            rules.append(device_requirement_rule(equipment, classification))

    # Title checks run once per line, even with no positions at all
    rules.append(
        FixedRule.check(
            any(p.has_title(RLE_TITLE) for p in snapshot.positions),
            "RLE title must be assigned to a position",
        )
    )
    rules.append(
        FixedRule.check(
            any(p.has_title(OP_TITLE) for p in snapshot.positions),
            "OP title must be assigned to a position",
        )
    )

    return RuleGroup(POSITIONS_AND_EQUIPMENT, tuple(rules))


def _basic_info_rule(camera: Camera) -> FixedRule:
    missing = []
    if not camera.name:
        missing.append("Camera Name")
    if not camera.camera_type:
        missing.append("Camera Model")
    return FixedRule(passed=not missing, gaps=tuple(missing))


def _answered(value: bool | None, gap: str) -> FixedRule:
    return FixedRule.check(value is not None, gap)


def lighting_rule(camera: Camera) -> ConditionalRule:
    return ConditionalRule(
        guard=_answered(camera.light_required, "Confirm whether lighting is required"),
        unlock=camera.light_required is True,
        sub_rules=(
            FixedRule.check(
                bool(camera.light_id), "Light Model (required when lighting enabled)"
            ),
        ),
    )


def plc_rule(camera: Camera) -> ConditionalRule:
    return ConditionalRule(
        guard=_answered(camera.plc_attached, "Confirm whether PLC is required"),
        unlock=camera.plc_attached is True,
        sub_rules=(
            FixedRule.check(
                bool(camera.plc_master_id), "PLC Model (required when PLC enabled)"
            ),
            FixedRule.check(
                len(camera.relay_outputs) > 0,
                "At least 1 Relay Output (required when PLC enabled)",
            ),
        ),
    )


def hmi_rule(camera: Camera) -> FixedRule:
    return _answered(camera.hmi_required, "Confirm whether HMI is required")


def camera_rules(camera: Camera, equipment: Equipment) -> RuleGroup:
    rules: list[Rule] = [_basic_info_rule(camera)]

    for label, attr in _MEASUREMENT_FIELDS:
        rules.append(FixedRule.check(bool(getattr(camera, attr)), label))

    rules.extend(
        [
            FixedRule.check(len(camera.use_case_ids) > 0, "At least 1 Use Case"),
            FixedRule.check(len(camera.attributes) > 0, "At least 1 Attribute"),
            FixedRule.check(bool(camera.product_flow), "Product Flow Direction"),
            FixedRule.check(
                bool(camera.camera_view_description), "Camera View Description"
            ),
            lighting_rule(camera),
            plc_rule(camera),
            hmi_rule(camera),
            FixedRule.check(
                camera.placement_camera_can_fit is True, "Confirm camera can fit"
            ),
            FixedRule.check(
                camera.placement_fabrication_confirmed is True,
                "Confirm fabrication/bracketry with customer",
            ),
            FixedRule.check(
                camera.placement_fov_suitable is True,
                "Confirm FOV suitable for all artworks/product types",
            ),
            FixedRule.check(
                bool(camera.placement_position_description), "Position Description"
            ),
        ]
    )

    category = f'Camera "{camera.display_name}" on {equipment.name}'
    return RuleGroup(category, tuple(rules))


def build_rule_groups(
    line: Line, snapshot: LineSnapshot, classification: Classification
) -> list[RuleGroup]:
    """Every rule group for a line, in reporting order."""
    groups = [
        line_information_rules(line),
        process_flow_rules(snapshot),
        positions_and_equipment_rules(snapshot, classification),
    ]
    for position in snapshot.positions:
        for equipment in position.equipment:
            groups.extend(camera_rules(camera, equipment) for camera in equipment.cameras)
    return groups
