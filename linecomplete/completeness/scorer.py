"""Per-line completeness scoring.

``evaluate_line`` is pure and synchronous: it builds the rule groups for one
line, interprets them, and turns the tally into a ``CompletenessResult``.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from linecomplete.errors import SnapshotLoadError
from linecomplete.models import (
    Classification,
    CompletenessResult,
    Line,
    LineGap,
    LineSnapshot,
)
from linecomplete.rules.catalog import build_rule_groups
from linecomplete.rules.engine import evaluate_groups

logger = structlog.get_logger(__name__)

DATA_CATEGORY = "Data"
ERROR_CATEGORY = "Error"
LOAD_FAILED_GAP = "Unable to load line configuration"
EVALUATION_FAILED_GAP = "Failed to evaluate completeness"


def classification_for(
    line_name: str | None, classification_map: Mapping[str, Classification]
) -> Classification:
    """Classification of a line by name, ``both`` when it has none."""
    if line_name is None:
        return Classification.BOTH
    return classification_map.get(line_name, Classification.BOTH)


def degraded_result(line_id: str, category: str, message: str) -> CompletenessResult:
    """0% result carrying a single explanatory gap."""
    return CompletenessResult(
        line_id=line_id,
        is_complete=False,
        percentage=0,
        gaps=[LineGap(category=category, items=[message])],
    )


def evaluate_line(
    line: Line,
    snapshot: LineSnapshot | SnapshotLoadError | None,
    classification: Classification = Classification.BOTH,
) -> CompletenessResult:
    """Score one line's configuration.

    Args:
        line: Line record (scalar attributes)
        snapshot: Loaded hierarchy, or the load error / ``None`` when loading failed
        classification: Capability classification controlling the device rule

    Returns:
        CompletenessResult; degraded to 0% with a ``Data`` gap when the snapshot
        is missing, or an ``Error`` gap when the walk itself raised.
    """
    if not isinstance(snapshot, LineSnapshot):
        return degraded_result(line.id, DATA_CATEGORY, LOAD_FAILED_GAP)

    try:
        groups = build_rule_groups(line, snapshot, classification)
        tally, gaps = evaluate_groups(groups)
    except Exception:
        logger.error("line_evaluation_failed", line_id=line.id, exc_info=True)
        return degraded_result(line.id, ERROR_CATEGORY, EVALUATION_FAILED_GAP)

    logger.debug(
        "line_evaluated",
        line_id=line.id,
        classification=classification.value,
        passed=tally.passed,
        total=tally.total,
    )

    return CompletenessResult(
        line_id=line.id,
        is_complete=tally.is_complete,
        percentage=tally.percentage,
        gaps=gaps,
    )
