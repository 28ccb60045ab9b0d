"""Line completeness scoring and batch evaluation."""

from linecomplete.completeness.orchestrator import (
    CompletenessOrchestrator,
    check_all_lines_complete,
)
from linecomplete.completeness.scorer import classification_for, evaluate_line

__all__ = [
    "CompletenessOrchestrator",
    "check_all_lines_complete",
    "classification_for",
    "evaluate_line",
]
