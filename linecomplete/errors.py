"""Exception hierarchy for the completeness engine."""

from __future__ import annotations


class CompletenessError(Exception):
    """Base class for completeness engine errors."""


class ClassificationLookupError(CompletenessError):
    """Raised when the portal → factory → group → line lookup chain fails.

    Never escapes ``ClassificationResolver.resolve``; the resolver degrades to an
    empty mapping so every line is evaluated as ``both``.
    """


class SnapshotLoadError(CompletenessError):
    """Raised when a line's configuration snapshot cannot be loaded."""

    def __init__(self, line_id: str, reason: str):
        super().__init__(f"Unable to load snapshot for line {line_id}: {reason}")
        self.line_id = line_id
        self.reason = reason


class ScoringInvariantViolation(CompletenessError):
    """Raised when a tally ends up with impossible counts."""
