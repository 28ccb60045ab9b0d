"""Line capability classification."""

from linecomplete.classification.resolver import (
    ClassificationResolver,
    parse_classification,
)

__all__ = ["ClassificationResolver", "parse_classification"]
