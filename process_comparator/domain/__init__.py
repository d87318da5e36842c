"""Domain model for ER/AR comparison."""

from .item import ComparisonUnit, ContentType, Item, UnitKind
from .results import (
    AlignmentEntry,
    DiffMessage,
    NodeKind,
    NodeResult,
    OccurrenceResult,
    StepRef,
)
from .severity import LEAST_SEVERE, SEVERITY_RANK, Severity, most_severe

__all__ = [
    "ComparisonUnit",
    "ContentType",
    "Item",
    "UnitKind",
    "AlignmentEntry",
    "DiffMessage",
    "NodeKind",
    "NodeResult",
    "OccurrenceResult",
    "StepRef",
    "LEAST_SEVERE",
    "SEVERITY_RANK",
    "Severity",
    "most_severe",
]
