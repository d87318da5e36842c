"""Process comparator - severity-ranked ER/AR comparison orchestration."""

from .comparison.orchestrator import ComparisonOrchestrator
from .domain import (
    ComparisonUnit,
    DiffMessage,
    Item,
    NodeKind,
    NodeResult,
    OccurrenceResult,
    Severity,
    UnitKind,
)
from .exceptions import EmptyBatchError, ProcessComparatorError

__all__ = [
    "ComparisonOrchestrator",
    "ComparisonUnit",
    "DiffMessage",
    "Item",
    "NodeKind",
    "NodeResult",
    "OccurrenceResult",
    "Severity",
    "UnitKind",
    "EmptyBatchError",
    "ProcessComparatorError",
]
