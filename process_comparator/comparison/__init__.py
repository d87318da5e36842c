"""Comparison engine: alignment, flat and process comparison, batch execution."""

from .aligner import align_steps
from .batch_runner import BatchRunner, CompareTask, CompletionLatch, run_task, substitute_er
from .orchestrator import ComparisonOrchestrator
from .parameter import error_result, simple_compare
from .process import ProcessComparer
from .registry import Comparator, ComparatorRegistry, default_registry
from .rollup import recalculate

__all__ = [
    "align_steps",
    "BatchRunner",
    "CompareTask",
    "CompletionLatch",
    "run_task",
    "substitute_er",
    "ComparisonOrchestrator",
    "error_result",
    "simple_compare",
    "ProcessComparer",
    "Comparator",
    "ComparatorRegistry",
    "default_registry",
    "recalculate",
]
