"""Reporting helpers for comparison results."""

from .report import FAILURE_THRESHOLD, ResultReporter, flatten_results

__all__ = ["FAILURE_THRESHOLD", "ResultReporter", "flatten_results"]
