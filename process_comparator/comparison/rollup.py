"""
Severity rollup helpers.

Nodes roll themselves up on construction (NodeResult.leaf / .branch); these
helpers recompute an existing tree, e.g. after a caller edits it.
"""

from typing import Iterable

from ..domain.results import DiffMessage, NodeResult, OccurrenceResult
from ..domain.severity import Severity, most_severe


def rollup_diffs(diffs: Iterable[DiffMessage]) -> Severity:
    """Most severe diff, IDENTICAL when there are none."""
    return most_severe(diff.severity for diff in diffs)


def rollup_occurrences(occurrences: Iterable[OccurrenceResult]) -> Severity:
    """Most severe effective occurrence severity, IDENTICAL when empty."""
    return most_severe(occurrence.effective_severity for occurrence in occurrences)


def rollup_children(children: Iterable[NodeResult]) -> Severity:
    """Most severe child severity, IDENTICAL when empty."""
    return most_severe(child.severity for child in children)


def recalculate(node: NodeResult) -> Severity:
    """
    Recompute severities bottom-up for a whole tree, in place.

    Remapped occurrence severities are kept.
    """
    if node.is_leaf:
        for occurrence in node.occurrences:
            occurrence.severity = rollup_diffs(occurrence.diffs)
        node.severity = rollup_occurrences(node.occurrences)
    else:
        for child in node.children:
            recalculate(child)
        node.severity = rollup_children(node.children)
    return node.severity
