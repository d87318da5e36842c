"""
Unit tests for severity rollup helpers (process_comparator/comparison/rollup.py)
"""

from process_comparator.comparison.rollup import (
    recalculate,
    rollup_children,
    rollup_diffs,
    rollup_occurrences,
)
from process_comparator.domain.results import (
    DiffMessage,
    NodeKind,
    NodeResult,
    OccurrenceResult,
)
from process_comparator.domain.severity import Severity


def diff(severity):
    return DiffMessage(order_id=0, expected="", actual="", severity=severity)


class TestRollupHelpers:
    """Tests for the per-level rollup helpers."""

    def test_rollup_diffs(self):
        """Test diff rollup picks the most severe diff."""
        assert rollup_diffs([diff(Severity.SIMILAR), diff(Severity.EXTRA)]) is Severity.EXTRA
        assert rollup_diffs([]) is Severity.IDENTICAL

    def test_rollup_occurrences_uses_effective_severity(self):
        """Test occurrence rollup honours remapped severities."""
        occurrence = OccurrenceResult(ar=None, diffs=[diff(Severity.CHANGED)])
        occurrence.remapped_severity = Severity.PASSED

        assert rollup_occurrences([occurrence]) is Severity.PASSED
        assert rollup_occurrences([]) is Severity.IDENTICAL

    def test_rollup_children(self):
        """Test child rollup."""
        children = [
            NodeResult.branch(id="a", kind=NodeKind.STEP, children=[]),
            NodeResult.leaf(
                id="b",
                kind=NodeKind.STEP,
                occurrences=[OccurrenceResult(ar=None, diffs=[diff(Severity.AR_MISSED)])],
            ),
        ]
        assert rollup_children(children) is Severity.AR_MISSED


class TestRecalculate:
    """Tests for recalculate()."""

    def test_recalculates_after_edit(self):
        """Test a diff added after construction propagates to the root."""
        occurrence = OccurrenceResult(ar=None, diffs=[])
        parameter = NodeResult.leaf(id="p", kind=NodeKind.PARAMETER, occurrences=[occurrence])
        step = NodeResult.branch(id="s", kind=NodeKind.STEP, children=[parameter])
        root = NodeResult.branch(id="t", kind=NodeKind.TESTCASE, children=[step])
        assert root.severity is Severity.IDENTICAL

        occurrence.diffs.append(diff(Severity.MISSED))

        assert recalculate(root) is Severity.MISSED
        assert step.severity is Severity.MISSED
        assert occurrence.severity is Severity.MISSED

    def test_keeps_remapped_severity(self):
        """Test recalculation does not discard remapping."""
        occurrence = OccurrenceResult(ar=None, diffs=[diff(Severity.SIMILAR)])
        occurrence.remapped_severity = Severity.IDENTICAL
        parameter = NodeResult.leaf(id="p", kind=NodeKind.PARAMETER, occurrences=[occurrence])

        assert recalculate(parameter) is Severity.IDENTICAL
        assert occurrence.severity is Severity.SIMILAR
