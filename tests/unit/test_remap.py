"""
Unit tests for result remapping (process_comparator/rules/remap.py)

Tests covering:
- FROM=TO rule parsing and malformed entries
- Rule application order (non-commutative)
- Occurrence diff rollup left untouched
"""

from process_comparator.domain.results import (
    DiffMessage,
    NodeKind,
    NodeResult,
    OccurrenceResult,
)
from process_comparator.domain.severity import Severity
from process_comparator.rules.remap import (
    apply_remap_rules,
    parse_remap_rule,
    parse_remap_rules,
)


def leaf(*severities):
    occurrences = [
        OccurrenceResult(
            ar=None,
            diffs=[DiffMessage(order_id=0, expected="", actual="", severity=severity)],
        )
        for severity in severities
    ]
    return NodeResult.leaf(id="p", kind=NodeKind.PARAMETER, occurrences=occurrences)


class TestParseRemapRule:
    """Tests for rule parsing."""

    def test_valid_rule(self):
        """Test FROM=TO parses into severities."""
        assert parse_remap_rule("SIMILAR=IDENTICAL") == (Severity.SIMILAR, Severity.IDENTICAL)

    def test_whitespace_and_case(self):
        """Test names are trimmed and case-insensitive."""
        assert parse_remap_rule(" changed = passed ") == (Severity.CHANGED, Severity.PASSED)

    def test_malformed_rules(self):
        """Test entries without '=' or with unknown names are rejected."""
        assert parse_remap_rule("SIMILAR") is None
        assert parse_remap_rule("SIMILAR=NOPE") is None
        assert parse_remap_rule("=IDENTICAL") is None

    def test_parse_many_skips_malformed(self):
        """Test malformed entries are skipped while order is kept."""
        parsed = parse_remap_rules(["A=B", "EXTRA=MISSED", "bad", "MISSED=FAILED"])
        assert parsed == [
            (Severity.EXTRA, Severity.MISSED),
            (Severity.MISSED, Severity.FAILED),
        ]


class TestApplyRemapRules:
    """Tests for apply_remap_rules()."""

    def test_matching_rule_changes_result(self):
        """Test a rule fires when the overall severity equals FROM."""
        result = apply_remap_rules(leaf(Severity.SIMILAR), ["SIMILAR=IDENTICAL"])

        assert result.severity is Severity.IDENTICAL
        assert result.occurrences[0].severity is Severity.SIMILAR
        assert result.occurrences[0].effective_severity is Severity.IDENTICAL

    def test_non_matching_rule_is_ignored(self):
        """Test a rule with a different FROM leaves the result alone."""
        result = apply_remap_rules(leaf(Severity.CHANGED), ["SIMILAR=IDENTICAL"])

        assert result.severity is Severity.CHANGED
        assert result.occurrences[0].remapped_severity is None

    def test_rules_are_chained_in_order(self):
        """Test a later rule sees the outcome of an earlier one."""
        result = apply_remap_rules(leaf(Severity.SIMILAR), ["SIMILAR=CHANGED", "CHANGED=PASSED"])
        assert result.severity is Severity.PASSED

    def test_order_matters(self):
        """Test reversing the same rules yields a different outcome."""
        result = apply_remap_rules(leaf(Severity.SIMILAR), ["CHANGED=PASSED", "SIMILAR=CHANGED"])
        assert result.severity is Severity.CHANGED

    def test_only_matching_occurrences_remapped(self):
        """Test occurrences below FROM keep their severity."""
        result = apply_remap_rules(
            leaf(Severity.IDENTICAL, Severity.SIMILAR), ["SIMILAR=PASSED"]
        )

        assert result.occurrences[0].remapped_severity is None
        assert result.occurrences[1].effective_severity is Severity.PASSED
        assert result.severity is Severity.PASSED

    def test_from_equals_to_is_noop(self):
        """Test FROM == TO leaves occurrences unmarked."""
        result = apply_remap_rules(leaf(Severity.SIMILAR), ["SIMILAR=SIMILAR"])

        assert result.severity is Severity.SIMILAR
        assert result.occurrences[0].remapped_severity is None

    def test_chained_rules_follow_remapped_occurrence(self):
        """Test a remapped occurrence can be remapped again by a later rule."""
        occurrences = [
            OccurrenceResult(
                ar=None,
                diffs=[DiffMessage(order_id=0, expected="", actual="", severity=Severity.MISSED)],
            )
        ]
        result = NodeResult.leaf(id="p", kind=NodeKind.PARAMETER, occurrences=occurrences)
        apply_remap_rules(result, ["MISSED=SIMILAR", "SIMILAR=IDENTICAL"])

        assert result.severity is Severity.IDENTICAL

    def test_branch_results_untouched(self):
        """Test remapping never applies to branch nodes."""
        branch = NodeResult.branch(id="s", kind=NodeKind.STEP, children=[leaf(Severity.SIMILAR)])
        apply_remap_rules(branch, ["SIMILAR=IDENTICAL"])

        assert branch.severity is Severity.SIMILAR
        assert branch.children[0].severity is Severity.SIMILAR

    def test_no_rules(self):
        """Test an empty rule list changes nothing."""
        assert apply_remap_rules(leaf(Severity.EXTRA), []).severity is Severity.EXTRA
