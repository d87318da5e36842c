"""
Result remapping ("changeResult" rules).

Each rule has the form FROM=TO. Rules run in configured order against a
flat parameter result; a rule fires only when the result's current overall
severity is FROM, so the outcome depends on rule order.
"""

from typing import Iterable, List, Optional, Tuple

from ..domain.results import NodeResult
from ..domain.severity import Severity, most_severe
from ..utils.logger import get_logger

logger = get_logger(__name__)


def parse_remap_rule(rule: str) -> Optional[Tuple[Severity, Severity]]:
    """
    Parse one FROM=TO entry.

    Returns:
        (from, to) severities, or None for malformed entries

    Example:
        >>> parse_remap_rule(" similar = identical ")
        (<Severity.SIMILAR: 'SIMILAR'>, <Severity.IDENTICAL: 'IDENTICAL'>)
        >>> parse_remap_rule("SIMILAR") is None
        True
    """
    if "=" not in rule:
        return None
    from_name, _, to_name = rule.partition("=")
    from_severity = Severity.parse(from_name)
    to_severity = Severity.parse(to_name)
    if from_severity is None or to_severity is None:
        return None
    return from_severity, to_severity


def parse_remap_rules(rules: Iterable[str]) -> List[Tuple[Severity, Severity]]:
    """Parse entries in order, skipping malformed ones."""
    parsed = []
    for rule in rules:
        pair = parse_remap_rule(rule)
        if pair is None:
            logger.debug(
                f"Skipping malformed result remap rule '{rule}'",
                operation="parse_remap_rules",
            )
            continue
        parsed.append(pair)
    return parsed


def apply_remap_rules(result: NodeResult, rules: Iterable[str]) -> NodeResult:
    """
    Apply FROM=TO rules to a leaf result in place.

    When a rule fires, every occurrence whose effective severity is FROM is
    given effective severity TO and the overall severity is recomputed from
    the effective severities. Occurrence `severity` (the diff rollup) is
    never changed.

    Args:
        result: Leaf NodeResult of a flat comparison
        rules: Raw rule entries in configured order

    Returns:
        The same result, for chaining
    """
    if not result.is_leaf:
        return result

    for from_severity, to_severity in parse_remap_rules(rules):
        if from_severity == to_severity or result.severity != from_severity:
            continue

        for occurrence in result.occurrences:
            if occurrence.effective_severity == from_severity:
                occurrence.remapped_severity = to_severity

        previous = result.severity
        result.severity = most_severe(o.effective_severity for o in result.occurrences)
        logger.debug(
            f"Remapped result {previous.value} -> {result.severity.value}",
            operation="apply_remap_rules",
            context={"result_id": result.id, "rule": f"{from_severity.value}={to_severity.value}"},
        )
    return result
