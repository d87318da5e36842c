"""
Severity enumeration and its total order.

The order used by every rollup is the explicit SEVERITY_RANK table below,
not the declaration order of the enum members, so adding a member can never
silently reorder rollups.
"""

from enum import Enum
from typing import Dict, Iterable, Optional


class Severity(Enum):
    """Result kind of a single difference or of a rolled-up node."""

    HIDDEN = "HIDDEN"
    SUCCESS = "SUCCESS"
    SKIPPED = "SKIPPED"
    IGNORED = "IGNORED"
    IDENTICAL = "IDENTICAL"
    PASSED = "PASSED"
    SIMILAR = "SIMILAR"
    BROKEN_STEP_INDEX = "BROKEN_STEP_INDEX"
    CHANGED = "CHANGED"
    MODIFIED = "MODIFIED"
    AR_MISSED = "AR_MISSED"
    ER_MISSED = "ER_MISSED"
    EXTRA = "EXTRA"
    MISSED = "MISSED"
    FAILED = "FAILED"
    ERROR = "ERROR"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["Severity"]:
        """
        Look up a severity by name, ignoring case and surrounding whitespace.

        Returns:
            Matching Severity, or None for blank or unknown names
        """
        if not name:
            return None
        return cls.__members__.get(name.strip().upper())


# Least severe first.
SEVERITY_RANK: Dict[Severity, int] = {
    Severity.HIDDEN: 0,
    Severity.SUCCESS: 10,
    Severity.SKIPPED: 20,
    Severity.IGNORED: 30,
    Severity.IDENTICAL: 40,
    Severity.PASSED: 50,
    Severity.SIMILAR: 60,
    Severity.BROKEN_STEP_INDEX: 70,
    Severity.CHANGED: 80,
    Severity.MODIFIED: 90,
    Severity.AR_MISSED: 100,
    Severity.ER_MISSED: 110,
    Severity.EXTRA: 120,
    Severity.MISSED: 130,
    Severity.FAILED: 140,
    Severity.ERROR: 150,
}

# Result of rolling up nothing.
LEAST_SEVERE = Severity.IDENTICAL


def most_severe(severities: Iterable[Severity]) -> Severity:
    """
    Return the most severe element, or IDENTICAL when there is none.

    Ties keep the first element seen.
    """
    result: Optional[Severity] = None
    for severity in severities:
        if result is None or severity.rank > result.rank:
            result = severity
    return result if result is not None else LEAST_SEVERE
