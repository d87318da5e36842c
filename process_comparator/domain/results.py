"""
Comparison result model.

DiffMessage is one atomic difference. OccurrenceResult wraps the diffs found
for one AR occurrence. NodeResult mirrors the comparison hierarchy and is
either leaf-shaped (occurrences) or branch-shaped (children), never both.
Severities are rolled up as soon as a result is built.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .item import Item
from .severity import Severity, most_severe


class NodeKind(Enum):
    """Level of a NodeResult in the hierarchy."""

    TESTCASE = "TESTCASE"
    PROCESS = "PROCESS"
    STEP = "STEP"
    PARAMETER = "PARAMETER"


@dataclass
class DiffMessage:
    """
    A single difference found by a comparator.

    Attributes:
        order_id: Position of the difference within its comparison
        expected: Locator (or message) on the ER side
        actual: Locator (or message) on the AR side
        severity: Classification of the difference
        description: Human-readable description
        expected_value: Raw ER value, when the comparator exposes it
        actual_value: Raw AR value, when the comparator exposes it
    """

    order_id: int
    expected: str
    actual: str
    severity: Severity
    description: Optional[str] = None
    expected_value: Optional[str] = None
    actual_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "order_id": self.order_id,
            "expected": self.expected,
            "actual": self.actual,
            "severity": self.severity.value,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.expected_value is not None:
            data["expected_value"] = self.expected_value
        if self.actual_value is not None:
            data["actual_value"] = self.actual_value
        return data


@dataclass
class OccurrenceResult:
    """
    Outcome of comparing the ER against one AR occurrence.

    `severity` always equals the most severe diff. A remapping rule may set
    `remapped_severity`, which then takes part in the parent's rollup instead.
    """

    ar: Optional[Item]
    diffs: List[DiffMessage] = field(default_factory=list)
    severity: Severity = field(init=False)
    remapped_severity: Optional[Severity] = None

    def __post_init__(self):
        self.severity = most_severe(diff.severity for diff in self.diffs)

    @property
    def effective_severity(self) -> Severity:
        if self.remapped_severity is not None:
            return self.remapped_severity
        return self.severity

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "ar_id": self.ar.id if self.ar is not None else None,
            "severity": self.severity.value,
            "diffs": [diff.to_dict() for diff in self.diffs],
        }
        if self.remapped_severity is not None:
            data["remapped_severity"] = self.remapped_severity.value
        return data


@dataclass
class NodeResult:
    """
    One node of the result hierarchy.

    Use NodeResult.leaf() / NodeResult.branch() so that the shape invariant
    holds and the severity is rolled up on construction.
    """

    id: str
    kind: NodeKind
    severity: Severity
    item: Optional[Item] = None
    occurrences: Optional[List[OccurrenceResult]] = None
    children: Optional[List["NodeResult"]] = None
    message: Optional[DiffMessage] = None

    def __post_init__(self):
        if (self.occurrences is None) == (self.children is None):
            raise ValueError(
                f"NodeResult '{self.id}' must have either occurrences or children"
            )
        if self.occurrences is not None and not self.occurrences:
            raise ValueError(f"Leaf NodeResult '{self.id}' needs at least one occurrence")

    @classmethod
    def leaf(
        cls,
        id: str,
        kind: NodeKind,
        occurrences: List[OccurrenceResult],
        item: Optional[Item] = None,
        message: Optional[DiffMessage] = None,
    ) -> "NodeResult":
        severity = most_severe(occurrence.effective_severity for occurrence in occurrences)
        return cls(
            id=id,
            kind=kind,
            severity=severity,
            item=item,
            occurrences=list(occurrences),
            message=message,
        )

    @classmethod
    def branch(
        cls,
        id: str,
        kind: NodeKind,
        children: List["NodeResult"],
        item: Optional[Item] = None,
        message: Optional[DiffMessage] = None,
    ) -> "NodeResult":
        severity = most_severe(child.severity for child in children)
        return cls(
            id=id,
            kind=kind,
            severity=severity,
            item=item,
            children=list(children),
            message=message,
        )

    @property
    def is_leaf(self) -> bool:
        return self.occurrences is not None

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children or []:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict. Content is never included."""
        data: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.item.name if self.item is not None else None,
            "severity": self.severity.value,
        }
        if self.occurrences is not None:
            data["occurrences"] = [occurrence.to_dict() for occurrence in self.occurrences]
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        if self.message is not None:
            data["message"] = self.message.to_dict()
        return data


@dataclass(frozen=True)
class StepRef:
    """Name and position of a step on one side of an alignment."""

    name: str
    index: int


@dataclass(frozen=True)
class AlignmentEntry:
    """
    Pairing of an ER step with an AR step. At least one side is present.
    """

    er: Optional[StepRef] = None
    ar: Optional[StepRef] = None

    def __post_init__(self):
        if self.er is None and self.ar is None:
            raise ValueError("AlignmentEntry needs an ER side, an AR side, or both")

    @property
    def is_matched(self) -> bool:
        return self.er is not None and self.ar is not None
