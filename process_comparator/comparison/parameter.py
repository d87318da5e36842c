"""
Parameter-level (flat) comparison.

Compares one ER item against each of its AR occurrences through the
comparator registered for the ER content type, then rolls the occurrence
severities up into a single leaf NodeResult.
"""

from typing import List, Optional, Sequence, Union

from ..config.configuration import (
    CHANGE_RESULT,
    COMPARE_AS,
    EXCLUDE_DIFF_WITH_STATUS,
    ParameterBag,
)
from ..domain.item import ContentType, Item
from ..domain.results import DiffMessage, NodeKind, NodeResult, OccurrenceResult
from ..domain.severity import Severity
from ..rules.remap import apply_remap_rules
from ..utils.logger import get_logger
from ..utils.messages import msg
from .registry import ComparatorRegistry
from .transcoder import convert_item

logger = get_logger(__name__)


def ar_missed_diffs() -> List[DiffMessage]:
    """Diff list standing in for an absent AR occurrence."""
    return [DiffMessage(order_id=0, expected="", actual="", severity=Severity.AR_MISSED)]


def error_result(
    unit_id: str,
    error: BaseException,
    kind: NodeKind = NodeKind.PARAMETER,
    item: Optional[Item] = None,
) -> NodeResult:
    """
    Build the ERROR leaf that replaces a failed unit's result.

    The diagnostic is bound to the unit id so it can be traced in the batch.
    """
    diagnostic = DiffMessage(
        order_id=0,
        expected=msg(20002, str(error)),
        actual=msg(20002, "null"),
        severity=Severity.ERROR,
        description=f"Comparison of unit '{unit_id}' failed: {type(error).__name__}: {error}",
    )
    return NodeResult.leaf(
        id=unit_id,
        kind=kind,
        occurrences=[OccurrenceResult(ar=None, diffs=[diagnostic])],
        item=item,
        message=diagnostic,
    )


def resolve_compare_as(parameters: ParameterBag) -> Optional[ContentType]:
    """Return the `compareAs` target content type, or None when unset or unknown."""
    name = parameters.get(COMPARE_AS)
    if name is None:
        return None
    target = ContentType.parse(name)
    if target is None:
        logger.warning(
            f"Ignoring compareAs with unknown content type '{name}'",
            operation="resolve_compare_as",
        )
    return target


def _excluded_severities(parameters: ParameterBag) -> set:
    excluded = set()
    for entry in parameters.get_all(EXCLUDE_DIFF_WITH_STATUS):
        for name in entry.split(","):
            if name.strip():
                excluded.add(name.strip().upper())
    return excluded


def simple_compare(
    er: Item,
    ar: Union[Item, Sequence[Item]],
    parameters: ParameterBag,
    registry: ComparatorRegistry,
    apply_remap: bool = True,
    result_id: Optional[str] = None,
) -> NodeResult:
    """
    Compare an ER item with one or more AR occurrences.

    Args:
        er: Expected item
        ar: One AR item or a sequence of AR occurrences
        parameters: Resolved parameter bag for this comparison
        registry: Comparator registry keyed by content type
        apply_remap: Apply `changeResult` rules (flat units only)
        result_id: Id of the produced result (defaults to the ER id)

    Returns:
        Leaf PARAMETER NodeResult

    Raises:
        ComparatorNotFoundError: If no comparator serves the ER content type
        ComparatorError: If the comparator rejects the content
    """
    occurrences_in = [ar] if isinstance(ar, Item) else list(ar)

    target = resolve_compare_as(parameters)
    if target is not None:
        er = convert_item(er, target)

    comparator = registry.get(er.content_type)
    excluded = _excluded_severities(parameters)

    occurrences: List[OccurrenceResult] = []
    for ar_item in occurrences_in:
        if ar_item.content is None:
            occurrences.append(OccurrenceResult(ar=ar_item, diffs=ar_missed_diffs()))
            continue

        if target is not None:
            ar_item = convert_item(ar_item, target)

        diffs = list(comparator.compare(er, ar_item, parameters))
        if excluded:
            diffs = [diff for diff in diffs if diff.severity.value not in excluded]
        occurrences.append(OccurrenceResult(ar=ar_item, diffs=diffs))

    if not occurrences:
        occurrences.append(OccurrenceResult(ar=None, diffs=ar_missed_diffs()))

    result = NodeResult.leaf(
        id=result_id if result_id is not None else er.id,
        kind=NodeKind.PARAMETER,
        occurrences=occurrences,
        item=er,
    )

    if apply_remap and parameters.has(CHANGE_RESULT):
        apply_remap_rules(result, parameters.get_all(CHANGE_RESULT))

    logger.debug(
        f"Compared '{er.name}' against {len(occurrences)} occurrence(s): {result.severity.value}",
        operation="simple_compare",
        context={"unit_id": result.id, "content_type": er.content_type.value},
    )
    return result
