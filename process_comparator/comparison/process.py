"""
Hierarchical (process) comparison.

Builds a TESTCASE result with one PROCESS child per AR test case variant.
Steps are aligned by name (see aligner.align_steps); matched steps compare
their parameters through simple_compare without result remapping.
"""

from typing import Optional

from ..config.configuration import COMPARE_STEPS_COUNT, ConfigurationResolver
from ..domain.item import ComparisonUnit, Item
from ..domain.results import (
    AlignmentEntry,
    DiffMessage,
    NodeKind,
    NodeResult,
    OccurrenceResult,
)
from ..domain.severity import Severity
from ..exceptions import ComparatorError
from ..utils.logger import get_logger
from ..utils.messages import msg
from .aligner import align_steps
from .parameter import ar_missed_diffs, error_result, simple_compare
from .registry import ComparatorRegistry

logger = get_logger(__name__)


def _single_diff_leaf(
    id: str,
    kind: NodeKind,
    severity: Severity,
    ar: Optional[Item],
    item: Optional[Item] = None,
    message: Optional[DiffMessage] = None,
) -> NodeResult:
    diff = message or DiffMessage(order_id=0, expected="", actual="", severity=severity)
    return NodeResult.leaf(
        id=id,
        kind=kind,
        occurrences=[OccurrenceResult(ar=ar, diffs=[diff])],
        item=item,
        message=message,
    )


class ProcessComparer:
    """
    Compares one process unit (ER test case against AR test case variants).

    Runs on the caller thread; parameter comparator failures are isolated
    to the parameter they occur in.
    """

    def __init__(self, registry: ComparatorRegistry):
        self.registry = registry

    def compare(self, unit: ComparisonUnit) -> NodeResult:
        resolver = ConfigurationResolver(unit.configuration)
        check_steps_count = resolver.global_parameters().get_bool(COMPARE_STEPS_COUNT)

        processes = [
            self._compare_process(unit.er, ar_test_case, resolver, check_steps_count)
            for ar_test_case in unit.ar
        ]
        result = NodeResult.branch(
            id=unit.id, kind=NodeKind.TESTCASE, children=processes, item=unit.er
        )

        logger.info(
            f"Process '{unit.er.name}' compared against {len(processes)} AR variant(s): "
            f"{result.severity.value}",
            operation="process_compare",
            context={"unit_id": unit.id},
        )
        return result

    def _compare_process(
        self,
        er: Item,
        ar_test_case: Item,
        resolver: ConfigurationResolver,
        check_steps_count: bool,
    ) -> NodeResult:
        if check_steps_count and len(er.children) != len(ar_test_case.children):
            logger.debug(
                msg(20107, ar_test_case.name),
                operation="process_compare",
                context={"ar_id": ar_test_case.id},
            )
            message = DiffMessage(
                order_id=0,
                expected=msg(10102, len(er.children)),
                actual=msg(10103, len(ar_test_case.children)),
                severity=Severity.FAILED,
            )
            return _single_diff_leaf(
                ar_test_case.id, NodeKind.PROCESS, Severity.FAILED, ar_test_case, er, message
            )

        alignment = align_steps(
            [step.name for step in er.children],
            [step.name for step in ar_test_case.children],
        )
        steps = [
            self._compare_step(entry, er, ar_test_case, resolver) for entry in alignment
        ]
        return NodeResult.branch(
            id=ar_test_case.id, kind=NodeKind.PROCESS, children=steps, item=ar_test_case
        )

    def _compare_step(
        self,
        entry: AlignmentEntry,
        er: Item,
        ar_test_case: Item,
        resolver: ConfigurationResolver,
    ) -> NodeResult:
        if entry.er is None:
            ar_step = ar_test_case.children[entry.ar.index]
            return _single_diff_leaf(ar_step.id, NodeKind.STEP, Severity.ER_MISSED, ar_step)

        er_step = er.children[entry.er.index]
        if entry.ar is None:
            return NodeResult.leaf(
                id=er_step.id,
                kind=NodeKind.STEP,
                occurrences=[OccurrenceResult(ar=None, diffs=ar_missed_diffs())],
                item=er_step,
            )

        ar_step = ar_test_case.children[entry.ar.index]
        step_number = str(entry.er.index + 1)
        step_rule = resolver.step_rule(ar_test_case.id, step_number)

        if step_rule.skip:
            result = _single_diff_leaf(
                er_step.id, NodeKind.STEP, Severity.SKIPPED, ar_step, er_step
            )
        else:
            parameters = [
                self._compare_parameter(
                    er_parameter, ar_step, ar_test_case.id, step_number, resolver
                )
                for er_parameter in er_step.children
            ]
            result = NodeResult.branch(
                id=er_step.id, kind=NodeKind.STEP, children=parameters, item=er_step
            )

        if entry.er.index != entry.ar.index:
            result.message = DiffMessage(
                order_id=0,
                expected=str(entry.er.index + 1),
                actual=str(entry.ar.index + 1),
                severity=Severity.BROKEN_STEP_INDEX,
            )
        return result

    def _compare_parameter(
        self,
        er_parameter: Item,
        ar_step: Item,
        test_case_id: str,
        step_number: str,
        resolver: ConfigurationResolver,
    ) -> NodeResult:
        ar_parameter = ar_step.child_by_name(er_parameter.name)
        if ar_parameter is None:
            message = DiffMessage(
                order_id=0,
                expected=msg(10106, er_parameter.name),
                actual=msg(10107, "null"),
                severity=Severity.MISSED,
            )
            return _single_diff_leaf(
                er_parameter.id, NodeKind.PARAMETER, Severity.MISSED, None, er_parameter, message
            )

        parameters = resolver.parameters_for(test_case_id, step_number, er_parameter.name)
        try:
            return simple_compare(
                er_parameter, ar_parameter, parameters, self.registry, apply_remap=False
            )
        except ComparatorError as e:
            logger.error(
                f"Comparator failed for parameter '{er_parameter.name}'",
                operation="process_compare",
                context={"parameter_id": er_parameter.id, "step": step_number},
                error=str(e),
            )
            return error_result(er_parameter.id, e, NodeKind.PARAMETER, er_parameter)
