"""
Top-level batch orchestration.

Dispatches every ComparisonUnit of a batch by kind:
    - CONTEXT_PARAMETER units feed ER substitution for the flat units
    - SIMPLE units are compared through the batch runner
    - PROCESS / PROCESS_STEP units are compared hierarchically
Anything else is ignored. Only an empty batch fails the call.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..config.configuration import ER_SUBSTITUTION, ConfigurationResolver, ParameterBag
from ..config.settings import ComparatorSettings
from ..domain.item import ComparisonUnit, Item, UnitKind
from ..domain.results import NodeKind, NodeResult
from ..exceptions import ContentConversionError, EmptyBatchError
from ..utils.logger import bind_log_context, get_logger, log_operation
from ..utils.messages import msg
from .batch_runner import BatchRunner, CompareTask
from .parameter import error_result, simple_compare
from .process import ProcessComparer
from .registry import ComparatorRegistry, default_registry
from .transcoder import decode_content

logger = get_logger(__name__)

FLAT_KINDS = frozenset({UnitKind.SIMPLE})
PROCESS_KINDS = frozenset({UnitKind.PROCESS, UnitKind.PROCESS_STEP})


def _context_value(unit: ComparisonUnit) -> Optional[str]:
    """First non-blank decoded AR content, else the decoded ER content."""
    for ar in unit.ar:
        value = decode_content(ar.content, ar.content_type)
        if value is not None and value.strip():
            return value.strip()
    value = decode_content(unit.er.content, unit.er.content_type)
    return value.strip() if value is not None else None


class ComparisonOrchestrator:
    """
    Batch entry point for ER/AR comparison.

    Holds only its registry and settings; every compare() call creates its
    own worker pool, so one orchestrator can serve concurrent callers.

    Usage:
        orchestrator = ComparisonOrchestrator(settings=ComparatorSettings.from_env())
        results = orchestrator.compare(units)
    """

    def __init__(
        self,
        registry: Optional[ComparatorRegistry] = None,
        settings: Optional[ComparatorSettings] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings if settings is not None else ComparatorSettings()
        self.process_comparer = ProcessComparer(self.registry)

    @log_operation("compare_batch")
    def compare(self, units: Sequence[ComparisonUnit]) -> List[NodeResult]:
        """
        Compare a batch of units.

        Args:
            units: Comparison units in caller order

        Returns:
            One NodeResult per SIMPLE / PROCESS / PROCESS_STEP unit, in input
            order. Context parameter units and unknown kinds yield no result.

        Raises:
            EmptyBatchError: If `units` is empty
        """
        if not units:
            message = msg(20105)
            logger.error(message, operation="compare_batch")
            raise EmptyBatchError(message)

        with bind_log_context(batch_size=len(units)):
            context = dict(self.collect_context_parameters(units))

            flat: List[Tuple[int, CompareTask]] = []
            results: List[Optional[NodeResult]] = [None] * len(units)
            for index, unit in enumerate(units):
                if unit.kind in FLAT_KINDS:
                    flat.append((index, self.build_task(unit, context)))
                elif unit.kind in PROCESS_KINDS:
                    results[index] = self.compare_process(unit)
                elif unit.kind is not UnitKind.CONTEXT_PARAMETER:
                    logger.warning(
                        f"Ignoring unit '{unit.id}' of unsupported kind {unit.kind}",
                        operation="compare_batch",
                    )

            runner = BatchRunner(
                self.registry,
                parallel_threshold=self.settings.parallel_threshold,
                max_workers=self.settings.max_workers,
            )
            flat_results = runner.run([task for _, task in flat])
            for (index, _), result in zip(flat, flat_results):
                results[index] = result

        ordered = [result for result in results if result is not None]
        logger.info(
            f"Compared {len(ordered)} unit(s) "
            f"({len(flat)} flat, {len(ordered) - len(flat)} process)",
            operation="compare_batch",
        )
        return ordered

    def collect_context_parameters(
        self, units: Sequence[ComparisonUnit]
    ) -> List[Tuple[str, str]]:
        """
        Decode CONTEXT_PARAMETER units into (name, value) pairs.

        A context unit whose content cannot be decoded is skipped with a
        warning; it never fails the batch.
        """
        pairs: List[Tuple[str, str]] = []
        for unit in units:
            if unit.kind is not UnitKind.CONTEXT_PARAMETER:
                continue
            try:
                value = _context_value(unit)
            except ContentConversionError as e:
                logger.warning(
                    f"Skipping context parameter '{unit.er.name}'",
                    operation="collect_context_parameters",
                    context={"unit_id": unit.id},
                    error=str(e),
                )
                continue
            if value is not None:
                pairs.append((unit.er.name, value))

        if pairs:
            logger.debug(
                f"Collected {len(pairs)} context parameter(s)",
                operation="collect_context_parameters",
                context={"names": [name for name, _ in pairs]},
            )
        return pairs

    def build_task(self, unit: ComparisonUnit, context: Dict[str, str]) -> CompareTask:
        """Turn a SIMPLE unit into a CompareTask; explicit erSubstitution rules win."""
        parameters = ConfigurationResolver(unit.configuration).global_parameters()
        return CompareTask(
            unit_id=unit.id,
            er=unit.er,
            ar=list(unit.ar),
            parameters=parameters,
            substitutions=parameters.get_all(ER_SUBSTITUTION),
            context=context,
        )

    def compare_process(self, unit: ComparisonUnit) -> NodeResult:
        """Hierarchical comparison of one unit; any failure becomes an ERROR result."""
        with bind_log_context(unit_id=unit.id):
            try:
                return self.process_comparer.compare(unit)
            except Exception as e:
                logger.error(
                    f"Process comparison failed for unit '{unit.id}'",
                    operation="compare_process",
                    error=f"{type(e).__name__}: {e}",
                )
                return error_result(unit.id, e, NodeKind.TESTCASE, unit.er)

    def simple_compare(
        self, er: Item, ar: Item, parameters: Optional[ParameterBag] = None
    ) -> NodeResult:
        """
        Compare a single ER item with a single AR item outside any batch.

        Raises:
            ComparatorError: If the comparison fails
        """
        if parameters is None:
            parameters = ParameterBag()
        return simple_compare(er, ar, parameters, self.registry)
