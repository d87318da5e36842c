"""
Fault-isolated batch runner for flat comparison units.

Each flat unit becomes a CompareTask value. Small batches run sequentially
on the caller thread; batches at or above the parallel threshold run on a
ThreadPoolExecutor owned by that single call. Results always come back in
submission order, and a failing task yields an ERROR result instead of
interrupting the batch.
"""

import contextvars
import dataclasses
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from ..config.configuration import ParameterBag
from ..domain.item import Item
from ..domain.results import NodeResult
from ..rules.substitution import apply_substitution_rules
from ..utils.logger import bind_log_context, get_logger
from .parameter import error_result, simple_compare
from .registry import ComparatorRegistry
from .transcoder import decode_content, encode_content

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompareTask:
    """
    Everything one flat comparison needs, detached from its unit.

    Attributes:
        unit_id: Id the result is reported under
        er: Expected item, content still transport-encoded
        ar: AR occurrences
        parameters: Resolved parameter bag
        substitutions: Explicit erSubstitution rule entries
        context: Context parameter values by name; explicit rules override them
    """

    unit_id: str
    er: Item
    ar: List[Item] = field(default_factory=list)
    parameters: ParameterBag = field(default_factory=ParameterBag)
    substitutions: List[str] = field(default_factory=list)
    context: Dict[str, str] = field(default_factory=dict)


def substitute_er(
    er: Item, rules: Sequence[str], context: Optional[Mapping[str, str]] = None
) -> Item:
    """
    Return a copy of the ER item with substitutions applied to its content.

    Content is decoded, rewritten and re-encoded for its own content type.
    The item passed in is left untouched.

    Raises:
        ContentConversionError: If the content cannot be decoded
    """
    if not (rules or context) or er.content is None:
        return er
    text = decode_content(er.content, er.content_type)
    substituted = apply_substitution_rules(text, rules, context)
    if substituted == text:
        return er
    return dataclasses.replace(er, content=encode_content(substituted, er.content_type))


class CompletionLatch:
    """
    Countdown latch shared by the tasks of one batch.

    Every task counts down exactly once; wait() returns when all did.
    """

    def __init__(self, count: int):
        self._count = count
        self._condition = threading.Condition()

    @property
    def count(self) -> int:
        with self._condition:
            return self._count

    def count_down(self) -> None:
        with self._condition:
            if self._count > 0:
                self._count -= 1
                if self._count == 0:
                    self._condition.notify_all()

    def wait(self) -> None:
        with self._condition:
            while self._count > 0:
                self._condition.wait()


def run_task(task: CompareTask, registry: ComparatorRegistry) -> NodeResult:
    """
    Run one flat comparison, converting any failure into an ERROR result.
    """
    with bind_log_context(unit_id=task.unit_id):
        try:
            er = substitute_er(task.er, task.substitutions, task.context)
            return simple_compare(
                er, task.ar, task.parameters, registry, result_id=task.unit_id
            )
        except Exception as e:
            logger.error(
                f"Comparison failed for unit '{task.unit_id}'",
                operation="run_task",
                error=f"{type(e).__name__}: {e}",
            )
            return error_result(task.unit_id, e, item=task.er)


class BatchRunner:
    """
    Executes CompareTasks either sequentially or on a bounded worker pool.

    Holds no state between calls; every run() creates and releases its own
    pool and latch.

    There is no per-task timeout: a task that never returns blocks run().
    """

    def __init__(
        self,
        registry: ComparatorRegistry,
        parallel_threshold: int = 10,
        max_workers: int = 100,
    ):
        self.registry = registry
        self.parallel_threshold = parallel_threshold
        self.max_workers = max_workers

    def should_parallelize(self, task_count: int) -> bool:
        return task_count >= self.parallel_threshold

    def run(self, tasks: Sequence[CompareTask]) -> List[NodeResult]:
        """
        Run all tasks and return their results in submission order.

        Args:
            tasks: Flat comparison tasks

        Returns:
            One NodeResult per task, same order as `tasks`
        """
        if not tasks:
            return []

        if not self.should_parallelize(len(tasks)):
            logger.debug(
                f"Running {len(tasks)} flat unit(s) sequentially",
                operation="run_batch",
            )
            return [run_task(task, self.registry) for task in tasks]

        return self._run_parallel(tasks)

    def _run_parallel(self, tasks: Sequence[CompareTask]) -> List[NodeResult]:
        latch = CompletionLatch(len(tasks))
        workers = min(self.max_workers, len(tasks))

        logger.info(
            f"Running {len(tasks)} flat unit(s) on {workers} worker(s)",
            operation="run_batch",
            context={"task_count": len(tasks), "workers": workers},
        )

        def execute(task: CompareTask) -> NodeResult:
            try:
                return run_task(task, self.registry)
            finally:
                latch.count_down()

        futures: List[Future] = []
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="compare-batch"
        ) as executor:
            for task in tasks:
                # Each task runs inside a copy of the submitter's logging context.
                task_context = contextvars.copy_context()
                futures.append(executor.submit(task_context.run, execute, task))

            latch.wait()
            results = [future.result() for future in futures]

        return results
