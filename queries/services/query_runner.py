"""
Query Runner - executes the bookstore steps against one MongoDB connection
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from database.mongodb import MongoDB
from queries.core.constants import STATUS_EMOJIS
from queries.core.errors import OperationError
from queries.core.utils import get_logger
from queries.monitoring.metrics import RunStatistics
from queries.services.steps import Step, StepResult, build_bookstore_steps

logger = get_logger(__name__)


@dataclass
class RunReport:
    """What happened during one run"""

    results: List[StepResult] = field(default_factory=list)
    error: Optional[OperationError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def get(self, name: str) -> Optional[StepResult]:
        """Result of the step with the given name"""
        for result in self.results:
            if result.name == name:
                return result
        return None


class QueryRunner:
    """Run steps strictly in order; the first failure aborts the rest"""

    def __init__(self, database: MongoDB, steps: Optional[List[Step]] = None,
                 stats: Optional[RunStatistics] = None):
        self.database = database
        self.steps = steps if steps is not None else build_bookstore_steps()
        self.stats = stats or RunStatistics()

    async def run(self) -> RunReport:
        """Connect, run every step, and always close the connection"""
        report = RunReport()
        self.stats.reset()
        logger.info(f"🚀 Running {len(self.steps)} bookstore operations...")

        try:
            async with self.database as db:
                collection = db.books
                for step in self.steps:
                    report.results.append(await self._run_step(step, collection))
        except OperationError as e:
            report.error = e
            logger.error(f"{STATUS_EMOJIS['error']} Error: {e}")

        self._log_summary(report)
        return report

    async def _run_step(self, step: Step, collection) -> StepResult:
        start = time.perf_counter()
        try:
            value = await step.execute(collection)
        except OperationError:
            self.stats.increment("steps_failed")
            raise
        duration = time.perf_counter() - start

        step.record(self.stats, value)
        self.stats.record_step(step.name, duration)
        logger.info(f"{step.emoji} {step.describe(value)}")
        return StepResult(name=step.name, kind=step.kind, value=value, duration=duration)

    def _log_summary(self, report: RunReport) -> None:
        summary = self.stats.get_summary()
        status = "completed" if report.success else "aborted"
        logger.info(
            f"📊 Run {status}: {summary['steps_completed']}/{len(self.steps)} steps in {summary['elapsed']}, "
            f"returned={summary['documents_returned']}, modified={summary['documents_modified']}, "
            f"deleted={summary['documents_deleted']}, indexes={summary['indexes_created']}, "
            f"slowest={summary['slowest_step']}"
        )
