"""Execute the smoke tests of one batch."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from smokehouse.models.definition import SmokeTestDefinition
from smokehouse.models.result import ProcessError, TestResult
from smokehouse.process_runner import ProcessRunner
from smokehouse.reporter import ConsoleReporter

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class BatchExecutor:
    """Runs a batch of smoke tests concurrently, or one at a time.

    Serial mode exists for slow machines where running every test of a batch
    at once oversubscribes the CPU.
    """

    runner: ProcessRunner
    reporter: ConsoleReporter = field(default_factory=ConsoleReporter)
    serial: bool = False

    async def run_one(self, definition: SmokeTestDefinition) -> TestResult:
        """Run one smoke test and display its output as soon as it finishes."""
        self.reporter.starting(definition, self.runner.build_args(definition))
        try:
            result = await self.runner.run(definition)
        except Exception as e:
            log.error("Smoketest %s crashed: %s", definition.id, e, exc_info=e)
            result = _crashed(definition, e)
        self.reporter.display(result)
        return result

    async def run_batch(
        self, definitions: Sequence[SmokeTestDefinition]
    ) -> Sequence[TestResult]:
        """Run every smoke test in the batch and wait for all of them.

        Returns:
            Results in the same order as `definitions`, regardless of the
            order the processes finished in

        """
        if self.serial:
            log.info("Running %d smoketest(s) serially", len(definitions))
            return [await self.run_one(definition) for definition in definitions]

        log.info("Running %d smoketest(s) concurrently", len(definitions))
        tasks = [
            asyncio.create_task(self.run_one(definition), name=definition.id)
            for definition in definitions
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return [
            _process_result(definition, result)
            for definition, result in zip(definitions, results, strict=True)
        ]


def _process_result(
    definition: SmokeTestDefinition, result: TestResult | BaseException
) -> TestResult:
    """Keep a batch slot filled even when its task raised."""
    if isinstance(result, TestResult):
        return result
    if not isinstance(result, Exception):
        raise result
    log.error("Smoketest %s failed: %s", definition.id, result, exc_info=result)
    return _crashed(definition, result)


def _crashed(definition: SmokeTestDefinition, error: Exception) -> TestResult:
    return TestResult(
        id=definition.id,
        error=ProcessError(
            kind="SpawnFailure", message=f"{type(error).__name__}: {error}"
        ),
    )
