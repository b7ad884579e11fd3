"""Smoke test orchestrator coordinating batches, retries and the verdict."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from smokehouse.aggregator import RunReport, aggregate
from smokehouse.executor import BatchExecutor
from smokehouse.models.definition import SmokeTestDefinition
from smokehouse.models.result import TestResult
from smokehouse.planner import BatchPlan, batch_display_name
from smokehouse.retry import retry_failures
from smokehouse.servers import StaticServer

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SmokeOrchestrator:
    """Runs planned batches one after another, then retries and aggregates."""

    executor: BatchExecutor
    retry_enabled: bool = False

    async def run(
        self, plan: BatchPlan, servers: Sequence[StaticServer] = ()
    ) -> RunReport:
        """Run every batch of the plan and return the final report.

        Batch N+1 is not started until every smoke test of batch N has
        finished. `servers` must stay up until this returns, retries included.
        """
        for server in servers:
            log.info("Smoketests served by %s at %s", server.name, server.url)

        definitions: dict[str, SmokeTestDefinition] = {}
        results: list[TestResult] = []

        for batch, batch_definitions in plan.items():
            log.info("Smoketest batch: %s", batch_display_name(batch))
            for definition in batch_definitions:
                definitions[definition.id] = definition
            results.extend(await self.executor.run_batch(batch_definitions))

        log.info("Smoketest execution completed (%d result(s))", len(results))

        final = await retry_failures(
            results,
            definitions,
            self.executor.run_one,
            enabled=self.retry_enabled,
        )
        return aggregate(final)
