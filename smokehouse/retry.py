"""Retry failing smoke tests once to absorb flakes."""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TypeAlias

from smokehouse.models.definition import SmokeTestDefinition
from smokehouse.models.result import TestResult

log = logging.getLogger(__name__)

RunOne: TypeAlias = Callable[[SmokeTestDefinition], Awaitable[TestResult]]


async def retry_failures(
    results: Sequence[TestResult],
    definitions: Mapping[str, SmokeTestDefinition],
    run_one: RunOne,
    *,
    enabled: bool,
) -> list[TestResult]:
    """Re-run each failing smoke test once, replacing its result in place.

    Retries run one after another. A retry that fails again is final.

    Args:
        results: Results of the main run, in selection order
        definitions: Definitions of every selected smoke test by id
        run_one: Runs a single definition and returns its result
        enabled: Whether retries are allowed at all

    Returns:
        A new list with the same length and order as `results`

    """
    final = list(results)
    failing = [index for index, result in enumerate(final) if result.failed]

    if not failing or not enabled:
        return final

    log.info("Retrying %d failed smoketest(s)...", len(failing))
    for index in failing:
        definition = definitions[final[index].id]
        retried = await run_one(definition)
        log.info(
            "Retry of %s %s",
            definition.id,
            "failed again" if retried.failed else "passed",
        )
        final[index] = retried

    return final
