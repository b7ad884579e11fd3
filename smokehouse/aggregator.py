"""Compute the final verdict of a smoke test run."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from smokehouse.models.result import TestResult

STATUS_SYMBOLS = {
    None: "✓",
    "ProcessExitNonzero": "✗",
    "SpawnFailure": "!",
    "ProcessTimeout": "⏱",
}


@dataclass(frozen=True, kw_only=True)
class RunReport:
    """Final results of a run, one per selected smoke test."""

    results: Sequence[TestResult]
    failing_ids: Sequence[str]

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 when every smoke test passed."""
        return 1 if self.failing_ids else 0


def aggregate(results: Sequence[TestResult]) -> RunReport:
    """Build the run report from the (possibly retried) results."""
    failing_ids = tuple(dict.fromkeys(r.id for r in results if r.failed))
    return RunReport(results=tuple(results), failing_ids=failing_ids)


def summarize(report: RunReport) -> str:
    """One-line verdict naming every failing smoke test."""
    if report.failing_ids:
        return (
            f"We have {len(report.failing_ids)} failing smoketests: "
            f"{', '.join(report.failing_ids)}"
        )
    return f"All {len(report.results)} smoketests passed"


def log_results_summary(log: logging.Logger, report: RunReport) -> None:
    """Log a formatted summary of smoke test results."""
    log.info("=" * 80)
    log.info("Smoketest Results Summary:")
    log.info("=" * 80)

    for result in report.results:
        kind = result.error.kind if result.error is not None else None
        log.info(
            "%s %s: %s (%.2fs)",
            STATUS_SYMBOLS[kind],
            result.id,
            kind or "passed",
            result.duration,
        )
        if result.error is not None:
            log.info("  Message: %s", result.error.message)

    if report.failing_ids:
        log.error(summarize(report))
    else:
        log.info(summarize(report))
