"""CLI entry point for the smoke test runner."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from smokehouse.aggregator import log_results_summary
from smokehouse.config import RunConfig, retry_from_env, serial_from_env
from smokehouse.definition_loader import load_registry
from smokehouse.executor import BatchExecutor
from smokehouse.orchestrator import SmokeOrchestrator
from smokehouse.planner import plan_batches
from smokehouse.process_runner import DEFAULT_TIMEOUT, ProcessRunner
from smokehouse.servers import serve_all

DEFAULT_REGISTRY_PATH = Path("smoke-tests.yaml")


async def run(registry_path: Path, config: RunConfig) -> int:
    """Run the selected smoke tests and return the exit code.

    Structural errors (an invalid registry, a server that cannot start) are
    raised; servers started before the error are stopped first.
    """
    log = logging.getLogger("smokehouse")

    log.info("Loading registry: %s", registry_path)
    registry = await load_registry(registry_path)

    plan = plan_batches(registry.tests, config.batches)
    if not plan:
        log.info("No smoketests selected")
        return 0

    runner = ProcessRunner(
        command=registry.command,
        only_audits=config.only_audits,
        only_urls=config.only_urls,
        timeout=config.timeout,
    )
    orchestrator = SmokeOrchestrator(
        executor=BatchExecutor(runner=runner, serial=config.serial),
        retry_enabled=config.retry,
    )

    async with serve_all(registry.servers) as servers:
        report = await orchestrator.run(plan, servers=servers)

    log_results_summary(log, report)
    return report.exit_code


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Run smoke tests in batches of concurrent child processes",
        epilog=(
            "examples:\n"
            "  smokehouse --only-audits network-requests\n"
            "  smokehouse --only-urls http://localhost:10200/preload.html"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "batches",
        nargs="*",
        help=(
            "Batch names (\"default\" for tests without a batch) or smoke test "
            "ids to run (default: all)"
        ),
    )
    parser.add_argument(
        "--registry",
        type=Path,
        default=DEFAULT_REGISTRY_PATH,
        help="Path to the smoke test registry (default: %(default)s)",
    )
    parser.add_argument(
        "--only-audits",
        nargs="+",
        default=[],
        help="Filter for audit expectations to run",
    )
    parser.add_argument(
        "--only-urls",
        nargs="+",
        default=[],
        help="Filter for urls to run. Patterns accepted",
    )
    parser.add_argument(
        "--serial",
        action="store_true",
        help="Run tests one at a time (also set by SMOKEHOUSE_SERIAL)",
    )
    parser.add_argument(
        "--retry",
        action="store_true",
        help="Retry failing tests once (also set by RETRY_SMOKES or CI)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Per-test timeout in seconds (default: %(default)s)",
    )
    return parser


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = RunConfig(
        batches=args.batches,
        only_audits=args.only_audits,
        only_urls=args.only_urls,
        serial=args.serial or serial_from_env(),
        retry=args.retry or retry_from_env(),
        timeout=args.timeout,
    )

    try:
        exit_code = asyncio.run(run(args.registry, config))
    except Exception:
        logging.getLogger("smokehouse").exception("Smoketest run aborted")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
