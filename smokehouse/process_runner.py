"""Run a single smoke test as an isolated child process."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from smokehouse.models.definition import SmokeTestDefinition
from smokehouse.models.result import ProcessError, TestResult

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 6 * 60
READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, kw_only=True)
class ProcessRunner:
    """Launches smoke test processes and normalizes their outcome.

    `run` never raises for a failing test: timeouts, non-zero exits and
    launch failures are all reported through `TestResult.error`.
    """

    command: Sequence[str]
    only_audits: Sequence[str] = field(default_factory=tuple)
    only_urls: Sequence[str] = field(default_factory=tuple)
    timeout: float = DEFAULT_TIMEOUT

    def build_args(self, definition: SmokeTestDefinition) -> Sequence[str]:
        """Build the argv for one smoke test."""
        args = [
            *self.command,
            f"--config-path={definition.config}",
            f"--expectations-path={definition.expectations}",
        ]
        if self.only_audits:
            args += ["--only-audits", *self.only_audits]
        if self.only_urls:
            args += ["--only-urls", *self.only_urls]
        return args

    async def run(self, definition: SmokeTestDefinition) -> TestResult:
        """Run the smoke test and wait for it to exit or time out."""
        args = self.build_args(definition)
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv containing a NUL byte
            log.error("Failed to launch smoke test %s: %s", definition.id, e)
            return TestResult(
                id=definition.id,
                error=ProcessError(
                    kind="SpawnFailure",
                    message=f"Failed to launch {args[0]}: {e}",
                ),
                duration=loop.time() - started,
            )

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        error: ProcessError | None = None

        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _drain(process.stdout, stdout_chunks),
                    _drain(process.stderr, stderr_chunks),
                    process.wait(),
                ),
                timeout=self.timeout,
            )
        except TimeoutError:
            log.warning(
                "Smoke test %s timed out after %.0fs, killing it",
                definition.id,
                self.timeout,
            )
            await _kill(process)
            error = ProcessError(
                kind="ProcessTimeout",
                message=f"Timed out after {self.timeout:.0f}s: {' '.join(args)}",
            )
        else:
            if process.returncode != 0:
                error = ProcessError(
                    kind="ProcessExitNonzero",
                    message=(
                        f"Command failed with exit code {process.returncode}: "
                        f"{' '.join(args)}"
                    ),
                )
        finally:
            # Cancelled mid-run: the child must not outlive the run
            if process.returncode is None:
                _signal_kill(process)
                await asyncio.shield(process.wait())

        return TestResult(
            id=definition.id,
            stdout=_decode(stdout_chunks),
            stderr=_decode(stderr_chunks),
            error=error,
            duration=loop.time() - started,
        )


async def _drain(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
    """Read a stream to EOF, keeping what was read even if cancelled."""
    if stream is None:
        return
    while chunk := await stream.read(READ_CHUNK_SIZE):
        chunks.append(chunk)


async def _kill(process: asyncio.subprocess.Process) -> None:
    _signal_kill(process)
    await process.wait()


def _signal_kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass


def _decode(chunks: Sequence[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")
