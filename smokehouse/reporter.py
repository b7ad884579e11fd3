"""Relay smoke test output to the console."""

import shlex
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

from smokehouse.models.definition import SmokeTestDefinition
from smokehouse.models.result import TestResult


@dataclass(frozen=True, kw_only=True)
class ConsoleReporter:
    """Writes progress lines and relays each child's output verbatim.

    Streams default to the process's stdout/stderr looked up at write time.
    """

    out: TextIO | None = None
    err: TextIO | None = None

    @property
    def _out(self) -> TextIO:
        return self.out if self.out is not None else sys.stdout

    @property
    def _err(self) -> TextIO:
        return self.err if self.err is not None else sys.stderr

    def starting(self, definition: SmokeTestDefinition, args: Sequence[str]) -> None:
        """Announce a smoke test launch and its command line."""
        self._out.write(f"{definition.id} smoketest starting…\n")
        self._out.write(f"{shlex.join(args)}\n")
        self._out.flush()

    def display(self, result: TestResult) -> None:
        """Show a finished smoke test's output."""
        out, err = self._out, self._err
        out.write(f"\n{result.id} smoketest results:\n")
        if result.error is not None:
            out.write(f"{result.error.message}\n")
        out.write(result.stdout)
        out.flush()
        err.write(result.stderr)
        err.flush()
        out.write(f"smoketest-{result.id}: {result.duration:.3f}s\n")
        out.write(f"{result.id} smoketest complete.\n\n")
        out.flush()
