"""Models for smoke test results."""

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal["ProcessTimeout", "ProcessExitNonzero", "SpawnFailure"]


@dataclass(frozen=True, kw_only=True)
class ProcessError:
    """Why a smoke test run is considered failing."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single smoke test process.

    A result is never mutated; a retry replaces it with a new instance.
    """

    __test__ = False

    id: str
    stdout: str = ""
    stderr: str = ""
    error: ProcessError | None = None
    duration: float = 0.0

    @property
    def failed(self) -> bool:
        """Whether the run is failing."""
        return self.error is not None
