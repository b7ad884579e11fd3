"""Run configuration and environment-derived toggles."""

import os
from collections.abc import Mapping, Sequence

from pydantic import Field

from smokehouse.models.base import Model
from smokehouse.process_runner import DEFAULT_TIMEOUT

SERIAL_ENV_VAR = "SMOKEHOUSE_SERIAL"
RETRY_ENV_VARS = ("RETRY_SMOKES", "CI")

FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


class RunConfig(Model):
    """Options controlling one smoke test run."""

    batches: Sequence[str] = Field(
        default_factory=list, description="Batch names or test ids to run"
    )
    only_audits: Sequence[str] = Field(
        default_factory=list, description="Audit ids forwarded to each test"
    )
    only_urls: Sequence[str] = Field(
        default_factory=list, description="URL patterns forwarded to each test"
    )
    # Set on weak CI machines where a whole batch at once is too much
    serial: bool = Field(default=False, description="Run one test at a time")
    retry: bool = Field(default=False, description="Retry failing tests once")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Per-test timeout in seconds"
    )


def env_flag(name: str, environ: Mapping[str, str] | None = None) -> bool:
    """Whether an environment variable is set to a truthy value."""
    env = os.environ if environ is None else environ
    return env.get(name, "").strip().lower() not in FALSE_VALUES


def serial_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Whether the environment asks for serial execution."""
    return env_flag(SERIAL_ENV_VAR, environ)


def retry_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Whether the environment enables retries (explicitly or by running in CI)."""
    return any(env_flag(name, environ) for name in RETRY_ENV_VARS)
