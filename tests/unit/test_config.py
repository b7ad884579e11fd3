"""Tests for run configuration."""

import pytest
from pydantic import ValidationError

from smokehouse.config import RunConfig, env_flag, retry_from_env, serial_from_env


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1", True),
        ("true", True),
        ("yes", True),
        ("True", True),
        ("0", False),
        ("false", False),
        ("no", False),
        ("", False),
    ],
)
def test_env_flag(value: str, expected: bool) -> None:
    """Interprets common truthy and falsy spellings."""
    assert env_flag("FLAG", {"FLAG": value}) is expected


def test_env_flag_unset() -> None:
    """Missing variables are false."""
    assert env_flag("FLAG", {}) is False


def test_serial_from_env() -> None:
    """SMOKEHOUSE_SERIAL forces serial mode."""
    assert serial_from_env({"SMOKEHOUSE_SERIAL": "1"})
    assert not serial_from_env({})


@pytest.mark.parametrize(
    ("environ", "expected"),
    [
        ({"RETRY_SMOKES": "1"}, True),
        ({"CI": "true"}, True),
        ({"CI": "false"}, False),
        ({}, False),
    ],
)
def test_retry_from_env(environ: dict[str, str], expected: bool) -> None:
    """RETRY_SMOKES or CI enables retries."""
    assert retry_from_env(environ) is expected


def test_env_flag_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Falls back to os.environ."""
    monkeypatch.setenv("RETRY_SMOKES", "1")

    assert retry_from_env()


def test_run_config_defaults() -> None:
    """Default run selects everything, concurrently, without retries."""
    config = RunConfig()

    assert list(config.batches) == []
    assert config.serial is False
    assert config.retry is False
    assert config.timeout == 360


def test_run_config_rejects_non_positive_timeout() -> None:
    """Timeouts must be positive."""
    with pytest.raises(ValidationError):
        RunConfig(timeout=0)
