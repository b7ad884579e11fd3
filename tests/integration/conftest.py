"""Fixtures for integration tests running real child processes."""

import socket
import sys
import textwrap
from collections.abc import Sequence
from pathlib import Path

import pytest

CHILD_SCRIPT = textwrap.dedent(
    """
    import os
    import sys
    import time

    options = dict(
        arg.split("=", 1) for arg in sys.argv[1:] if arg.startswith("--") and "=" in arg
    )
    mode = options.get("--config-path")

    print("running", options.get("--expectations-path"), flush=True)
    print("argv:", " ".join(sys.argv[1:]), flush=True)
    print("diagnostics for", mode, file=sys.stderr, flush=True)

    if mode == "fail":
        sys.exit(3)
    if mode == "hang":
        pid_file = options.get("--expectations-path", "")
        if pid_file.endswith(".pid"):
            with open(pid_file + ".tmp", "w") as f:
                f.write(str(os.getpid()))
            os.replace(pid_file + ".tmp", pid_file)
        time.sleep(60)
    """
)


@pytest.fixture
def child_command(tmp_path: Path) -> Sequence[str]:
    """Command running a fake smoke test.

    The test's config path selects its behavior: "fail" exits 3, "hang"
    sleeps past any test timeout (writing its pid to the expectations path
    when that ends in ".pid"), anything else passes.
    """
    script = tmp_path / "fake_smoke.py"
    script.write_text(CHILD_SCRIPT)
    return [sys.executable, str(script)]


@pytest.fixture
def free_port() -> int:
    """A TCP port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])
