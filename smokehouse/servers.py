"""Static file servers hosting the pages smoke tests run against."""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field

from aiohttp import web

from smokehouse.models.definition import ServerSpec

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class StaticServer:
    """Handle to a running static server."""

    name: str
    host: str
    port: int
    runner: web.AppRunner = field(repr=False)

    @property
    def url(self) -> str:
        """Base URL of the server."""
        return f"http://{self.host}:{self.port}"


def create_app(spec: ServerSpec) -> web.Application:
    """Build an application serving `spec.root` at `/`."""
    app = web.Application()
    app.router.add_static("/", spec.root, show_index=True)
    return app


@asynccontextmanager
async def serve_static(spec: ServerSpec) -> AsyncGenerator[StaticServer, None]:
    """Serve a directory for the duration of the context.

    Raises:
        FileNotFoundError: If the document root does not exist
        OSError: If the address cannot be bound

    """
    if not spec.root.is_dir():
        raise FileNotFoundError(f"Server root not found: {spec.root}")

    runner = web.AppRunner(create_app(spec), access_log=None)
    await runner.setup()
    try:
        site = web.TCPSite(runner, spec.host, spec.port)
        await site.start()
        port = _bound_port(runner, spec.port)
        server = StaticServer(name=spec.name, host=spec.host, port=port, runner=runner)
        log.info("Started %s server at %s (root=%s)", spec.name, server.url, spec.root)
        yield server
    finally:
        await runner.cleanup()
        log.info("Stopped %s server", spec.name)


@asynccontextmanager
async def serve_all(
    specs: Sequence[ServerSpec],
) -> AsyncGenerator[Sequence[StaticServer], None]:
    """Start every server, stopping all of them when the context exits.

    Servers already started are stopped even when a later one fails to start
    or the body raises.
    """
    async with AsyncExitStack() as stack:
        servers = [await stack.enter_async_context(serve_static(s)) for s in specs]
        yield servers


def _bound_port(runner: web.AppRunner, requested: int) -> int:
    """Resolve the actual port, which differs from `requested` when it is 0."""
    for address in runner.addresses:
        if isinstance(address, tuple) and len(address) >= 2:
            return int(address[1])
    return requested
