"""Dependency interception server using aiohttp."""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import aiohttp
from aiohttp import web

from depshare.constants import Constants
from .registry import DependencyRegistry
from .request_parser import RequestParser
from .resolver import RequestResolver, Resolution, ResolutionAction
from .upstream import UpstreamClient

logger = logging.getLogger(__name__)

# CLI attribute name for each config field
_ARG_NAMES = {
    "host": "PROXY_HOST",
    "port": "PROXY_PORT",
    "prefix": "PROXY_PREFIX",
    "upstream": "PROXY_UPSTREAM",
    "redirect_status": "PROXY_REDIRECT_STATUS",
    "timeout": "PROXY_TIMEOUT",
    "allow_external": "ALLOW_EXTERNAL",
}


@dataclass
class ProxyConfig:
    """Configuration for the proxy server."""

    host: str = Constants.DEFAULT_HOST
    port: int = Constants.DEFAULT_PORT
    prefix: str = Constants.DEPS_PREFIX
    upstream: Optional[str] = None
    redirect_status: int = Constants.DEFAULT_REDIRECT_STATUS
    timeout: int = Constants.REQUEST_TIMEOUT
    allow_external: bool = False

    def __post_init__(self) -> None:
        if self.redirect_status not in Constants.REDIRECT_STATUSES:
            raise ValueError(
                f"redirect_status must be one of {Constants.REDIRECT_STATUSES}, "
                f"got {self.redirect_status}"
            )

    @classmethod
    def from_args(cls, args: Any, file_config: Optional[Mapping[str, Any]] = None) -> "ProxyConfig":
        """Create config from CLI arguments layered over a config file.

        Args:
            args: Parsed CLI arguments namespace.
            file_config: Values loaded from a config file; CLI values win.

        Returns:
            ProxyConfig instance.
        """
        values: Dict[str, Any] = {}
        known = {f.name for f in fields(cls)}
        for name, value in (file_config or {}).items():
            if name in known and value is not None:
                values[name] = value
            elif name not in known:
                logger.warning("Ignoring unknown config key: %s", name)
        for name, arg_name in _ARG_NAMES.items():
            value = getattr(args, arg_name, None)
            if value is not None and value is not False:
                values[name] = value
        return cls(**values)


class DependencyProxyServer:
    """HTTP server that deduplicates shared dependency loads.

    Requests following the indirection convention are answered with a
    redirect to the first registered compatible copy; everything else is
    passed through to the upstream origin.
    """

    def __init__(self, config: ProxyConfig, registry: Optional[DependencyRegistry] = None):
        """Initialize the proxy server.

        Args:
            config: Server configuration.
            registry: Registry to use; a fresh one is created when omitted.
        """
        self._config = config
        self._app: Optional[web.Application] = None
        self._runner: Optional[web.AppRunner] = None
        self._stop_event: Optional[asyncio.Event] = None

        self._registry = registry if registry is not None else DependencyRegistry()
        self._resolver = RequestResolver(self._registry, RequestParser(config.prefix))
        self._upstream: Optional[UpstreamClient] = None
        if config.upstream:
            self._upstream = UpstreamClient(config.upstream, timeout=config.timeout)

    @property
    def registry(self) -> DependencyRegistry:
        return self._registry

    def create_app(self) -> web.Application:
        """Create the aiohttp application."""
        app = web.Application()
        app.router.add_get(f"{Constants.INTERNAL_PREFIX}/health", self._health_check)
        app.router.add_get(f"{Constants.INTERNAL_PREFIX}/registry", self._registry_dump)
        app.router.add_route("*", "/{path:.*}", self._handle_request)
        app.on_startup.append(self._on_startup)
        app.on_cleanup.append(self._on_cleanup)
        return app

    async def _health_check(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({
            "status": "ok",
            "prefix": self._resolver.parser.prefix,
            "upstream": self._config.upstream,
            "registry": self._registry.stats(),
        })

    async def _registry_dump(self, request: web.Request) -> web.Response:
        """Registry contents endpoint."""
        return web.json_response(self._registry.snapshot())

    async def _on_startup(self, app: web.Application) -> None:
        """Called when the server starts."""
        if self._upstream:
            await self._upstream.start()
        logger.info("Proxy server starting on %s:%s", self._config.host, self._config.port)

    async def _on_cleanup(self, app: web.Application) -> None:
        """Called when the server stops."""
        if self._upstream:
            await self._upstream.stop()
        logger.info("Proxy server stopped")

    async def _handle_request(self, request: web.Request) -> web.StreamResponse:
        """Handle an intercepted request.

        Args:
            request: Incoming HTTP request.

        Returns:
            Redirect, error or passed-through response.
        """
        resolution = self._resolver.resolve(str(request.url), request.headers.get("Referer"))

        if resolution.action == ResolutionAction.REDIRECT:
            return self._redirect_response(resolution)
        if resolution.action == ResolutionAction.REJECT:
            return web.json_response(
                {"error": "Malformed dependency request", "reason": resolution.reason},
                status=400,
            )

        logger.debug("Passing through: %s %s", request.method, request.rel_url.path)
        return await self._forward_request(request)

    def _redirect_response(self, resolution: Resolution) -> web.Response:
        """Create the redirect to the resolved target."""
        return web.Response(
            status=self._config.redirect_status,
            headers={
                "Location": resolution.target,
                "Cache-Control": "no-store",
            },
        )

    async def _forward_request(self, request: web.Request) -> web.Response:
        """Forward a pass-through request to the upstream origin.

        Args:
            request: Original request.

        Returns:
            Response from upstream, 404 without an upstream, 502 on failure.
        """
        path_qs = request.rel_url.path_qs
        if self._upstream is None:
            return web.json_response({"error": "Not found", "path": request.rel_url.path}, status=404)

        body = None
        if request.body_exists:
            body = await request.read()

        try:
            status, headers, response_body = await self._upstream.forward(
                path_qs,
                method=request.method,
                headers=dict(request.headers),
                body=body,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Upstream request failed for %s: %s", request.rel_url.path, e)
            return web.json_response(
                {"error": "Upstream request failed", "path": request.rel_url.path},
                status=502,
            )

        return web.Response(status=status, headers=headers, body=response_body)

    async def start(self) -> None:
        """Start the proxy server."""
        self._app = self.create_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(
            self._runner,
            self._config.host,
            self._config.port,
        )
        await site.start()

        logger.info(
            "depshare proxy listening on http://%s:%s",
            self._config.host, self._config.port,
        )
        logger.info("Dependency prefix: %s", self._config.prefix)
        logger.info("Upstream: %s", self._config.upstream or "(none)")

    async def run_forever(self) -> None:
        """Start the server and run until interrupted."""
        await self.start()
        self._stop_event = asyncio.Event()
        try:
            await self._stop_event.wait()
        except asyncio.CancelledError:
            pass
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop the proxy server."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._app = None


def run_proxy_server_sync(config: ProxyConfig) -> None:
    """Run the proxy server synchronously.

    Installs signal handlers for SIGTERM and SIGINT for clean shutdown.

    Args:
        config: Server configuration.
    """
    server = DependencyProxyServer(config)
    loop = asyncio.new_event_loop()

    async def run():
        await server.start()
        stop_event = asyncio.Event()
        running_loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            running_loop.add_signal_handler(sig, stop_event.set)
        await stop_event.wait()
        logger.info("Shutdown signal received, stopping...")
        await server.stop()

    try:
        loop.run_until_complete(run())
    except KeyboardInterrupt:
        # Fallback for platforms where signal handlers don't work (Windows)
        loop.run_until_complete(server.stop())
    finally:
        loop.close()
        logger.info("Proxy server shutdown complete")
