"""Upstream client for passing non-dependency requests through to the origin."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Tuple

import aiohttp

from depshare.common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from depshare.constants import Constants

logger = logging.getLogger(__name__)

_HOP_BY_HOP = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "proxy-connection",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "host",
}

# Canonical header names to forward (lowercased for comparison)
_FORWARD_HEADERS = {
    "accept-ranges": "Accept-Ranges",
    "cache-control": "Cache-Control",
    "content-disposition": "Content-Disposition",
    "content-encoding": "Content-Encoding",
    "content-length": "Content-Length",
    "content-range": "Content-Range",
    "content-type": "Content-Type",
    "etag": "ETag",
    "last-modified": "Last-Modified",
    "location": "Location",
    "retry-after": "Retry-After",
    "vary": "Vary",
    "www-authenticate": "WWW-Authenticate",
}


class UpstreamClient:
    """Client for forwarding requests to the origin that serves the bundles."""

    def __init__(self, upstream: str, timeout: int = Constants.REQUEST_TIMEOUT):
        """Initialize the upstream client.

        Args:
            upstream: Base URL of the origin, e.g. ``http://localhost:3000``.
            timeout: Request timeout in seconds.
        """
        self._upstream = upstream.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def upstream(self) -> str:
        return self._upstream

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            connector = aiohttp.TCPConnector(limit=100)
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                connector=connector,
                auto_decompress=False,
            )

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    def build_url(self, path: str) -> str:
        """Build the upstream URL from a request path (query string included)."""
        request_path = path if path.startswith("/") else f"/{path}"
        return f"{self._upstream}{request_path}"

    @asynccontextmanager
    async def open_response(
        self,
        url: str,
        method: str,
        headers: Dict[str, str],
        body: Optional[bytes],
    ):
        """Open an upstream response as an async context manager.

        Redirects are not followed; they are relayed to the client as-is.
        """
        if self._session is None:
            await self.start()
        assert self._session is not None
        response = await self._session.request(
            method,
            url,
            headers=headers,
            data=body,
            allow_redirects=False,
        )
        try:
            yield response
        finally:
            response.release()

    async def forward(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> Tuple[int, Dict[str, str], bytes]:
        """Forward a request to the origin.

        Args:
            path: Request path including query string.
            method: HTTP method.
            headers: Incoming request headers.
            body: Request body, if any.

        Returns:
            Tuple of (status, filtered headers, body bytes).

        Raises:
            aiohttp.ClientError: The origin could not be reached.
            asyncio.TimeoutError: The origin did not answer in time.
        """
        url = self.build_url(path)
        request_headers = self._build_request_headers(headers)
        with Timer() as t:
            async with self.open_response(url, method, request_headers, body) as response:
                response_body = await response.read()
                status = response.status
                response_headers = self.filter_response_headers(dict(response.headers))

        if is_debug_enabled(logger):
            logger.debug(
                "Upstream response",
                extra=extra_context(
                    event="http_response",
                    component="upstream",
                    action=method,
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=safe_url(url),
                ),
            )
        return status, response_headers, response_body

    def _build_request_headers(
        self, headers: Optional[Dict[str, str]]
    ) -> Dict[str, str]:
        """Build request headers to send upstream."""
        request_headers: Dict[str, str] = {}
        connection_tokens = set()
        if headers:
            for k, v in headers.items():
                if k.lower() == "connection":
                    connection_tokens = {token.strip().lower() for token in v.split(",")}
                    break

            for key, value in headers.items():
                key_lower = key.lower()
                if key_lower in _HOP_BY_HOP or key_lower in connection_tokens:
                    continue
                request_headers[key] = value

        request_headers.setdefault("User-Agent", Constants.USER_AGENT)
        request_headers.setdefault("Accept", "*/*")
        return request_headers

    def filter_response_headers(self, headers: Dict[str, Any]) -> Dict[str, str]:
        """Filter response headers to forward to client.

        Args:
            headers: Raw response headers.

        Returns:
            Filtered headers dict.
        """
        filtered = {}
        for key, value in headers.items():
            canonical = _FORWARD_HEADERS.get(key.lower())
            if canonical is not None:
                filtered[canonical] = str(value)
        return filtered

    async def __aenter__(self) -> "UpstreamClient":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.stop()
