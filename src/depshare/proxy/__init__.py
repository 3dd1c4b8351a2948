"""depshare proxy server package.

This package provides the HTTP interception host: it recognises shared
dependency indirection requests, resolves them against an in-memory registry
and redirects to a single compatible copy, passing every other request
through to the origin.
"""

from .errors import MalformedRequestError
from .request_parser import RequestParser, DependencyRequest
from .registry import DependencyEntry, DependencyRegistry
from .resolver import RequestResolver, Resolution, ResolutionAction
from .upstream import UpstreamClient
from .server import DependencyProxyServer, ProxyConfig

__all__ = [
    "MalformedRequestError",
    "RequestParser",
    "DependencyRequest",
    "DependencyEntry",
    "DependencyRegistry",
    "RequestResolver",
    "Resolution",
    "ResolutionAction",
    "UpstreamClient",
    "DependencyProxyServer",
    "ProxyConfig",
]
