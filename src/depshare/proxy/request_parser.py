"""Request parser for extracting dependency indirection parameters from URLs."""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass
from typing import Dict, List, Optional

from depshare.constants import Constants
from .errors import MalformedRequestError


@dataclass
class DependencyRequest:
    """Result of parsing an indirection request."""

    key: str
    path: str
    provided: str
    demanded: str
    base_url: str
    raw_url: str = ""

    @property
    def candidate_target(self) -> str:
        """Absolute URL of the requester's own copy of the dependency."""
        return urllib.parse.urljoin(self.base_url, self.path)


def _first(query: Dict[str, List[str]], name: str) -> Optional[str]:
    values = query.get(name)
    if not values:
        return None
    return values[0].strip() or None


def _is_absolute(url: Optional[str]) -> bool:
    if not url:
        return False
    parts = urllib.parse.urlsplit(url)
    return bool(parts.scheme and parts.netloc)


class RequestParser:
    """Parser for the ``<prefix><key>?path=..&provided=..&demanded=..`` convention."""

    def __init__(self, prefix: str = Constants.DEPS_PREFIX):
        """Initialize the request parser.

        Args:
            prefix: Path prefix that marks an indirection request.
        """
        if not prefix.startswith("/"):
            prefix = "/" + prefix
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def matches(self, url: str) -> bool:
        """Return True if url follows the indirection convention."""
        path = urllib.parse.unquote(urllib.parse.urlsplit(url).path)
        return path.startswith(self._prefix)

    def parse(self, url: str, referrer: Optional[str] = None) -> Optional[DependencyRequest]:
        """Parse an absolute request URL.

        Args:
            url: Absolute URL of the intercepted request.
            referrer: URL of the referring document, used to resolve ``path``.

        Returns:
            DependencyRequest, or None when the URL does not use the convention.

        Raises:
            MalformedRequestError: The convention matched but parameters are missing.
        """
        parts = urllib.parse.urlsplit(url)
        path = urllib.parse.unquote(parts.path)
        if not path.startswith(self._prefix):
            return None

        key = path[len(self._prefix):]
        if not key:
            raise MalformedRequestError(url, "missing dependency key")

        query = urllib.parse.parse_qs(parts.query, keep_blank_values=True)
        ref_path = _first(query, Constants.QUERY_PATH)
        if ref_path is None:
            raise MalformedRequestError(url, "missing 'path' parameter")

        provided = _first(query, Constants.QUERY_PROVIDED) or _first(query, Constants.QUERY_VERSION)
        if provided is None:
            raise MalformedRequestError(url, "missing 'provided' or 'version' parameter")
        demanded = _first(query, Constants.QUERY_DEMANDED) or provided

        return DependencyRequest(
            key=key,
            path=ref_path,
            provided=provided,
            demanded=demanded,
            base_url=referrer if _is_absolute(referrer) else url,
            raw_url=url,
        )
