"""Boundary between intercepted requests and the dependency registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from depshare.common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from depshare.versioning import ParseError, parse, parse_range
from .errors import MalformedRequestError
from .registry import DependencyRegistry
from .request_parser import DependencyRequest, RequestParser

logger = logging.getLogger(__name__)


class ResolutionAction(Enum):
    """What the interception host should do with a request."""

    REDIRECT = "redirect"
    PASS = "pass"
    REJECT = "reject"


@dataclass
class Resolution:
    """Outcome of resolving a single intercepted request."""

    action: ResolutionAction
    target: Optional[str] = None
    reason: str = ""
    request: Optional[DependencyRequest] = None


class RequestResolver:
    """Turns intercepted requests into redirects to shared dependency targets.

    The registry is injected so that each server (or test) owns its own table.
    """

    def __init__(self, registry: DependencyRegistry, parser: Optional[RequestParser] = None):
        """Initialize the resolver.

        Args:
            registry: Registry shared by every request this resolver handles.
            parser: Request parser; defaults to the standard ``/deps:`` prefix.
        """
        self._registry = registry
        self._parser = parser or RequestParser()

    @property
    def registry(self) -> DependencyRegistry:
        return self._registry

    @property
    def parser(self) -> RequestParser:
        return self._parser

    def resolve(self, url: str, referrer: Optional[str] = None) -> Resolution:
        """Resolve an intercepted request.

        Args:
            url: Absolute request URL.
            referrer: Referring document URL, if the client sent one.

        Returns:
            Resolution; PASS for requests outside the convention, REJECT for
            malformed ones, REDIRECT otherwise.
        """
        try:
            request = self._parser.parse(url, referrer)
        except MalformedRequestError as e:
            logger.warning("Rejected dependency request: %s (%s)", safe_url(url), e.reason)
            return Resolution(ResolutionAction.REJECT, reason=e.reason)

        if request is None:
            return Resolution(ResolutionAction.PASS, reason="not a dependency request")

        # Validate before the registry sees anything; a bad request leaves no trace.
        try:
            parse(request.provided)
            parse_range(request.demanded)
        except ParseError as e:
            logger.warning(
                "Rejected dependency request for %s: %s", request.key, e,
            )
            return Resolution(ResolutionAction.REJECT, reason=str(e), request=request)

        with Timer() as t:
            target = self._registry.resolve(
                request.key,
                request.provided,
                request.demanded,
                request.candidate_target,
            )

        if is_debug_enabled(logger):
            logger.debug(
                "Dependency resolved",
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    key=request.key,
                    provided=request.provided,
                    demanded=request.demanded,
                    target=safe_url(target),
                    reused=target != request.candidate_target,
                    duration_ms=t.duration_ms(),
                ),
            )
        logger.info(
            "Resolve: %s@%s (demanded %s) -> %s",
            request.key, request.provided, request.demanded, target,
        )
        return Resolution(ResolutionAction.REDIRECT, target=target, request=request)
