"""In-memory registry of resolved shared-dependency locations."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from depshare.common.logging_utils import extra_context, is_debug_enabled
from depshare.versioning import parse, satisfies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyEntry:
    """A registered implementation of a dependency key."""

    version: str
    target: str
    created_at: float = field(default_factory=time.time, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "target": self.target, "created_at": self.created_at}


class DependencyRegistry:
    """Process-lifetime table of dependency entries, append-only per key.

    ``resolve`` is first-match: the earliest registered entry whose version
    satisfies the demanded range wins, even if a later one is newer.
    """

    def __init__(self) -> None:
        """Create an empty registry."""
        self._entries: Dict[str, Tuple[DependencyEntry, ...]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()
        self._hits = 0
        self._registrations = 0

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def resolve(
        self,
        key: str,
        provided_version: str,
        demanded_range: str,
        candidate_target: str,
    ) -> str:
        """Return the target serving key for demanded_range, registering if needed.

        Args:
            key: Dependency key.
            provided_version: Version offered by the requester.
            demanded_range: Range the importer requires.
            candidate_target: Absolute URL of the requester's own copy.

        Returns:
            Target of the first compatible entry, or candidate_target if it
            was registered by this call.

        Raises:
            ParseError: provided_version or demanded_range is malformed.
        """
        parse(provided_version)
        with self._lock_for(key):
            existing = self._entries.get(key)
            if existing:
                for entry in existing:
                    if satisfies(entry.version, demanded_range):
                        with self._guard:
                            self._hits += 1
                        if is_debug_enabled(logger):
                            logger.debug(
                                "Reusing registered dependency",
                                extra=extra_context(
                                    event="registry_hit",
                                    component="registry",
                                    key=key,
                                    demanded=demanded_range,
                                    version=entry.version,
                                ),
                            )
                        return entry.target

            entry = DependencyEntry(version=provided_version, target=candidate_target)
            # Publish a new tuple so readers never see a half-built sequence.
            self._entries[key] = (existing or ()) + (entry,)
            with self._guard:
                self._registrations += 1
            count = len(self._entries[key])

        logger.info(
            "Registered %s@%s -> %s (entries=%d)",
            key, provided_version, candidate_target, count,
        )
        return candidate_target

    def entries(self, key: str) -> Tuple[DependencyEntry, ...]:
        """Return the entries registered for key, oldest first."""
        return self._entries.get(key, ())

    def keys(self) -> List[str]:
        """Return all registered keys in first-registration order."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        """Return a JSON-ready copy of every key and its entries."""
        return {key: [e.to_dict() for e in entries] for key, entries in list(self._entries.items())}

    def stats(self) -> Dict[str, Any]:
        """Get registry statistics."""
        entries = list(self._entries.values())
        return {
            "keys": len(entries),
            "entries": sum(len(e) for e in entries),
            "hits": self._hits,
            "registrations": self._registrations,
        }
