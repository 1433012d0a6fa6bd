"""
chatstore.services.live_files
=============================

Registry of live files that attachments may still point at.

The live files themselves are owned by the host application; this registry
only tracks which ids are currently valid. Sanitation receives the bound
method ``registry.valid_ids`` and calls it for a fresh snapshot each time.
"""

from __future__ import annotations

import logging
import threading
from typing import FrozenSet, Iterable, Optional, Set

logger = logging.getLogger(__name__)


class LiveFileRegistry:
    """Thread-safe set of valid live-file ids."""

    def __init__(self, ids: Optional[Iterable[str]] = None):
        self._lock = threading.Lock()
        self._ids: Set[str] = set(ids or ())

    def add(self, *live_file_ids: str) -> None:
        with self._lock:
            self._ids.update(live_file_ids)
        logger.debug("Registered live files: %s", live_file_ids)

    def discard(self, *live_file_ids: str) -> None:
        with self._lock:
            self._ids.difference_update(live_file_ids)
        logger.debug("Removed live files: %s", live_file_ids)

    def clear(self) -> None:
        with self._lock:
            self._ids.clear()

    def valid_ids(self) -> FrozenSet[str]:
        """Snapshot of the ids valid right now."""
        with self._lock:
            return frozenset(self._ids)

    def __contains__(self, live_file_id: object) -> bool:
        with self._lock:
            return live_file_id in self._ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)
