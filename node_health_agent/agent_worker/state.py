"""
Shared health state between the sampler (single writer) and probe handlers
(many readers).

The state holds one immutable HealthSnapshot. The writer swaps the reference
under a lock; readers take the same lock only for the reference read, never
across a fetch, so a slow sample cannot stall a probe. A reader therefore
always sees a snapshot produced by exactly one sampling cycle.
"""

from __future__ import annotations

import threading

from node_health_agent.health_source.models import HealthSnapshot, HealthVerdict


class SharedHealthState:
    """Current HealthSnapshot; created with the down verdict until the first cycle."""

    def __init__(self, initial: HealthSnapshot | None = None) -> None:
        self._lock = threading.Lock()
        self._snapshot = initial or HealthSnapshot.initial()
        self._updates = 0

    def replace(self, snapshot: HealthSnapshot) -> HealthSnapshot:
        """Swap in a new snapshot; returns the one it replaced."""
        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot
            self._updates += 1
        return previous

    def read(self) -> HealthSnapshot:
        with self._lock:
            return self._snapshot

    def current_verdict(self) -> HealthVerdict:
        return self.read().verdict

    @property
    def update_count(self) -> int:
        """Number of completed writes since creation."""
        with self._lock:
            return self._updates
