"""
Data models for health sampling output.

HealthVerdict is what probes report; HealthSnapshot is the unit a health
source produces and shared state stores (verdict plus chain-height fields).
Both are frozen: each sampling cycle replaces them wholesale.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

WEIGHT_FULL = 100
WEIGHT_DEGRADED = 50
WEIGHT_NONE = 0


@dataclass(frozen=True)
class HealthVerdict:
    """
    Health and traffic weight for the monitored node.

    status_line is the HAProxy agent-check payload without the trailing
    newline: "up weight=N" when healthy, "down" otherwise.
    """

    healthy: bool
    weight: int
    status_line: str

    def __post_init__(self) -> None:
        if not (0 <= self.weight <= 100):
            raise ValueError(f"weight must be between 0 and 100, got {self.weight}")

    @classmethod
    def up(cls, weight: int = WEIGHT_FULL) -> "HealthVerdict":
        return cls(healthy=True, weight=weight, status_line=f"up weight={weight}")

    @classmethod
    def down(cls, weight: int = WEIGHT_NONE) -> "HealthVerdict":
        return cls(healthy=False, weight=weight, status_line="down")

    @property
    def http_status(self) -> int:
        """Status code for the HTTP probe endpoint."""
        return 200 if self.healthy else 500


@dataclass(frozen=True)
class HealthSnapshot:
    """
    Result of one sampling cycle.

    local_height / highest_reference_height are only meaningful for the
    chain-height source; both are 0 after a failed local read. sampled_at is
    None for the initial snapshot created before the first cycle.
    """

    verdict: HealthVerdict
    local_height: int = 0
    highest_reference_height: int = 0
    sampled_at: float | None = None

    @classmethod
    def initial(cls) -> "HealthSnapshot":
        """Unknown state at process start: reported as down."""
        return cls(verdict=HealthVerdict.down())

    @classmethod
    def failed(cls) -> "HealthSnapshot":
        return cls(verdict=HealthVerdict.down(), sampled_at=time.time())
