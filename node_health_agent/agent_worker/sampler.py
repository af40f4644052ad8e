"""
Sampler loop: fixed-period background sampling into shared state.

Each iteration calls the health source once and replaces the shared snapshot
once. A failing iteration stores the down snapshot, is logged, and the loop
carries on. The sleep happens strictly after each fetch completes (no
backoff, no jitter, no catching up on missed ticks).

Runs in a daemon thread until process exit; stop_event allows a clean stop.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from node_health_agent.agent_worker.state import SharedHealthState
from node_health_agent.health_source import HealthSource
from node_health_agent.health_source.models import HealthSnapshot
from node_health_agent.logging import bind_source, get_logger

logger = get_logger(__name__)

DEFAULT_INTERVAL_SEC = 0.5
MIN_INTERVAL_SEC = 0.01


@dataclass
class SamplerConfig:
    """interval_sec: sleep between the end of one sample and the start of the next."""

    interval_sec: float = DEFAULT_INTERVAL_SEC
    max_cycles: int | None = None  # None = run until stopped

    def __post_init__(self) -> None:
        self.interval_sec = max(MIN_INTERVAL_SEC, float(self.interval_sec))


def sample_once(source: HealthSource, state: SharedHealthState) -> HealthSnapshot:
    """
    One cycle: sample and store. Exceptions escaping the source are logged and
    stored as the down snapshot; never raises.
    """
    log = bind_source(logger, source.name)
    try:
        snapshot = source.sample()
    except Exception as e:
        log.exception("sampler_cycle_failed", error=str(e))
        snapshot = HealthSnapshot.failed()
    previous = state.replace(snapshot)
    if previous.verdict != snapshot.verdict:
        log.info(
            "sampler_verdict_changed",
            previous=previous.verdict.status_line,
            status=snapshot.verdict.status_line,
            local_height=snapshot.local_height,
            highest_reference_height=snapshot.highest_reference_height,
        )
    return snapshot


def run_sampler(
    source: HealthSource,
    state: SharedHealthState,
    config: SamplerConfig | None = None,
    stop_event: threading.Event | None = None,
) -> int:
    """
    Sample forever (or until stop_event is set / max_cycles reached).
    Returns the number of completed cycles.
    """
    config = config or SamplerConfig()
    stop_event = stop_event or threading.Event()
    log = bind_source(logger, source.name)
    cycle = 0
    log.info("sampler_started", interval_sec=config.interval_sec)
    while not stop_event.is_set():
        sample_once(source, state)
        cycle += 1
        if config.max_cycles is not None and cycle >= config.max_cycles:
            break
        stop_event.wait(config.interval_sec)
    log.info("sampler_stopped", cycles=cycle)
    return cycle


def start_sampler_thread(
    source: HealthSource,
    state: SharedHealthState,
    config: SamplerConfig | None = None,
    stop_event: threading.Event | None = None,
) -> threading.Thread:
    """Spawn run_sampler in a daemon thread; no join expected before process exit."""
    thread = threading.Thread(
        target=run_sampler,
        args=(source, state, config, stop_event),
        name="health-sampler",
        daemon=True,
    )
    thread.start()
    return thread
