"""
Verdict providers handed to the probe servers.

- cached: push model; returns whatever the sampler stored last.
- on-demand: pull model; each probe triggers exactly one synchronous sample.

A deployment uses exactly one of them (SAMPLING_MODE).
"""

from __future__ import annotations

from typing import Callable

from node_health_agent.agent_worker.state import SharedHealthState
from node_health_agent.health_source import HealthSource
from node_health_agent.health_source.models import HealthVerdict
from node_health_agent.logging import get_logger

logger = get_logger(__name__)

VerdictProvider = Callable[[], HealthVerdict]


def cached_verdict_provider(state: SharedHealthState) -> VerdictProvider:
    return state.current_verdict


def on_demand_verdict_provider(
    source: HealthSource,
    state: SharedHealthState | None = None,
) -> VerdictProvider:
    """
    Sample per probe. When state is given, the fresh snapshot is also stored
    so the last observed heights stay available.
    """

    def provide() -> HealthVerdict:
        try:
            snapshot = source.sample()
        except Exception as e:
            logger.exception("on_demand_sample_failed", source=source.name, error=str(e))
            return HealthVerdict.down()
        if state is not None:
            state.replace(snapshot)
        return snapshot.verdict

    return provide
