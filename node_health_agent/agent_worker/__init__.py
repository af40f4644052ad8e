"""
Agent worker package: background sampling.

Holds the shared health state, the fixed-period sampler loop that writes it,
and the verdict providers the probe servers read from.
"""

from node_health_agent.agent_worker.providers import (
    VerdictProvider,
    cached_verdict_provider,
    on_demand_verdict_provider,
)
from node_health_agent.agent_worker.sampler import (
    SamplerConfig,
    run_sampler,
    sample_once,
    start_sampler_thread,
)
from node_health_agent.agent_worker.state import SharedHealthState

__all__ = [
    "SamplerConfig",
    "SharedHealthState",
    "VerdictProvider",
    "cached_verdict_provider",
    "on_demand_verdict_provider",
    "run_sampler",
    "sample_once",
    "start_sampler_thread",
]
