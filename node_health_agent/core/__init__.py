"""
Core utilities: exceptions and cross-cutting concerns shared by the
health sources, sampler and probe servers.
"""

from node_health_agent.core.exceptions import (
    ConfigurationError,
    FetchError,
    NodeHealthAgentError,
    ParseError,
    ProbeIOError,
)

__all__ = [
    "ConfigurationError",
    "FetchError",
    "NodeHealthAgentError",
    "ParseError",
    "ProbeIOError",
]
