"""
Probe server package: HAProxy agent-check over TCP.

The HTTP status-code endpoint lives in node_health_agent.api_server.
"""

from node_health_agent.probe_server.agent_check import (
    AgentCheckServer,
    format_agent_response,
    start_agent_check_server,
)

__all__ = ["AgentCheckServer", "format_agent_response", "start_agent_check_server"]
