"""
Structured logging for Node Health Agent.

JSON logs with timestamp, event_type and level.
Use get_logger() in all agent modules for aggregation-friendly output.
"""

from node_health_agent.logging.logger import bind_source, get_logger

__all__ = ["bind_source", "get_logger"]
