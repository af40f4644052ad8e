"""
FastAPI server: HTTP status-code health endpoint.

GET /rpc-health answers 200 when the node is healthy and 500 when it is
unhealthy or the check failed. The body is always empty. The route is a plain
def so FastAPI runs the (possibly blocking) verdict provider in its threadpool.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Response

from node_health_agent import __version__
from node_health_agent.agent_worker.providers import VerdictProvider
from node_health_agent.health_source.models import HealthVerdict
from node_health_agent.logging import get_logger

logger = get_logger(__name__)

HEALTH_ROUTE = "/rpc-health"


def create_app(verdict_provider: VerdictProvider, lifespan: Any = None) -> FastAPI:
    """
    Build the app around a verdict provider (on-demand or cached).
    lifespan owns whatever feeds the provider, e.g. the background sampler.
    """
    app = FastAPI(
        title="Node Health Agent",
        description="Status-code health endpoint for load balancer checks.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    @app.get(HEALTH_ROUTE)
    def rpc_health() -> Response:
        """200 healthy, 500 unhealthy or error; empty body."""
        try:
            verdict = verdict_provider()
        except Exception as e:
            logger.exception("rpc_health_failed", error=str(e))
            verdict = HealthVerdict.down()
        logger.debug("rpc_health_served", status=verdict.status_line, http_status=verdict.http_status)
        return Response(status_code=verdict.http_status)

    return app
