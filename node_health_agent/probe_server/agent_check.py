"""
HAProxy agent-check TCP server.

For every accepted connection: read the current verdict, write
"<status_line>\\n", close. No request is read and there is no keep-alive.
Each connection is handled in its own thread so the accept loop goes straight
back to accepting. Accept and write failures are logged and only abandon the
affected connection.

Connection lifecycle: Accepted -> StatusRead -> Written -> Closed.
"""

from __future__ import annotations

import socket
import socketserver
import threading
from typing import Any

from node_health_agent.agent_worker.providers import VerdictProvider
from node_health_agent.core.exceptions import ProbeIOError
from node_health_agent.health_source.models import HealthVerdict
from node_health_agent.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 9876
WRITE_TIMEOUT_SEC = 5.0


def format_agent_response(verdict: HealthVerdict) -> bytes:
    """Wire form of a verdict: one line matching ^(up|down)( weight=\\d{1,3})?\\n$."""
    return (verdict.status_line + "\n").encode("ascii")


class AgentCheckHandler(socketserver.BaseRequestHandler):
    """Writes one status line per connection; the server closes the socket afterwards."""

    server: "AgentCheckServer"

    def handle(self) -> None:
        peer = _format_peer(self.client_address)
        try:
            verdict = self.server.verdict_provider()
        except Exception as e:
            logger.exception("agent_check_status_failed", peer=peer, error=str(e))
            verdict = HealthVerdict.down()
        try:
            self.request.settimeout(WRITE_TIMEOUT_SEC)
            self.request.sendall(format_agent_response(verdict))
        except OSError as e:
            raise ProbeIOError(f"write to {peer} failed: {e}") from e
        logger.debug("agent_check_sent", peer=peer, status=verdict.status_line)


class AgentCheckServer(socketserver.ThreadingTCPServer):
    """Thread-per-connection TCP server answering HAProxy agent checks."""

    allow_reuse_address = True
    daemon_threads = True
    block_on_close = False

    def __init__(
        self,
        verdict_provider: VerdictProvider,
        host: str = DEFAULT_LISTEN_HOST,
        port: int = DEFAULT_LISTEN_PORT,
    ) -> None:
        self.verdict_provider = verdict_provider
        super().__init__((host, port), AgentCheckHandler)

    @property
    def port(self) -> int:
        return self.server_address[1]

    def get_request(self) -> tuple[socket.socket, Any]:
        try:
            return super().get_request()
        except OSError as e:
            # socketserver drops the failed accept and keeps serving
            logger.warning("agent_check_accept_failed", error=str(e))
            raise

    def handle_error(self, request: Any, client_address: Any) -> None:
        logger.exception("agent_check_connection_failed", peer=_format_peer(client_address))

    def serve(self) -> None:
        """Accept connections until shutdown() is called from another thread."""
        host, port = self.server_address[:2]
        logger.info("agent_check_listening", host=host, port=port)
        try:
            self.serve_forever()
        finally:
            logger.info("agent_check_stopped", host=host, port=port)


def start_agent_check_server(
    verdict_provider: VerdictProvider,
    host: str = DEFAULT_LISTEN_HOST,
    port: int = DEFAULT_LISTEN_PORT,
) -> tuple[AgentCheckServer, threading.Thread]:
    """Bind and serve in a background thread. Used by tests and embedding callers."""
    server = AgentCheckServer(verdict_provider, host=host, port=port)
    thread = threading.Thread(target=server.serve, name="agent-check-server", daemon=True)
    thread.start()
    return server, thread


def _format_peer(client_address: Any) -> str:
    if isinstance(client_address, tuple) and len(client_address) >= 2:
        return f"{client_address[0]}:{client_address[1]}"
    return str(client_address)
