import sys
import logging
import argparse
import threading
import contextlib

import uvicorn
from dotenv import load_dotenv
from starlette.routing import Mount, Route
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST

from mcp.server.sse import SseServerTransport
from mcp.types import LATEST_PROTOCOL_VERSION

from slack_mcp.servers.slack.main import (
    SERVER_NAME,
    create_server,
    get_initialization_options,
)
from slack_mcp.servers.slack.schemas import TOOL_SCHEMAS
from slack_mcp.utils.config import ConfigError, SlackConfig, load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("slack-mcp-server")

SSE_PATH = "/sse"
MESSAGES_PATH = "/messages/"

# Prometheus metrics
active_connections = Gauge(
    "slack_mcp_active_connections", "Number of active SSE connections"
)
connection_total = Counter(
    "slack_mcp_connection_total", "Total number of SSE connections"
)


def create_metrics_app():
    """Create a separate Starlette app just for metrics"""

    async def metrics_endpoint(request):
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    routes = [Route("/metrics", endpoint=metrics_endpoint)]

    return Starlette(routes=routes)


def create_starlette_app(config: SlackConfig, server_instance=None):
    """
    Create a Starlette app serving the Slack tools over SSE.

    Clients open the event stream at /sse and post their messages to the
    /messages/ endpoint announced on that stream.
    """
    if server_instance is None:
        server_instance = create_server(config)

    sse_transport = SseServerTransport(MESSAGES_PATH)

    async def handle_sse(request):
        """Handle an SSE connection for the lifetime of one client session"""
        client = request.client.host if request.client else "unknown"
        logger.info(f"New SSE connection from {client}")

        active_connections.inc()
        connection_total.inc()

        try:
            async with sse_transport.connect_sse(
                request.scope, request.receive, request._send
            ) as streams:
                await server_instance.run(
                    streams[0],
                    streams[1],
                    get_initialization_options(server_instance),
                )
        finally:
            active_connections.dec()
            logger.info(f"Closed SSE connection from {client}")

        return Response()

    # Health checks
    async def health_check(request):
        """Health check endpoint"""
        return JSONResponse(
            {
                "status": "ok",
                "server": SERVER_NAME,
                "protocol_version": LATEST_PROTOCOL_VERSION,
                "tools": list(TOOL_SCHEMAS),
            }
        )

    @contextlib.asynccontextmanager
    async def lifespan(app):
        yield
        logger.info("Closing Slack API connections")
        await server_instance.slack_client.aclose()

    routes = [
        Route(SSE_PATH, endpoint=handle_sse),
        Mount(MESSAGES_PATH, app=sse_transport.handle_post_message),
        Route("/", endpoint=health_check),
        Route("/health_check", endpoint=health_check),
    ]

    return Starlette(routes=routes, lifespan=lifespan)


def run_metrics_server(host, port):
    """Run a separate metrics server on the specified port"""
    metrics_app = create_metrics_app()
    logger.info(f"Starting metrics server on {host}:{port}")
    uvicorn.run(metrics_app, host=host, port=port)


def serve(config: SlackConfig):
    """Serve the Slack tools over SSE until interrupted"""
    if config.metrics_port:
        metrics_thread = threading.Thread(
            target=run_metrics_server,
            args=(config.host, config.metrics_port),
            daemon=True,
        )
        metrics_thread.start()
        logger.info(
            f"Starting Metrics server on http://{config.host}:{config.metrics_port}/metrics"
        )

    app = create_starlette_app(config)
    logger.info(
        f"slack-mcp SSE server listening on http://{config.host}:{config.port}{SSE_PATH}"
    )
    # uvicorn handles SIGINT/SIGTERM and returns once the listener is closed
    uvicorn.run(app, host=config.host, port=config.port)
    logger.info("Shutting down SSE server")


def main():
    """Main entry point for the SSE server"""
    parser = argparse.ArgumentParser(description="Slack MCP SSE Server")
    parser.add_argument("--host", default=None, help="Host for Starlette server")
    parser.add_argument(
        "--port", type=int, default=None, help="Port for Starlette server"
    )

    args = parser.parse_args()

    load_dotenv()

    try:
        config = load_config(transport="sse", host=args.host, port=args.port)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    serve(config)


if __name__ == "__main__":
    main()
