import logging
from typing import Optional

import mcp.types as types
from mcp.types import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from slack_mcp.servers.slack.handlers.tools import dispatch_tool
from slack_mcp.servers.slack.schemas import tool_list
from slack_mcp.utils.config import SlackConfig
from slack_mcp.utils.slack.client import SlackClient

SERVER_NAME = "slack-mcp"
SERVER_VERSION = "0.1.0"

INSTRUCTIONS = (
    "Slack integration tools. Requires SLACK_BOT_TOKEN env var (also accepts SLACK_TOKEN). "
    "Optionally set SLACK_DEFAULT_CHANNEL for a default channel."
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(SERVER_NAME)


def create_slack_client(config: SlackConfig) -> SlackClient:
    """Create the Slack client shared by every tool call of this process"""
    return SlackClient(config.token, base_url=config.api_base_url)


def create_server(config: SlackConfig, slack_client: Optional[SlackClient] = None):
    """
    Create a new server instance exposing the Slack tools.

    Args:
        config: Process configuration, read-only after startup
        slack_client: Client used for outbound calls. Anything with async
            post(method, payload) and aclose() works; defaults to a
            SlackClient built from config
    """
    server = Server(SERVER_NAME, version=SERVER_VERSION, instructions=INSTRUCTIONS)

    server.config = config
    server.slack_client = slack_client or create_slack_client(config)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        """List available tools"""
        logger.info("Listing tools")
        return tool_list()

    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        """Handle tool execution requests

        Not registered through server.call_tool(), which converts exceptions into
        isError results. An McpError raised here reaches the client as a JSON-RPC
        error with its code and data.
        """
        name = req.params.name
        arguments = req.params.arguments
        logger.info(f"Calling tool: {name}")
        logger.debug(f"Arguments for {name}: {arguments}")
        content = await dispatch_tool(server.slack_client, server.config, name, arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = handle_call_tool

    return server


def get_initialization_options(server_instance: Server) -> InitializationOptions:
    """Get the initialization options for the server"""
    return InitializationOptions(
        server_name=SERVER_NAME,
        server_version=SERVER_VERSION,
        capabilities=server_instance.get_capabilities(
            notification_options=NotificationOptions(),
            experimental_capabilities={},
        ),
        instructions=INSTRUCTIONS,
    )

