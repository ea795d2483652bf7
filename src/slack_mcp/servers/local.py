import sys
import asyncio
import logging
import argparse

import mcp.server.stdio
from dotenv import load_dotenv

from slack_mcp.servers.slack.main import create_server, get_initialization_options
from slack_mcp.utils.config import ConfigError, SlackConfig, load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("slack-mcp-local-stdio")


async def run_stdio_server(server, get_initialization_options):
    """Run the server using stdin/stdout streams until the client closes stdin"""
    logger.info("Starting stdio server")
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            get_initialization_options(),
        )
    logger.info("Stdio server stopped")


async def run_until_closed(server_instance):
    """Run over stdio, then release the Slack client's connections"""
    try:
        await run_stdio_server(
            server_instance, lambda: get_initialization_options(server_instance)
        )
    finally:
        await server_instance.slack_client.aclose()


def serve(config: SlackConfig):
    """Serve the Slack tools over stdio"""
    asyncio.run(run_until_closed(create_server(config)))


def main():
    """Main entry point for the stdio server"""
    parser = argparse.ArgumentParser(description="Slack MCP Local Stdio Server")
    parser.parse_args()

    load_dotenv()

    try:
        config = load_config(transport="stdio")
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    serve(config)


if __name__ == "__main__":
    logger.info("Starting Slack MCP local stdio server")
    main()
