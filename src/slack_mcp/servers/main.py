import argparse
import logging
import sys

from dotenv import load_dotenv

from slack_mcp.utils.config import TRANSPORTS, ConfigError, load_config

# Configure logging for the main script
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("slack-mcp")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Slack MCP Server")
    parser.add_argument(
        "--transport",
        default=None,
        help=f"Transport to serve on ({' or '.join(TRANSPORTS)}), overrides TRANSPORT",
    )
    parser.add_argument("--host", default=None, help="Host for SSE mode, overrides SSE_HOST")
    parser.add_argument(
        "--port", type=int, default=None, help="Port for SSE mode, overrides SSE_PORT"
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Parse arguments, load the configuration and launch the selected transport"""
    args = parse_args(argv)
    load_dotenv()

    try:
        config = load_config(transport=args.transport, host=args.host, port=args.port)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)
    logger.info(f"Starting slack-mcp server ({config.transport})")

    if config.transport == "stdio":
        from slack_mcp.servers.local import serve
    else:
        from slack_mcp.servers.remote import serve

    serve(config)


if __name__ == "__main__":
    main()
