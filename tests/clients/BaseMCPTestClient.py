import json
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional

from mcp import ClientSession
from mcp.shared.exceptions import McpError
from mcp.types import Tool


class ToolCallError(Exception):
    """The server answered a tool call with an error result"""


class BaseMCPTestClient:
    def __init__(self):
        # Initialize session and client objects
        self.session: Optional[ClientSession] = None
        self.exit_stack = AsyncExitStack()

    async def _start_session(self, read_stream, write_stream):
        self.session = await self.exit_stack.enter_async_context(
            ClientSession(read_stream, write_stream)
        )

        await self.session.initialize()

        tools = await self.list_tools()
        print("\nConnected to server with tools:", [tool.name for tool in tools])

    async def list_tools(self) -> List[Tool]:
        """List all tools advertised by the server"""
        if not self.session:
            raise ValueError("Session not initialized")

        response = await self.session.list_tools()
        return response.tools

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Call a tool and decode the Slack response it returns

        Raises:
            ToolCallError: The server answered with an error, carrying its code
        """
        if not self.session:
            raise ValueError("Session not initialized")

        try:
            result = await self.session.call_tool(name, arguments)
        except McpError as e:
            raise ToolCallError(f"[{e.error.code}] {e.error.message}") from e

        text = result.content[0].text if result.content else ""

        if result.isError:
            raise ToolCallError(text)
        return json.loads(text)

    async def cleanup(self):
        """Clean up resources"""
        await self.exit_stack.aclose()
        self.session = None
