import asyncio
import pytest_asyncio

from tests.clients.LocalMCPTestClient import LocalMCPTestClient
from tests.clients.RemoteMCPTestClient import RemoteMCPTestClient

DEFAULT_ENDPOINT = "http://127.0.0.1:8080/sse"


@pytest_asyncio.fixture(scope="function")
async def live_client(request):
    """Connected MCP client for live tests, over stdio or SSE"""
    if request.config.getoption("--remote"):
        endpoint = request.config.getoption("--endpoint") or DEFAULT_ENDPOINT
        client = RemoteMCPTestClient()
        await client.connect_to_server(endpoint)
        print(f"Connected to {endpoint}")
    else:
        client = LocalMCPTestClient()
        await client.connect_to_server()
        print("Connected to local stdio server")

    try:
        yield client
    finally:
        cleanup_task = asyncio.create_task(client.cleanup())
        await cleanup_task
