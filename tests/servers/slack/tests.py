import os
import pytest
import random
import string

from tests.utils.test_tools import get_test_id, run_tool_test

pytestmark = pytest.mark.live


def random_id():
    """Generate a random ID string"""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=8))


# Shared context dictionary at module level
SHARED_CONTEXT = {
    # Channel the bot is a member of; write tests are skipped without it
    "channel": os.environ.get("SLACK_TEST_CHANNEL", ""),
}

# Lists and canvases need a paid workspace
LISTS_ENABLED = os.environ.get("SLACK_TEST_LISTS") == "1"
CANVASES_ENABLED = os.environ.get("SLACK_TEST_CANVASES") == "1"

TOOL_TESTS = [
    {
        "name": "list_channels",
        "args": {"limit": 5, "types": "public_channel"},
        "expected_keys": ["channels"],
    },
    {
        "name": "get_users",
        "args": {"limit": 5},
        "expected_keys": ["members"],
    },
    {
        "name": "post_message",
        "args": {"channel": "{channel}", "text": "slack-mcp live test {test_id}"},
        "expected_keys": ["ts"],
        "extractors": {"message_ts": "ts"},
        "depends_on": ["channel"],
        "setup": lambda context: {"test_id": random_id()},
    },
    {
        "name": "reply_to_message",
        "args": {
            "channel": "{channel}",
            "thread_ts": "{message_ts}",
            "text": "reply {test_id}",
        },
        "expected_keys": ["ts"],
        "depends_on": ["channel", "message_ts"],
    },
    {
        "name": "add_reaction",
        "args": {"channel": "{channel}", "timestamp": "{message_ts}", "name": "eyes"},
        "depends_on": ["channel", "message_ts"],
    },
    {
        "name": "get_thread_replies",
        "args": {"channel": "{channel}", "ts": "{message_ts}", "limit": 10},
        "expected_keys": ["messages"],
        "depends_on": ["channel", "message_ts"],
    },
    {
        "name": "list_messages",
        "args": {"channel": "{channel}", "limit": 5},
        "expected_keys": ["messages"],
        "depends_on": ["channel"],
    },
    {
        "name": "create_canvas",
        "args": {"title": "slack-mcp {test_id}", "markdown": "# Live test\n\nCreated by tests."},
        "expected_keys": ["canvas_id"],
        "extractors": {"canvas_id": "canvas_id"},
        "setup": lambda context: {"test_id": random_id()},
        "skip": not CANVASES_ENABLED,
    },
    {
        "name": "update_canvas",
        "args": {"canvas_id": "{canvas_id}", "markdown": "# Live test\n\nUpdated."},
        "depends_on": ["canvas_id"],
        "skip": not CANVASES_ENABLED,
    },
    {
        "name": "create_list",
        "args": {"name": "slack-mcp {test_id}", "todo_mode": True},
        "extractors": {"list_id": "list_id"},
        "setup": lambda context: {"test_id": random_id()},
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "update_list",
        "args": {"id": "{list_id}", "description": "Created by slack-mcp live tests"},
        "depends_on": ["list_id"],
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "create_list_item",
        "args": {"list_id": "{list_id}"},
        "extractors": {"item_id": "item.id"},
        "depends_on": ["list_id"],
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "list_list_items",
        "args": {"list_id": "{list_id}", "limit": 10},
        "expected_keys": ["items"],
        "depends_on": ["list_id"],
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "get_list_item",
        "args": {"list_id": "{list_id}", "id": "{item_id}"},
        "depends_on": ["list_id", "item_id"],
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "set_list_access",
        "args": {"list_id": "{list_id}", "access_level": "read", "channel_ids": ["{channel}"]},
        "depends_on": ["list_id", "channel"],
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "delete_list_access",
        "args": {"list_id": "{list_id}", "channel_ids": ["{channel}"]},
        "depends_on": ["list_id", "channel"],
        "skip": not LISTS_ENABLED,
    },
    {
        "name": "delete_list_item",
        "args": {"list_id": "{list_id}", "id": "{item_id}"},
        "depends_on": ["list_id", "item_id"],
        "skip": not LISTS_ENABLED,
    },
]


@pytest.mark.asyncio
async def test_all_tools_are_advertised(live_client):
    tools = await live_client.list_tools()

    assert len(tools) == 19


@pytest.mark.parametrize("test_config", TOOL_TESTS, ids=get_test_id)
@pytest.mark.asyncio
async def test_slack_tool(live_client, test_config):
    await run_tool_test(live_client, SHARED_CONTEXT, test_config)
