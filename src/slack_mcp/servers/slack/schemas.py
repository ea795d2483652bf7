"""
Input schemas for the Slack tools.

Each entry is advertised verbatim as the tool's `inputSchema` and is also the
source the dispatcher validates incoming arguments against.
"""

from typing import Any, Dict, List

from mcp.types import Tool

LIMIT = {"type": "integer", "minimum": 0}
STRING_ARRAY = {"type": "array", "items": {"type": "string"}}


def _limit(description: str) -> Dict[str, Any]:
    return {**LIMIT, "description": description}


def _cursor() -> Dict[str, Any]:
    return {
        "type": "string",
        "description": "Pagination cursor from a previous response (response_metadata.next_cursor).",
    }


TOOL_SCHEMAS: Dict[str, Dict[str, Any]] = {
    # Messaging
    "post_message": {
        "description": "Post a message to a Slack channel",
        "properties": {
            "channel": {
                "type": "string",
                "description": "Slack channel ID (e.g. C0123456789). Falls back to SLACK_DEFAULT_CHANNEL env var if omitted.",
            },
            "text": {
                "type": "string",
                "description": "Message text. Supports Slack mrkdwn formatting.",
            },
        },
        "required": ["text"],
    },
    "reply_to_message": {
        "description": "Reply to a message in a thread",
        "properties": {
            "channel": {
                "type": "string",
                "description": "Slack channel ID where the parent message lives.",
            },
            "thread_ts": {
                "type": "string",
                "description": "Timestamp (ts) of the parent message to reply to.",
            },
            "text": {
                "type": "string",
                "description": "Reply message text. Supports Slack mrkdwn formatting.",
            },
            "reply_broadcast": {
                "type": "boolean",
                "description": "If true, also post the reply to the channel (not just the thread). Defaults to false.",
            },
        },
        "required": ["channel", "thread_ts", "text"],
    },
    # Canvases
    "create_canvas": {
        "description": (
            "Create a Slack canvas with markdown content. If channel_id is provided, "
            "creates a channel-bound canvas; otherwise a standalone canvas."
        ),
        "properties": {
            "title": {"type": "string", "description": "Title for the new canvas."},
            "markdown": {
                "type": "string",
                "description": "Markdown content for the canvas body.",
            },
            "channel_id": {
                "type": "string",
                "description": "Optional channel ID. If provided, creates a channel-bound canvas; otherwise creates a standalone canvas.",
            },
        },
        "required": ["title", "markdown"],
    },
    "update_canvas": {
        "description": "Update an existing Slack canvas by replacing all content with new markdown",
        "properties": {
            "canvas_id": {"type": "string", "description": "The canvas ID to update."},
            "markdown": {
                "type": "string",
                "description": "New markdown content to replace the entire canvas body.",
            },
        },
        "required": ["canvas_id", "markdown"],
    },
    # Channels and messages
    "list_channels": {
        "description": "List Slack channels the bot has access to",
        "properties": {
            "limit": _limit(
                "Maximum number of channels to return. Default 100, max 1000."
            ),
            "cursor": _cursor(),
            "types": {
                "type": "string",
                "description": "Comma-separated channel types: public_channel, private_channel, mpim, im. Default: public_channel.",
            },
        },
        "required": [],
    },
    "list_messages": {
        "description": "Get recent messages from a Slack channel",
        "properties": {
            "channel": {
                "type": "string",
                "description": "Channel ID to fetch message history from.",
            },
            "limit": _limit(
                "Maximum number of messages to return. Default 20, max 1000."
            ),
            "cursor": _cursor(),
        },
        "required": ["channel"],
    },
    "get_thread_replies": {
        "description": "Get all replies in a message thread",
        "properties": {
            "channel": {
                "type": "string",
                "description": "Channel ID containing the thread.",
            },
            "ts": {
                "type": "string",
                "description": "Timestamp (ts) of the parent message.",
            },
            "limit": _limit(
                "Maximum number of replies to return. Default 100, max 1000."
            ),
            "cursor": _cursor(),
        },
        "required": ["channel", "ts"],
    },
    # Reactions
    "add_reaction": {
        "description": "Add an emoji reaction to a message",
        "properties": {
            "channel": {
                "type": "string",
                "description": "Channel ID where the message to react to was posted.",
            },
            "timestamp": {
                "type": "string",
                "description": "Timestamp of the message to add a reaction to.",
            },
            "name": {
                "type": "string",
                "description": "Emoji name without colons (e.g. 'thumbsup', not ':thumbsup:').",
            },
        },
        "required": ["channel", "timestamp", "name"],
    },
    # Users
    "get_users": {
        "description": "List users in the Slack workspace",
        "properties": {
            "limit": _limit("Maximum number of users to return. Default 100, max 1000."),
            "cursor": _cursor(),
        },
        "required": [],
    },
    # Lists
    "create_list": {
        "description": "Create a new Slack list",
        "properties": {
            "name": {"type": "string", "description": "Name of the list."},
            "description": {
                "type": "string",
                "description": "Optional description of the list.",
            },
            "todo_mode": {
                "type": "boolean",
                "description": "If true, the list gets completion, assignee and due date columns.",
            },
            "schema": {
                "description": "Optional column definitions, passed to Slack as-is (e.g. [{\"key\": \"status\", \"name\": \"Status\", \"type\": \"select\"}]).",
            },
        },
        "required": ["name"],
    },
    "update_list": {
        "description": "Update a Slack list's name, description, or todo mode",
        "properties": {
            "id": {"type": "string", "description": "ID of the list to update."},
            "name": {"type": "string", "description": "New name for the list."},
            "description": {
                "type": "string",
                "description": "New description for the list.",
            },
            "todo_mode": {
                "type": "boolean",
                "description": "Turn todo mode on or off.",
            },
        },
        "required": ["id"],
    },
    "create_list_item": {
        "description": "Add an item to a Slack list",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "initial_fields": {
                "description": "Optional initial cell values, passed to Slack as-is (e.g. [{\"column_id\": \"Col123\", \"rich_text\": [...]}]).",
            },
        },
        "required": ["list_id"],
    },
    "list_list_items": {
        "description": "List all items in a Slack list",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "limit": _limit("Maximum number of items to return. Default 100."),
            "cursor": _cursor(),
            "archived": {
                "type": "boolean",
                "description": "If true, return archived items instead of active ones. Defaults to false.",
            },
        },
        "required": ["list_id"],
    },
    "get_list_item": {
        "description": "Get a specific item from a Slack list",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "id": {"type": "string", "description": "ID of the item."},
        },
        "required": ["list_id", "id"],
    },
    "update_list_item": {
        "description": "Update fields on a Slack list item",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "cells": {
                "description": "Cells to update, passed to Slack as-is (each cell names a row_id and column_id plus its new value).",
            },
        },
        "required": ["list_id", "cells"],
    },
    "delete_list_item": {
        "description": "Delete a single item from a Slack list",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "id": {"type": "string", "description": "ID of the item to delete."},
        },
        "required": ["list_id", "id"],
    },
    "delete_list_items": {
        "description": "Bulk delete multiple items from a Slack list",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "ids": {**STRING_ARRAY, "description": "IDs of the items to delete."},
        },
        "required": ["list_id", "ids"],
    },
    "set_list_access": {
        "description": "Grant read, write, or owner access to a Slack list for users or channels",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "access_level": {
                "type": "string",
                "enum": ["read", "write", "owner"],
                "description": "Access level to grant: read, write, or owner.",
            },
            "channel_ids": {
                **STRING_ARRAY,
                "description": "Channel IDs to grant access to.",
            },
            "user_ids": {**STRING_ARRAY, "description": "User IDs to grant access to."},
        },
        "required": ["list_id", "access_level"],
    },
    "delete_list_access": {
        "description": "Revoke access to a Slack list from users or channels",
        "properties": {
            "list_id": {"type": "string", "description": "ID of the list."},
            "channel_ids": {
                **STRING_ARRAY,
                "description": "Channel IDs to revoke access from.",
            },
            "user_ids": {
                **STRING_ARRAY,
                "description": "User IDs to revoke access from.",
            },
        },
        "required": ["list_id"],
    },
}


def input_schema(name: str) -> Dict[str, Any]:
    """Return the JSON schema advertised for a tool"""
    schema = TOOL_SCHEMAS[name]
    return {
        "type": "object",
        "properties": schema["properties"],
        "required": list(schema["required"]),
    }


def tool_list() -> List[Tool]:
    """Build the MCP tool definitions, in declaration order"""
    return [
        Tool(
            name=name,
            description=schema["description"],
            inputSchema=input_schema(name),
        )
        for name, schema in TOOL_SCHEMAS.items()
    ]


# JSON schema type name -> accepted Python types
_JSON_TYPES = {
    "string": (str,),
    "boolean": (bool,),
    "integer": (int,),
    "array": (list, tuple),
    "object": (dict,),
}


def _type_error(field: str, expected: str, value: Any) -> str:
    return f"Invalid parameter {field}: expected {expected}, got {type(value).__name__}"


def check_arguments(name: str, arguments: Dict[str, Any]) -> List[str]:
    """
    Check arguments against a tool's schema.

    A key whose value is None counts as absent. Returns a list of problems,
    empty when the arguments are acceptable.
    """
    schema = TOOL_SCHEMAS[name]
    problems = []

    for field in schema["required"]:
        if arguments.get(field) is None:
            problems.append(f"Missing required parameter: {field}")

    for field, value in arguments.items():
        if value is None or field not in schema["properties"]:
            continue
        prop = schema["properties"][field]
        expected = prop.get("type")
        if expected is None:
            continue

        accepted = _JSON_TYPES[expected]
        # bool is an int subclass but never a valid integer here
        if not isinstance(value, accepted) or (
            expected == "integer" and isinstance(value, bool)
        ):
            problems.append(_type_error(field, expected, value))
            continue

        if expected == "integer" and value < prop.get("minimum", value):
            problems.append(
                f"Invalid parameter {field}: must be >= {prop['minimum']}, got {value}"
            )
        elif "enum" in prop and value not in prop["enum"]:
            problems.append(
                f"Invalid parameter {field}: must be one of {', '.join(prop['enum'])}"
            )
        elif expected == "array" and "items" in prop:
            item_type = _JSON_TYPES[prop["items"]["type"]]
            if not all(isinstance(item, item_type) for item in value):
                problems.append(
                    f"Invalid parameter {field}: every item must be a {prop['items']['type']}"
                )

    return problems
