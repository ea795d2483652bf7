import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, ErrorData, TextContent

from slack_mcp.servers.slack.schemas import check_arguments
from slack_mcp.utils.config import SlackConfig
from slack_mcp.utils.slack.client import SlackClientError

logger = logging.getLogger(__name__)


class SlackRequest(NamedTuple):
    """A single Slack Web API call: the method name and its JSON body"""

    method: str
    payload: Dict[str, Any]


def invalid_params(message: str) -> McpError:
    return McpError(ErrorData(code=INVALID_PARAMS, message=message))


def with_optional(payload: Dict[str, Any], arguments: Dict[str, Any], *fields: str):
    """Copy optional fields that are present and not None into the payload"""
    for field in fields:
        if arguments.get(field) is not None:
            payload[field] = arguments[field]
    return payload


def with_flag(payload: Dict[str, Any], arguments: Dict[str, Any], field: str):
    """Include a false-by-default boolean only when it is explicitly true"""
    if arguments.get(field) is True:
        payload[field] = True
    return payload


def markdown_content(markdown: str) -> Dict[str, str]:
    return {"type": "markdown", "markdown": markdown}


def resolve_channel(channel: Optional[str], config: SlackConfig) -> str:
    """Use the explicit channel, else the configured default, else fail"""
    if channel:
        return channel
    if config.default_channel:
        return config.default_channel
    raise invalid_params("channel is required (or set SLACK_DEFAULT_CHANNEL env var)")


# Messaging


def build_post_message(arguments, config):
    channel = resolve_channel(arguments.get("channel"), config)
    return SlackRequest(
        "chat.postMessage", {"channel": channel, "text": arguments["text"]}
    )


def build_reply_to_message(arguments, config):
    payload = {
        "channel": arguments["channel"],
        "text": arguments["text"],
        "thread_ts": arguments["thread_ts"],
    }
    return SlackRequest(
        "chat.postMessage", with_flag(payload, arguments, "reply_broadcast")
    )


# Canvases


def build_create_canvas(arguments, config):
    document_content = markdown_content(arguments["markdown"])
    channel_id = arguments.get("channel_id")

    if channel_id:
        return SlackRequest(
            "conversations.canvases.create",
            {"channel_id": channel_id, "document_content": document_content},
        )
    return SlackRequest(
        "canvases.create",
        {"title": arguments["title"], "document_content": document_content},
    )


def build_update_canvas(arguments, config):
    return SlackRequest(
        "canvases.edit",
        {
            "canvas_id": arguments["canvas_id"],
            "changes": [
                {
                    "operation": "replace",
                    "document_content": markdown_content(arguments["markdown"]),
                }
            ],
        },
    )


# Channels, messages, reactions and users


def build_list_channels(arguments, config):
    return SlackRequest(
        "conversations.list", with_optional({}, arguments, "limit", "cursor", "types")
    )


def build_list_messages(arguments, config):
    payload = {"channel": arguments["channel"]}
    return SlackRequest(
        "conversations.history", with_optional(payload, arguments, "limit", "cursor")
    )


def build_get_thread_replies(arguments, config):
    payload = {"channel": arguments["channel"], "ts": arguments["ts"]}
    return SlackRequest(
        "conversations.replies", with_optional(payload, arguments, "limit", "cursor")
    )


def build_add_reaction(arguments, config):
    name = arguments["name"].strip().strip(":")
    if not name:
        raise invalid_params("Invalid parameter name: emoji name is empty")
    return SlackRequest(
        "reactions.add",
        {
            "channel": arguments["channel"],
            "timestamp": arguments["timestamp"],
            "name": name,
        },
    )


def build_get_users(arguments, config):
    return SlackRequest("users.list", with_optional({}, arguments, "limit", "cursor"))


# Lists


def build_create_list(arguments, config):
    payload = with_optional(
        {"name": arguments["name"]}, arguments, "description", "todo_mode", "schema"
    )
    return SlackRequest("lists.create", payload)


def build_update_list(arguments, config):
    payload = with_optional(
        {"id": arguments["id"]}, arguments, "name", "description", "todo_mode"
    )
    return SlackRequest("lists.update", payload)


def build_create_list_item(arguments, config):
    payload = with_optional({"list_id": arguments["list_id"]}, arguments, "initial_fields")
    return SlackRequest("lists.items.create", payload)


def build_list_list_items(arguments, config):
    payload = with_optional({"list_id": arguments["list_id"]}, arguments, "limit", "cursor")
    return SlackRequest("lists.items.list", with_flag(payload, arguments, "archived"))


def build_get_list_item(arguments, config):
    return SlackRequest(
        "lists.items.info", {"list_id": arguments["list_id"], "id": arguments["id"]}
    )


def build_update_list_item(arguments, config):
    return SlackRequest(
        "lists.items.update",
        {"list_id": arguments["list_id"], "cells": arguments["cells"]},
    )


def build_delete_list_item(arguments, config):
    return SlackRequest(
        "lists.items.delete", {"list_id": arguments["list_id"], "id": arguments["id"]}
    )


def build_delete_list_items(arguments, config):
    return SlackRequest(
        "lists.items.deleteMultiple",
        {"list_id": arguments["list_id"], "ids": list(arguments["ids"])},
    )


def build_set_list_access(arguments, config):
    payload = {
        "list_id": arguments["list_id"],
        "access_level": arguments["access_level"],
    }
    return SlackRequest(
        "lists.access.set",
        with_optional(payload, arguments, "channel_ids", "user_ids"),
    )


def build_delete_list_access(arguments, config):
    payload = with_optional(
        {"list_id": arguments["list_id"]}, arguments, "channel_ids", "user_ids"
    )
    return SlackRequest("lists.access.delete", payload)


Builder = Callable[[Dict[str, Any], SlackConfig], SlackRequest]

TOOL_HANDLERS: Dict[str, Builder] = {
    "post_message": build_post_message,
    "reply_to_message": build_reply_to_message,
    "create_canvas": build_create_canvas,
    "update_canvas": build_update_canvas,
    "list_channels": build_list_channels,
    "list_messages": build_list_messages,
    "get_thread_replies": build_get_thread_replies,
    "add_reaction": build_add_reaction,
    "get_users": build_get_users,
    "create_list": build_create_list,
    "update_list": build_update_list,
    "create_list_item": build_create_list_item,
    "list_list_items": build_list_list_items,
    "get_list_item": build_get_list_item,
    "update_list_item": build_update_list_item,
    "delete_list_item": build_delete_list_item,
    "delete_list_items": build_delete_list_items,
    "set_list_access": build_set_list_access,
    "delete_list_access": build_delete_list_access,
}


def build_request(
    name: str, arguments: Optional[Dict[str, Any]], config: SlackConfig
) -> SlackRequest:
    """
    Validate a tool call and translate it into a Slack request.

    Raises:
        McpError: INVALID_PARAMS for unknown tools or invalid arguments
    """
    if name not in TOOL_HANDLERS:
        raise invalid_params(f"Unknown tool: {name}")

    arguments = arguments or {}
    problems = check_arguments(name, arguments)
    if problems:
        raise invalid_params("; ".join(problems))

    return TOOL_HANDLERS[name](arguments, config)


async def dispatch_tool(
    client, config: SlackConfig, name: str, arguments: Optional[Dict[str, Any]]
) -> List[TextContent]:
    """
    Run one tool call: validate, make exactly one Slack call and wrap the result.

    The success content is Slack's response body exactly as received.

    Raises:
        McpError: INVALID_PARAMS before any network call, INTERNAL_ERROR when
            the Slack call fails
    """
    request = build_request(name, arguments, config)

    try:
        response = await client.post(request.method, request.payload)
    except SlackClientError as e:
        logger.error(f"Error running tool {name}: {str(e)}")
        raise McpError(
            ErrorData(code=INTERNAL_ERROR, message=str(e), data=e.data)
        ) from e

    return [TextContent(type="text", text=response.body)]
