import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

SLACK_API_BASE = "https://slack.com/api"

TOKEN_ENV_VARS = ("SLACK_BOT_TOKEN", "SLACK_TOKEN")
TRANSPORTS = ("stdio", "sse")

DEFAULT_TRANSPORT = "stdio"
DEFAULT_SSE_HOST = "127.0.0.1"
DEFAULT_SSE_PORT = 8080
DEFAULT_METRICS_PORT = 9091
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(ValueError):
    """Raised when the process cannot start with the given configuration"""


@dataclass(frozen=True)
class SlackConfig:
    token: str
    default_channel: Optional[str] = None
    transport: str = DEFAULT_TRANSPORT
    host: str = DEFAULT_SSE_HOST
    port: int = DEFAULT_SSE_PORT
    metrics_port: int = DEFAULT_METRICS_PORT
    api_base_url: str = SLACK_API_BASE
    log_level: str = DEFAULT_LOG_LEVEL

    def __repr__(self):
        # Leaves the token out
        return (
            f"SlackConfig(default_channel={self.default_channel!r}, "
            f"transport={self.transport!r}, host={self.host!r}, port={self.port}, "
            f"metrics_port={self.metrics_port}, api_base_url={self.api_base_url!r})"
        )


def _get(env: Mapping[str, str], name: str) -> Optional[str]:
    """Return a stripped environment value, treating empty strings as unset"""
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_port(name: str, value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        port = int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{value}'")
    if not 0 <= port <= 65535:
        raise ConfigError(f"{name} must be between 0 and 65535, got {port}")
    return port


def resolve_token(env: Mapping[str, str]) -> str:
    """
    Find the bot credential.

    SLACK_BOT_TOKEN is the canonical name; SLACK_TOKEN is accepted as an
    alias and only consulted when SLACK_BOT_TOKEN is unset or empty.
    """
    for name in TOKEN_ENV_VARS:
        token = _get(env, name)
        if token:
            if name != TOKEN_ENV_VARS[0]:
                logger.info(f"Using {name} as the Slack credential")
            return token
    raise ConfigError(
        "SLACK_BOT_TOKEN environment variable is not set (SLACK_TOKEN is also accepted)"
    )


def load_config(
    env: Optional[Mapping[str, str]] = None,
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> SlackConfig:
    """
    Build the process configuration from the environment.

    Args:
        env: Mapping to read from, defaults to os.environ
        transport: Overrides TRANSPORT when given
        host: Overrides SSE_HOST when given
        port: Overrides SSE_PORT when given

    Raises:
        ConfigError: The credential is missing, or the transport, a port, the
            API base URL or the log level is invalid
    """
    if env is None:
        env = os.environ

    token = resolve_token(env)

    transport = (transport or _get(env, "TRANSPORT") or DEFAULT_TRANSPORT).lower()
    if transport not in TRANSPORTS:
        raise ConfigError(
            f"Unknown TRANSPORT: '{transport}'. Use 'stdio' or 'sse'."
        )

    log_level = (_get(env, "LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown LOG_LEVEL: '{log_level}'")

    api_base_url = (_get(env, "SLACK_API_BASE_URL") or SLACK_API_BASE).rstrip("/")
    if not api_base_url.startswith(("http://", "https://")):
        raise ConfigError(
            f"SLACK_API_BASE_URL must be an http(s) URL, got '{api_base_url}'"
        )

    if port is None:
        port = _parse_port("SSE_PORT", _get(env, "SSE_PORT"), DEFAULT_SSE_PORT)
    else:
        port = _parse_port("--port", str(port), DEFAULT_SSE_PORT)

    return SlackConfig(
        token=token,
        default_channel=_get(env, "SLACK_DEFAULT_CHANNEL"),
        transport=transport,
        host=host or _get(env, "SSE_HOST") or DEFAULT_SSE_HOST,
        port=port,
        metrics_port=_parse_port(
            "METRICS_PORT", _get(env, "METRICS_PORT"), DEFAULT_METRICS_PORT
        ),
        api_base_url=api_base_url,
        log_level=log_level,
    )
