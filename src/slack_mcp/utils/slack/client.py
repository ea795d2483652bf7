import json
import logging
from typing import Any, Dict, Optional

import httpx

from slack_mcp.utils.config import SLACK_API_BASE

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class SlackClientError(Exception):
    """Base class for every failure of a Slack Web API call"""

    def __init__(self, method: str, message: str):
        super().__init__(message)
        self.method = method

    @property
    def data(self) -> Dict[str, Any]:
        """Diagnostic details attached to the tool error"""
        return {"method": self.method}


class TransportError(SlackClientError):
    """The request never produced a usable response (connection, timeout, malformed body)"""

    def __init__(self, method: str, cause: Exception):
        super().__init__(method, f"Slack API request to {method} failed: {cause}")
        self.cause = cause


class HttpError(SlackClientError):
    """Slack answered with a status code outside the 2xx range"""

    def __init__(self, method: str, status_code: int, body: Any):
        super().__init__(
            method, f"Slack API HTTP error {status_code} in {method}: {_render(body)}"
        )
        self.status_code = status_code
        self.body = body

    @property
    def data(self) -> Dict[str, Any]:
        return {"method": self.method, "status": self.status_code, "body": self.body}


class ApiError(SlackClientError):
    """Slack answered but the body's ok flag is not true"""

    def __init__(self, method: str, error: str, response: Dict[str, Any]):
        super().__init__(
            method, f"Slack API error in {method}: {error} ({_render(response)})"
        )
        self.error = error
        self.response = response

    @property
    def data(self) -> Dict[str, Any]:
        return {"method": self.method, "error": self.error, "response": self.response}


def _render(body: Any) -> str:
    if isinstance(body, str):
        return body
    return json.dumps(body)


class SlackResponse:
    """
    A successful Slack Web API response.

    Keeps the body exactly as received so callers can forward Slack's payload
    without re-serializing it.
    """

    def __init__(self, method: str, body: str):
        self.method = method
        self.body = body

    def __str__(self):
        return self.body

    def __repr__(self):
        return f"SlackResponse(method={self.method!r})"


class SlackClient:
    """
    Minimal async client for Slack Web API methods that take a JSON body.

    One httpx.AsyncClient is opened on first use and reused, so connections
    are pooled across calls. Call aclose() on shutdown.
    """

    def __init__(
        self,
        token: str,
        base_url: str = SLACK_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            token: Bot token sent as a bearer credential
            base_url: API root, methods are appended as path segments
            transport: Optional httpx transport, used to stub the network in tests
        """
        self._token = token
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def __repr__(self):
        return f"SlackClient(base_url={self.base_url!r})"

    def url_for(self, method: str) -> str:
        return f"{self.base_url}/{method}"

    def _http_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(transport=self._transport)
        return self._client

    async def aclose(self):
        """Close pooled connections; a later call opens a new pool"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post(self, method: str, payload: Dict[str, Any]) -> SlackResponse:
        """
        Call a Slack Web API method with a JSON payload.

        Raises:
            TransportError: Connection failure, timeout, invalid URL or a body that
                is not a JSON object
            HttpError: Non-2xx status
            ApiError: The body's ok field is not literally true
        """
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": JSON_CONTENT_TYPE,
        }
        content = json.dumps(payload).encode("utf-8")

        logger.debug(f"POST {method} with fields: {sorted(payload)}")

        try:
            response = await self._http_client().post(
                self.url_for(method), headers=headers, content=content
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error calling Slack API method {method}: {str(e)}")
            raise TransportError(method, e) from e

        if not response.is_success:
            body = _decode_error_body(response)
            logger.error(
                f"HTTP error occurred: {response.status_code} - {response.text}"
            )
            raise HttpError(method, response.status_code, body)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(method, ValueError(f"malformed response body: {e}")) from e

        if not isinstance(data, dict):
            raise TransportError(
                method, ValueError("malformed response body: expected a JSON object")
            )

        if data.get("ok") is not True:
            error = data.get("error")
            if not isinstance(error, str):
                error = "unknown"
            raise ApiError(method, error, data)

        return SlackResponse(method, response.text)


def _decode_error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
