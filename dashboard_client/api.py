"""Authenticated JSON requests against the marketplace API."""

from typing import Any, Dict, Optional

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."


class APIError(Exception):
    """A request that did not produce a successful envelope."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data or {}


class SessionExpiredError(APIError):
    """The API answered 401; the dashboard must send the user back to login."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        super().__init__(SESSION_EXPIRED_MESSAGE, status_code=401, data=data)


def _error_payload(response: httpx.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


async def api_fetch(
    method: str,
    path: str,
    token: Optional[str] = None,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Send one request and return the decoded envelope.

    ``path`` is appended to ``API_BASE_URL`` unless it is already absolute.
    """
    settings = get_settings()
    url = path if path.startswith("http") else f"{settings.API_BASE_URL}{path}"
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        async with httpx.AsyncClient(timeout=settings.API_TIMEOUT_SECONDS) as client:
            response = await client.request(
                method, url, headers=headers, json=json, params=params
            )
    except httpx.HTTPError as e:
        logger.warning("%s %s failed: %s", method, url, e)
        raise APIError(NETWORK_ERROR_MESSAGE) from e

    if response.status_code == 401:
        raise SessionExpiredError(_error_payload(response))

    if response.status_code >= 400:
        data = _error_payload(response)
        message = data.get("message") or (
            f"API request failed: {response.status_code} {response.reason_phrase}"
        )
        raise APIError(message, status_code=response.status_code, data=data)

    if response.status_code == 204:
        return {}
    try:
        return response.json()
    except ValueError as e:
        # A proxy or misrouted request can answer 2xx with an HTML page
        raise APIError(
            f"API request failed: {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        ) from e
