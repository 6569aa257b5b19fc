"""
app/services/api_client.py

Purpose: Employ.me backend client

- One configured base URL for every call
- Cookie credentials kept in the client's jar and sent with every request
- Optional bearer token, set after login or email verification
- Unwraps the {success, data, message} envelope
- Turns transport failures and non-2xx responses into ApiError
"""

import httpx
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import ApiError, ErrorKind
from app.core.logging import get_logger
from utils.constants import EMAIL_NOT_VERIFIED_CODE, GENERIC_ERROR_MESSAGE

logger = get_logger(__name__)


def classify_error(status_code: int, body: Dict[str, Any]) -> ErrorKind:
    """
    Maps a rejected response to an ErrorKind.

    A machine-readable code wins when the backend sends one; otherwise the
    HTTP status decides.
    """
    code = body.get("code") or body.get("errorCode")
    if code == EMAIL_NOT_VERIFIED_CODE:
        return ErrorKind.EMAIL_NOT_VERIFIED

    if status_code in (401, 403):
        return ErrorKind.UNAUTHORIZED
    if status_code == 409:
        return ErrorKind.CONFLICT
    if 400 <= status_code < 500:
        return ErrorKind.VALIDATION
    return ErrorKind.SERVER


class ApiClient:
    """
    Shared HTTP client for one visitor.

    Every service of the visitor goes through the same instance so that the
    cookie jar and the bearer token are shared.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._token: Optional[str] = None

        client_kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": {"Content-Type": "application/json"},
        }
        timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def set_token(self, token: str):
        self._token = token

    def remove_token(self):
        self._token = None

    def clear_credentials(self):
        """Forget the bearer token and every session cookie."""
        self.remove_token()
        self._client.cookies.clear()

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Sends one request and returns the decoded envelope.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL (e.g. "/auth/me")
            payload: JSON body

        Returns:
            Decoded response body

        Raises:
            ApiError: On transport failure or non-2xx response
        """
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.request(method, endpoint, json=payload, headers=headers)
        except httpx.TimeoutException:
            logger.error(f"Backend timeout: {method} {endpoint}")
            raise ApiError(GENERIC_ERROR_MESSAGE, kind=ErrorKind.NETWORK, status_code=504)
        except httpx.RequestError as e:
            logger.error(f"Network error calling backend: {method} {endpoint}: {e}")
            raise ApiError(GENERIC_ERROR_MESSAGE, kind=ErrorKind.NETWORK, status_code=502)

        try:
            body = response.json()
            readable = True
        except ValueError:
            body, readable = {}, False

        if not isinstance(body, dict):
            body = {"success": True, "data": body}

        if not response.is_success:
            message = body.get("message") or GENERIC_ERROR_MESSAGE
            kind = classify_error(response.status_code, body)
            logger.info(f"Backend rejected {method} {endpoint}: {response.status_code} {message}")
            raise ApiError(
                message,
                kind=kind,
                status_code=response.status_code,
                details=body.get("errors")
            )

        if not readable:
            logger.error(f"Backend returned an unreadable body: {method} {endpoint}")
            raise ApiError(GENERIC_ERROR_MESSAGE, kind=ErrorKind.SERVER, status_code=502)

        return body

    async def get(self, endpoint: str) -> Dict[str, Any]:
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("POST", endpoint, payload)

    async def close(self):
        await self._client.aclose()
