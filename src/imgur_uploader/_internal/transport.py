"""Thin httpx wrapper around the Imgur v3 REST endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from imgur_uploader.exceptions import ApiError

logger = logging.getLogger(__name__)

BASE_URL = "https://api.imgur.com/3"
DEFAULT_TIMEOUT = 60.0
DEFAULT_USER_AGENT = "imgur-uploader/0.1"


@dataclass(frozen=True)
class ApiResponse:
    """Decoded API reply: success flag plus payload or error message."""

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    status_code: int | None = None


def _error_message(data: Any) -> str | None:
    """Extract the error message from the ``data`` member of a reply."""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or None
    if error:
        return str(error)
    return None


def parse_response(payload: Any, status_code: int | None = None) -> ApiResponse:
    """Turn the JSON body of an Imgur reply into an ApiResponse.

    Imgur wraps every reply as ``{"data": ..., "success": bool, "status": int}``.
    Deletion replies carry ``data: true`` rather than an object.
    """
    if not isinstance(payload, dict):
        return ApiResponse(
            success=False,
            error="Unexpected response from Imgur",
            status_code=status_code,
        )

    data = payload.get("data")
    status = payload.get("status", status_code)
    success = bool(payload.get("success"))

    if success:
        return ApiResponse(
            success=True,
            data=data if isinstance(data, dict) else {},
            status_code=status,
        )

    message = _error_message(data)
    if not message:
        message = f"HTTP {status}" if status else "Request failed"
    return ApiResponse(success=False, error=message, status_code=status)


class ImgurTransport:
    """Sends authenticated requests to the Imgur API.

    Authentication is the anonymous ``Authorization: Client-ID <id>`` header.
    """

    def __init__(
        self,
        client_id: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Client-ID {client_id}",
                "User-Agent": DEFAULT_USER_AGENT,
            },
        )

    def __enter__(self) -> ImgurTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> ApiResponse:
        logger.debug(f"{method} {endpoint}")
        try:
            response = self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {endpoint} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON from {endpoint} (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

        result = parse_response(payload, response.status_code)
        logger.debug(f"{method} {endpoint} -> {result.status_code} success={result.success}")
        return result

    def get(self, endpoint: str) -> ApiResponse:
        return self._request("GET", endpoint)

    def post(
        self,
        endpoint: str,
        data: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
    ) -> ApiResponse:
        return self._request("POST", endpoint, data=data, files=files)

    def delete(self, endpoint: str) -> ApiResponse:
        return self._request("DELETE", endpoint)

    def close(self) -> None:
        self._client.close()
