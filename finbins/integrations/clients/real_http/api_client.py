"""
Real dashboard API HTTP client.

Used for every session that is not synthetic. One attempt per call: no
retries, no backoff and no timeout (``timeout=None``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from finbins.integrations.policy.response_wrappers import (
    ApiResult,
    HttpStatusError,
    TransportError,
    error_for_status,
)

logger = logging.getLogger(__name__)


class RealApiClient:
    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.transport = transport
        self.timeout_seconds = timeout_seconds

    def build_headers(self, token: Optional[str], extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    async def send(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiResult:
        url = f"{self.base_url}{endpoint}"
        request_headers = self.build_headers(token, headers)
        logger.info("Making API request: %s %s", method, url)
        logger.debug("Request body: %s", body)

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout_seconds) as client:
                response = await client.request(
                    method,
                    url,
                    json=body,
                    headers=request_headers,
                )
        except httpx.RequestError as exc:
            logger.error("Request error calling %s %s: %s", method, url, exc)
            return ApiResult.failure(TransportError(str(exc) or f"Network error calling {url}", cause=exc))

        logger.info("Response status: %s", response.status_code)

        if not response.is_success:
            message = self._error_message(response)
            logger.error("API error %s for %s %s: %s", response.status_code, method, url, message)
            return ApiResult.failure(error_for_status(response.status_code, message))

        if not response.content:
            return ApiResult.success(None)
        try:
            return ApiResult.success(response.json())
        except ValueError:
            logger.error("Non-JSON success body from %s %s", method, url)
            return ApiResult.failure(HttpStatusError("Invalid JSON response", status_code=response.status_code))

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"API error: {response.status_code}"
        try:
            data = response.json()
        except ValueError:
            return fallback
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return fallback
