"""HTTP client for the 20i reseller REST API.

This is the canonical boundary adapter for calling the 20i API from the MCP
tool handlers.

Design constraints:
- Synchronous, single-shot HTTP calls
- No retries and no response caching
- Every failure leaves as a TwentyIError (see errors.py)

The 20i API may return different response formats depending on account status:

1. Reseller info (/reseller):
   - Normal: {"id": "reseller-id", "name": "...", ...} or a one-item list of it
   - UUID only: "0f8b7d7c-d878-4356-9b00-e6210a26fff1"
2. Account balance (/reseller/{id}/accountBalance):
   - Normal: {"balance": 123.45, "currency": "USD", ...}
   - Zero balance / new accounts: {} or a 403/404 error
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, Optional

import httpx

from .errors import (
    ApiError,
    NotFoundError,
    TwentyIError,
    handle_api_error,
    validate_api_response,
)

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(r"^[a-f0-9-]{36}$", re.IGNORECASE)

ZERO_BALANCE_MESSAGE = "Account has zero balance or no balance information available"
BALANCE_UNAVAILABLE_MESSAGE = (
    "Balance information not available - account may have zero balance or no payment history"
)


class TwentyIClient:
    """HTTP client for the 20i API.

    Provides helpers for:
    - Generic JSON requests (GET, POST, PUT, PATCH, DELETE)
    - Reseller lookups (info, id, account balance)
    """

    DEFAULT_BASE_URL = "https://api.20i.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        authorization: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": authorization,
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "twentyi-mcp/1.6",
            },
        )

    @classmethod
    def from_config(cls, config: Any, transport: Optional[httpx.BaseTransport] = None) -> "TwentyIClient":
        """Build a client from a loaded Config."""
        return cls(
            authorization=config.authorization_header,
            base_url=config.api_base_url,
            timeout=config.api_timeout,
            transport=transport,
        )

    # Low-level helpers

    def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded body.

        Transport failures, non-2xx statuses and undecodable bodies are
        translated by handle_api_error.
        """
        context = f"{method} {path}"
        start = time.perf_counter()
        try:
            response = self.session.request(method, path, **kwargs)
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "http_request method=%s path=%s status=%s duration_ms=%.1f",
                method,
                path,
                response.status_code,
                duration_ms,
            )
            response.raise_for_status()
            return self._decode(response)
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("API request failed in %s: %r", context, exc)
            handle_api_error(exc, context)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        text = response.text.strip()
        if not text:
            return {}

        try:
            data = response.json()
        except ValueError:
            if UUID_PATTERN.match(text):
                return text
            content_type = response.headers.get("content-type", "")
            if "text/html" in content_type:
                raise ValueError(
                    f"API returned HTML instead of JSON. Status: {response.status_code}. "
                    "This usually indicates an authentication error or invalid endpoint."
                )
            if ":" in text and not text.startswith(("{", "[")):
                raise ValueError(
                    "API returned invalid format (JavaScript object literal instead of JSON). "
                    "This suggests the API endpoint or authentication may be incorrect."
                )
            raise ValueError(f"API returned unparseable response: {text[:100]}...")

        return {} if data is None else data

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Generic JSON request helper used by the MCP layer."""
        data = self._send(method, path, **kwargs)
        validate_api_response(data, f"{method} {path}")
        return data

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Any = None) -> Any:
        return self.request("POST", path, json=data)

    def put(self, path: str, data: Any = None) -> Any:
        return self.request("PUT", path, json=data)

    def patch(self, path: str, data: Any = None) -> Any:
        return self.request("PATCH", path, json=data)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    # Reseller helpers

    def get_reseller_info(self) -> Dict[str, Any]:
        """Return reseller account information in a normalized dict."""
        data = self._send("GET", "/reseller")

        if isinstance(data, list) and data:
            data = data[0]

        if isinstance(data, str) and UUID_PATTERN.match(data):
            return {"id": data}

        if not isinstance(data, dict):
            handle_api_error(
                TypeError(
                    f"Invalid response from /reseller endpoint: expected object, got {type(data).__name__}"
                ),
                "getResellerInfo",
            )
        return data

    def get_reseller_id(self) -> str:
        """Return the reseller id every reseller-scoped endpoint needs."""
        reseller_id = self.get_reseller_info().get("id")
        if not reseller_id:
            raise TwentyIError("Unable to determine reseller ID from account information")
        return str(reseller_id)

    def get_account_balance(self) -> Dict[str, Any]:
        """Return the account balance, tolerating zero-balance accounts."""
        reseller_id = self.get_reseller_id()
        try:
            data = self._send("GET", f"/reseller/{reseller_id}/accountBalance")
        except (NotFoundError, ApiError) as exc:
            if exc.status_code not in (403, 404):
                raise
            logger.info("Balance endpoint returned %s; reporting zero balance", exc.status_code)
            return {
                "balance": 0,
                "currency": "USD",
                "message": BALANCE_UNAVAILABLE_MESSAGE,
                "resellerId": reseller_id,
            }

        if not data:
            return {"balance": 0, "currency": "USD", "message": ZERO_BALANCE_MESSAGE}
        return data

    # Context manager support

    def close(self) -> None:
        """Close HTTP client."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
