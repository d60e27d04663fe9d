"""Error translation between the 20i domain errors and MCP."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, TypeVar

from fastmcp.exceptions import ToolError
from mcp import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, INVALID_REQUEST, ErrorData

from twentyi_mcp.common.api_client.errors import (
    AUTHENTICATION_ERROR,
    NOT_FOUND,
    RATE_LIMIT,
    VALIDATION_ERROR,
    TwentyIError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

MCP_CODE_BY_ERROR_CODE: Dict[str, int] = {
    AUTHENTICATION_ERROR: INVALID_REQUEST,
    NOT_FOUND: INVALID_REQUEST,
    RATE_LIMIT: INVALID_REQUEST,
    VALIDATION_ERROR: INVALID_PARAMS,
}


def to_mcp_error(error: Any) -> McpError:
    """
    Translate any error to an MCP error.

    Error mapping:
    - McpError → returned unchanged
    - ToolCallError → McpError with the same error data
    - AUTHENTICATION_ERROR, NOT_FOUND, RATE_LIMIT → INVALID_REQUEST
    - VALIDATION_ERROR → INVALID_PARAMS
    - other TwentyIError codes → INTERNAL_ERROR
    - other exceptions and non-exception values → INTERNAL_ERROR
    """
    if isinstance(error, McpError):
        return error

    if isinstance(error, ToolCallError):
        return McpError(error.error)

    if isinstance(error, TwentyIError):
        mcp_code = MCP_CODE_BY_ERROR_CODE.get(error.code, INTERNAL_ERROR)
        return McpError(
            ErrorData(
                code=mcp_code,
                message=error.message,
                data={"code": error.code, "status_code": error.status_code},
            )
        )

    return McpError(ErrorData(code=INTERNAL_ERROR, message=str(error)))


class ToolCallError(ToolError):
    """A tool failure already translated to MCP error data.

    FastMCP reports a ToolError to the client as an error result whose text
    is ``str(error)``, so the message is kept verbatim. The category and the
    domain code stay available on ``error``.
    """

    def __init__(self, error: ErrorData):
        super().__init__(error.message)
        self.error = error


def mcp_error_boundary(func: F) -> F:
    """Wrap a tool so every failure leaves it as a ToolCallError."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            error = to_mcp_error(exc).error
            # FastMCP logs the traceback of failed tool calls itself
            logger.warning(
                "Tool %s failed with MCP code %s: %s", func.__name__, error.code, error.message
            )
            raise ToolCallError(error) from exc

    return wrapper  # type: ignore[return-value]


__all__ = ["MCP_CODE_BY_ERROR_CODE", "ToolCallError", "to_mcp_error", "mcp_error_boundary"]
