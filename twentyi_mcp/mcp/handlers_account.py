"""MCP tool handlers for reseller account information."""

from typing import Any, Dict

from twentyi_mcp.mcp.core import get_client


def get_reseller_info() -> Dict[str, Any]:
    """Return the reseller account this server is authenticated as."""
    return get_client().get_reseller_info()


def get_account_balance() -> Dict[str, Any]:
    """
    Return the reseller account balance.

    Accounts with zero balance or no payment history report
    {"balance": 0, "currency": "USD", "message": ...} instead of an error.
    """
    return get_client().get_account_balance()


TOOLS = [get_reseller_info, get_account_balance]
