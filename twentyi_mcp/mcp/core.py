"""Shared MCP server runtime: API client wiring and tool registry."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from twentyi_mcp.common.api_client.client import TwentyIClient
from twentyi_mcp.common.api_client.errors import TwentyIError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Static MCP metadata
# ---------------------------------------------------------------------------

SERVER_NAME = "20i-mcp-server"
SERVER_VERSION = "1.6.0"

SERVER_INSTRUCTIONS = (
    "Tools for the 20i reseller hosting API: domains, DNS, and hosting packages. "
    "Package-scoped tools need a package_id from list_hosting_packages; "
    "domain tools need a domain_id from list_domains."
)

# ---------------------------------------------------------------------------
# Global runtime (configured by twentyi_mcp.mcp.server)
# ---------------------------------------------------------------------------

config: Any = None
api_client: Optional[TwentyIClient] = None


def set_runtime(config_obj: Any, client: Optional[TwentyIClient]) -> None:
    """Attach Config and TwentyIClient for use by handlers."""
    global config, api_client
    config = config_obj
    api_client = client


def get_client() -> TwentyIClient:
    """Return the client configured in set_runtime()."""
    if api_client is None:
        raise TwentyIError("HTTP client not initialized")
    return api_client


def reseller_path(suffix: str) -> str:
    """Prefix ``suffix`` with the current reseller's path."""
    return f"/reseller/{get_client().get_reseller_id()}{suffix}"


# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

def _module_registry() -> Dict[str, List[Callable[..., Any]]]:
    from twentyi_mcp.mcp import handlers_account, handlers_domains, handlers_packages

    return {
        "account": list(handlers_account.TOOLS),
        "domains": list(handlers_domains.TOOLS),
        "packages": list(handlers_packages.TOOLS),
    }


def load_all_tools() -> Dict[str, Callable[..., Any]]:
    """Combine the tools of every module, keyed by tool name."""
    tools: Dict[str, Callable[..., Any]] = {}
    for module_name, module_tools in _module_registry().items():
        for tool in module_tools:
            if tool.__name__ in tools:
                logger.warning(
                    "Tool '%s' already registered; module %s overrides it",
                    tool.__name__,
                    module_name,
                )
            tools[tool.__name__] = tool
    return tools


def module_names() -> List[str]:
    return list(_module_registry())


__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "SERVER_INSTRUCTIONS",
    "set_runtime",
    "get_client",
    "reseller_path",
    "load_all_tools",
    "module_names",
]
