"""20i MCP Server - stdio entrypoint."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from twentyi_mcp.common.api_client.client import TwentyIClient
from twentyi_mcp.common.config.config import get_config
from twentyi_mcp.mcp.core import (
    SERVER_INSTRUCTIONS,
    SERVER_NAME,
    SERVER_VERSION,
    load_all_tools,
    module_names,
    set_runtime,
)
from twentyi_mcp.mcp.errors import mcp_error_boundary

logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

# Global state
config: Any = None
api_client: TwentyIClient | None = None
_initialized = False


def _setup_logging(config_obj) -> None:
    """Configure root logger with console and optional rotating file handler."""
    root = logging.getLogger()
    level = getattr(
        logging,
        str(getattr(config_obj, "log_level", "INFO")).upper(),
        logging.INFO,
    )
    root.setLevel(level)

    fmt = logging.Formatter(
        fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Avoid duplicate handlers if reloaded
    existing_targets = set()
    for handler in list(root.handlers):
        target = getattr(handler, "baseFilename", None) or getattr(handler, "stream", None)
        existing_targets.add(target)

    # Console handler; stdout carries the MCP stdio transport
    if sys.stderr not in existing_targets:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(level)
        ch.setFormatter(fmt)
        root.addHandler(ch)

    log_dir = getattr(config_obj, "log_dir", None)
    if not log_dir:
        return

    # File handler
    try:
        log_path = Path(log_dir) / "twentyi_mcp.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if str(log_path.resolve()) not in existing_targets:
            fh = RotatingFileHandler(str(log_path), maxBytes=5_242_880, backupCount=3)
            fh.setLevel(level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

        logger.info(
            "Logging initialized. Level=%s, file=%s",
            logging.getLevelName(level),
            log_path,
        )
    except OSError as exc:  # pragma: no cover - best effort
        logger.warning("Failed to initialize file logging: %s", exc)


def register_tools(server: FastMCP) -> int:
    """Register every module's tools behind the MCP error boundary."""
    tools = load_all_tools()
    for tool in tools.values():
        server.tool()(mcp_error_boundary(tool))
    return len(tools)


def init_server() -> None:
    """Initialize MCP server with configuration and API client."""
    global config, api_client, _initialized

    if _initialized:
        logger.info("init_server() called after initialization; reusing existing services.")
        return

    config = get_config()
    _setup_logging(config)

    logger.info("%s v%s starting; API base URL: %s", SERVER_NAME, SERVER_VERSION, config.api_base_url)
    api_client = TwentyIClient.from_config(config)
    set_runtime(config, api_client)

    count = register_tools(mcp)
    logger.info("Loaded %d tools from modules: %s", count, ", ".join(module_names()))
    _initialized = True


def main() -> None:
    """Console entrypoint: initialize and serve over stdio."""
    init_server()
    mcp.run()


# Initialize on module load unless explicitly skipped (useful for tests)
if os.getenv("TWENTYI_SKIP_MCP_AUTOSTART", "0") != "1":
    init_server()


if __name__ == "__main__":
    # Run MCP server over stdio when executed directly
    main()
