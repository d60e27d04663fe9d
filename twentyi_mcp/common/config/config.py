"""Configuration management for the 20i MCP Server

This module automatically loads environment variables from .env file using python-dotenv.
All configuration can be set via environment variables or .env file.

Example MCP configuration in ~/.cursor/mcp.json (using project venv):

{
  "twentyi": {
    "command": "/absolute/path/to/twentyi-mcp/.venv/bin/python",
    "args": ["-m", "twentyi_mcp.mcp.server"],
    "env": {
      "TWENTYI_API_KEY": "...",
      "TWENTYI_OAUTH_KEY": "...",
      "TWENTYI_COMBINED_KEY": "..."
    }
  }
}

Credentials (all required):
- TWENTYI_API_KEY: General API key; sent as "Bearer <base64(key)>"
- TWENTYI_OAUTH_KEY: OAuth client key
- TWENTYI_COMBINED_KEY: Combined key

API client:
- TWENTYI_API_BASE_URL: REST API base URL (default: https://api.20i.com)
- TWENTYI_API_TIMEOUT: HTTP request timeout in seconds (default: 30.0)

Logging:
- TWENTYI_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
- TWENTYI_LOG_DIR: Directory for the rotating log file (optional; console only when unset)
"""
from __future__ import annotations

import base64
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Auto-load .env from project root (before Config class initialization)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_API_BASE_URL = "https://api.20i.com"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = logging.getLogger(__name__)


class Config:
    """Configuration holder for the 20i MCP Server

    Configuration is loaded from environment variables set by the MCP host.
    See module docstring for an example client configuration.
    """

    def __init__(self):
        # Credentials - all three are issued together in the 20i control panel
        self.api_key = os.getenv("TWENTYI_API_KEY", "")
        self.oauth_key = os.getenv("TWENTYI_OAUTH_KEY", "")
        self.combined_key = os.getenv("TWENTYI_COMBINED_KEY", "")

        # API client configuration
        self.api_base_url = os.getenv("TWENTYI_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
        self.api_timeout = float(os.getenv("TWENTYI_API_TIMEOUT", "30.0"))

        # Logging
        self.log_level = os.getenv("TWENTYI_LOG_LEVEL", "INFO").upper()
        log_dir = os.getenv("TWENTYI_LOG_DIR")
        self.log_dir: Optional[str] = log_dir if log_dir else None

        self._validate_credentials()
        self._validate_api_config()

    def _validate_credentials(self):
        """Fail fast when any credential is missing"""
        if not (self.api_key and self.oauth_key and self.combined_key):
            raise ValueError(
                "Failed to load credentials from environment variables. "
                "Please set TWENTYI_API_KEY, TWENTYI_OAUTH_KEY, and TWENTYI_COMBINED_KEY."
            )

    def _validate_api_config(self):
        if not self.api_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid TWENTYI_API_BASE_URL='{self.api_base_url}'. Must start with http:// or https://"
            )

        if self.api_timeout <= 0:
            raise ValueError(
                f"Invalid TWENTYI_API_TIMEOUT={self.api_timeout}. Must be > 0."
            )

        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid TWENTYI_LOG_LEVEL='{self.log_level}'. "
                f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    @property
    def authorization_header(self) -> str:
        """Bearer header value expected by the 20i API.

        The general API key is base64-encoded before use, e.g.
        "Bearer ZGVtby1rZXk=" for the key "demo-key".
        """
        encoded = base64.b64encode(self.api_key.encode("utf-8")).decode("ascii")
        return f"Bearer {encoded}"


def get_config() -> Config:
    """Get configuration instance"""
    return Config()
