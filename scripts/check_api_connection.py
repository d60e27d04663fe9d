#!/usr/bin/env python3
"""Check connectivity and credentials against the live 20i API

Usage:
    python scripts/check_api_connection.py [--domain example.com]

Steps:
  1. Reseller account access (required)
  2. Account balance (optional; new accounts may have none)
  3. Domain listing (required)
  4. Lookup of --domain in the listing, with its hosting packages (optional)

Preconditions:
  - TWENTYI_API_KEY, TWENTYI_OAUTH_KEY and TWENTYI_COMBINED_KEY set (or in .env)
"""
import argparse
import logging
import sys
from typing import Any, Dict, List

import requests

from twentyi_mcp.common.api_client.errors import TwentyIError, handle_api_error
from twentyi_mcp.common.config.config import get_config

log = logging.getLogger("check_api_connection")
logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


class ApiProbe:
    """Direct requests session against the 20i API."""

    def __init__(self, base_url: str, authorization: str, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": authorization,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def get(self, path: str) -> Any:
        try:
            response = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
            response.raise_for_status()
            return response.json() if response.content.strip() else {}
        except (requests.RequestException, ValueError) as exc:
            log.debug("GET %s failed: %r", path, exc)
            handle_api_error(exc, f"GET {path}")


def _as_list(data: Any) -> List[Dict[str, Any]]:
    return [item for item in data if isinstance(item, dict)] if isinstance(data, list) else []


def run_checks(probe: ApiProbe, domain_name: str = "") -> int:
    print("Testing 20i API connection...")

    print("\n1. Reseller account access")
    reseller = probe.get("/reseller")
    if isinstance(reseller, list) and reseller:
        reseller = reseller[0]
    reseller_id = reseller.get("id") if isinstance(reseller, dict) else reseller
    print(f"   OK - reseller id: {reseller_id or 'not found'}")

    print("\n2. Account balance")
    if reseller_id:
        try:
            balance = probe.get(f"/reseller/{reseller_id}/accountBalance")
            print(f"   OK - balance: {balance.get('balance', 'not available') if isinstance(balance, dict) else balance}")
        except TwentyIError as exc:
            print(f"   WARN - balance not available (normal for new accounts): {exc.message}")
    else:
        print("   SKIP - no reseller id")

    print("\n3. Domain listing")
    domains = _as_list(probe.get("/domain"))
    print(f"   OK - total domains: {len(domains)}")

    if not domain_name:
        return 0

    print(f"\n4. Looking up {domain_name}")
    match = next((d for d in domains if d.get("name") == domain_name), None)
    if match is None:
        print(f"   MISSING - {domain_name} not in this account. First domains:")
        for domain in domains[:5]:
            print(f"     - {domain.get('name')}")
        return 1
    print(f"   OK - id: {match.get('id')}, status: {match.get('status', 'unknown')}")

    try:
        packages = _as_list(probe.get("/package"))
    except TwentyIError as exc:
        print(f"   WARN - could not list hosting packages: {exc.message}")
        return 0

    related = [
        pkg for pkg in packages
        if domain_name in str(pkg.get("name", "")) or domain_name in str(pkg.get("domain_name", ""))
    ]
    if related:
        for pkg in related:
            print(f"   package: {pkg.get('name')} (id: {pkg.get('id')})")
    else:
        print(f"   WARN - no hosting package found for {domain_name}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Check 20i API connectivity")
    parser.add_argument("--domain", default="", help="Domain name to look up in the account")
    args = parser.parse_args()

    try:
        config = get_config()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    probe = ApiProbe(config.api_base_url, config.authorization_header, config.api_timeout)
    try:
        return run_checks(probe, args.domain)
    except TwentyIError as exc:
        print(f"\nFAILED [{exc.code}] {exc.message}", file=sys.stderr)
        return 1
    finally:
        probe.session.close()


if __name__ == "__main__":
    sys.exit(main())
