"""MCP tool handlers for domain management and DNS operations."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from twentyi_mcp.common.api_client.errors import (
    ApiError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from twentyi_mcp.common.validation import (
    validate_boolean,
    validate_domain,
    validate_enum,
    validate_object,
    validate_optional,
    validate_positive_integer,
    validate_string,
    validate_string_array,
)
from twentyi_mcp.mcp.core import get_client, reseller_path
from twentyi_mcp.mcp.models import (
    DNS_RECORD_TYPES,
    DnsRecord,
    DomainRegistration,
    RegistrantContact,
    parse_payload,
)


def _package_domain_path(package_id: Any, domain_id: Any, suffix: str) -> str:
    package_id = validate_string(package_id, "package_id")
    domain_id = validate_string(domain_id, "domain_id")
    return f"/package/{package_id}/domain/{domain_id}{suffix}"


def list_domains() -> Any:
    """List all domains in the reseller account."""
    return get_client().get("/domain")


def get_domain_info(domain_id: str) -> Any:
    """Get detailed information about a specific domain."""
    domain_id = validate_string(domain_id, "domain_id")
    return get_client().get(reseller_path(f"/domain/{domain_id}"))


def register_domain(
    name: str,
    years: int,
    contact: Dict[str, Any],
    privacy_service: Optional[bool] = None,
    nameservers: Optional[List[str]] = None,
    stack_user: Optional[str] = None,
) -> Any:
    """
    Register a new domain name.

    Args:
        name: Domain name to register (e.g., example.com)
        years: Number of years to register for
        contact: Registrant contact with name, address, city, sp (state/province),
            pc (postal code), cc (country code), telephone, email and optional organisation
        privacy_service: Enable domain privacy protection
        nameservers: Custom nameservers (defaults to 20i nameservers)
        stack_user: Stack user to grant access to
    """
    registration = DomainRegistration(
        name=validate_domain(name, "name"),
        years=validate_positive_integer(years, "years"),
        contact=parse_payload(RegistrantContact, contact, "contact"),
        privacyService=validate_optional(privacy_service, validate_boolean, "privacy_service"),
        nameservers=validate_optional(nameservers, validate_string_array, "nameservers"),
        stackUser=validate_optional(stack_user, validate_string, "stack_user"),
    )
    return get_client().post(reseller_path("/addDomain"), registration.to_payload())


def search_domains(
    search_term: str,
    suggestions: Optional[bool] = None,
    tlds: Optional[List[str]] = None,
) -> Any:
    """
    Search for domain availability and get suggestions.

    Args:
        search_term: Full domain name (e.g., "example.com") or a prefix
            (e.g., "example") to search across all TLDs
        suggestions: Enable domain name suggestions
        tlds: Specific TLDs to search (defaults to all supported TLDs)
    """
    search_term = validate_string(search_term, "search_term")
    suggestions = validate_optional(suggestions, validate_boolean, "suggestions")
    tlds = validate_optional(tlds, validate_string_array, "tlds")

    params: Dict[str, str] = {}
    if suggestions is not None:
        params["suggestions"] = "true" if suggestions else "false"
    if tlds:
        params["tlds"] = ",".join(tlds)

    try:
        return get_client().get(f"/domain-search/{quote(search_term, safe='')}", params=params or None)
    except RateLimitError as exc:
        raise RateLimitError("Domain search rate limit exceeded. Please try again later.") from exc


def get_domain_verification_status() -> Any:
    """Get verification status for domains requiring verification."""
    try:
        return get_client().get("/domainVerification")
    except NotFoundError:
        # No domains pending verification
        return []


def resend_domain_verification_email(package_id: str, domain_id: str) -> Any:
    """Resend the verification email for a domain."""
    path = _package_domain_path(package_id, domain_id, "/resendVerificationEmail")
    try:
        return get_client().post(path, {})
    except NotFoundError as exc:
        raise NotFoundError("Domain or applicable verification email") from exc


def get_dns_records(domain_id: str) -> Any:
    """Get DNS records for a domain."""
    domain_id = validate_string(domain_id, "domain_id")
    return get_client().get(reseller_path(f"/domain/{domain_id}/dns"))


def update_dns_record(
    domain_id: str,
    record_type: str,
    name: str,
    value: str,
    ttl: Optional[int] = None,
) -> Any:
    """
    Update or add a DNS record for a domain.

    Args:
        domain_id: Domain ID to update the DNS record for
        record_type: One of A, AAAA, CNAME, MX, TXT, NS, SRV
        name: Record name (subdomain, or @ for the root)
        value: Record value (IP address, hostname, etc.)
        ttl: Time to live in seconds (default: 3600)
    """
    domain_id = validate_string(domain_id, "domain_id")
    record = DnsRecord(
        record_type=validate_enum(record_type, DNS_RECORD_TYPES, "record_type"),
        name=validate_string(name, "name"),
        value=validate_string(value, "value"),
        ttl=validate_optional(ttl, validate_positive_integer, "ttl") or 3600,
    )
    return get_client().post(reseller_path(f"/domain/{domain_id}/dns"), record.model_dump())


def get_domain_periods() -> Any:
    """List all possible domain periods supported for registration."""
    return get_client().get("/domain-period")


def get_domain_premium_types() -> Any:
    """List all domain extensions with their associated premium group."""
    return get_client().get("/domainPremiumType")


def get_domain_transfer_status(package_id: str, domain_id: str) -> Any:
    """Get the transfer status of a domain."""
    path = _package_domain_path(package_id, domain_id, "/pendingTransferStatus")
    try:
        return get_client().get(path)
    except NotFoundError as exc:
        raise NotFoundError("Domain or transfer status") from exc


def get_domain_auth_code(package_id: str, domain_id: str) -> Any:
    """Get the authorization (EPP) code for a domain."""
    path = _package_domain_path(package_id, domain_id, "/authCode")
    try:
        return get_client().get(path)
    except NotFoundError as exc:
        raise NotFoundError("Domain or auth code") from exc


def get_domain_whois(package_id: str, domain_id: str) -> Any:
    """Get WHOIS information for a domain."""
    path = _package_domain_path(package_id, domain_id, "/whois")
    try:
        return get_client().get(path)
    except NotFoundError as exc:
        raise NotFoundError("Domain or WHOIS data") from exc


def set_domain_transfer_lock(package_id: str, domain_id: str, enabled: bool) -> Any:
    """Enable (true) or disable (false) the transfer lock for a domain."""
    path = _package_domain_path(package_id, domain_id, "/canTransfer")
    enabled = validate_boolean(enabled, "enabled")
    try:
        return get_client().post(path, {"enable": enabled})
    except NotFoundError as exc:
        raise NotFoundError("Domain or transfer lock") from exc


def transfer_domain(package_id: str, domain_id: str, transfer_data: Dict[str, Any]) -> Any:
    """
    Transfer a domain to this account.

    Args:
        package_id: Package ID to transfer the domain to
        domain_id: Domain ID to transfer
        transfer_data: Transfer configuration including auth code and contact details
    """
    path = _package_domain_path(package_id, domain_id, "/transfer")
    transfer_data = validate_object(transfer_data, "transfer_data")
    try:
        return get_client().post(path, transfer_data)
    except ApiError as exc:
        if exc.status_code != 400:
            raise
        raise ValidationError(
            "Invalid domain transfer configuration. Check domain name, contact details, and auth code."
        ) from exc


TOOLS = [
    list_domains,
    get_domain_info,
    register_domain,
    search_domains,
    get_domain_verification_status,
    resend_domain_verification_email,
    get_dns_records,
    update_dns_record,
    get_domain_periods,
    get_domain_premium_types,
    get_domain_transfer_status,
    get_domain_auth_code,
    get_domain_whois,
    set_domain_transfer_lock,
    transfer_domain,
]
