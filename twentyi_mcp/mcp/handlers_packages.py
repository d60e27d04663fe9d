"""MCP tool handlers for hosting package management."""

from typing import Any, Dict, List, Optional

from twentyi_mcp.common.validation import (
    validate_object,
    validate_optional,
    validate_password,
    validate_string,
    validate_string_array,
)
from twentyi_mcp.mcp.core import get_client, reseller_path


def _package_path(package_id: Any, suffix: str = "") -> str:
    package_id = validate_string(package_id, "package_id")
    return f"/package/{package_id}{suffix}"


def list_hosting_packages() -> Any:
    """List all hosting packages in the reseller account."""
    return get_client().get("/package")


def get_hosting_package_info(package_id: str) -> Any:
    """Get detailed information about a hosting package."""
    return get_client().get(_package_path(package_id))


def create_hosting_package(
    domain_name: str,
    package_type: str,
    username: str,
    password: str,
    extra_domain_names: Optional[List[str]] = None,
    document_roots: Optional[Dict[str, str]] = None,
    stack_user: Optional[str] = None,
) -> Any:
    """
    Create a new hosting package.

    Args:
        domain_name: Primary domain name for the package
        package_type: Package type id (see get_package_types)
        username: Username for the hosting account
        password: Password for the hosting account (at least 8 characters)
        extra_domain_names: Additional domain names to add to the package
        document_roots: Document root mappings for domains
        stack_user: Stack user to grant access to the package
    """
    payload: Dict[str, Any] = {
        "domain_name": validate_string(domain_name, "domain_name"),
        "package_type": validate_string(package_type, "package_type"),
        "username": validate_string(username, "username"),
        "password": validate_password(password, "password"),
    }
    extra = validate_optional(extra_domain_names, validate_string_array, "extra_domain_names")
    if extra is not None:
        payload["extra_domain_names"] = extra
    roots = validate_optional(document_roots, validate_object, "document_roots")
    if roots is not None:
        payload["documentRoots"] = roots
    user = validate_optional(stack_user, validate_string, "stack_user")
    if user is not None:
        payload["stackUser"] = user

    return get_client().post(reseller_path("/addWeb"), payload)


def get_hosting_package_web_info(package_id: str) -> Any:
    """Get web-specific hosting package information."""
    return get_client().get(_package_path(package_id, "/web"))


def get_hosting_package_limits(package_id: str) -> Any:
    """Get hosting package limits and quotas."""
    return get_client().get(_package_path(package_id, "/limits"))


def get_hosting_package_usage(package_id: str) -> Any:
    """Get hosting package usage statistics."""
    return get_client().get(_package_path(package_id, "/web/usage"))


def update_hosting_package(package_id: str, update_data: Dict[str, Any]) -> Any:
    """Update hosting package settings."""
    path = _package_path(package_id)
    return get_client().post(path, validate_object(update_data, "update_data"))


def delete_hosting_package(package_id: str) -> Any:
    """Delete a hosting package."""
    return get_client().delete(_package_path(package_id))


def get_package_types() -> Any:
    """Get the hosting package types available to the reseller."""
    return get_client().get(reseller_path("/packageTypes"))


def get_package_configuration(package_id: str) -> Any:
    """Get hosting package configuration settings."""
    return get_client().get(_package_path(package_id, "/config"))


def update_package_configuration(package_id: str, configuration: Dict[str, Any]) -> Any:
    """Update hosting package configuration settings."""
    path = _package_path(package_id, "/config")
    return get_client().post(path, validate_object(configuration, "configuration"))


def get_package_services(package_id: str) -> Any:
    """Get services enabled for a hosting package."""
    return get_client().get(_package_path(package_id, "/services"))


def get_package_disk_usage(package_id: str) -> Any:
    """Get disk usage statistics for a hosting package."""
    return get_client().get(_package_path(package_id, "/web/diskUsage"))


def get_package_bandwidth_usage(package_id: str) -> Any:
    """Get bandwidth usage statistics for a hosting package."""
    return get_client().get(_package_path(package_id, "/web/bandwidthUsage"))


def suspend_package(package_id: str, reason: Optional[str] = None) -> Any:
    """Suspend a hosting package, optionally recording a reason."""
    path = _package_path(package_id, "/suspend")
    reason = validate_optional(reason, validate_string, "reason")
    return get_client().post(path, {"reason": reason} if reason else {})


def unsuspend_package(package_id: str) -> Any:
    """Lift the suspension of a hosting package."""
    return get_client().post(_package_path(package_id, "/unsuspend"), {})


def get_package_stack_users(package_id: str) -> Any:
    """List stack users with access to a hosting package."""
    return get_client().get(_package_path(package_id, "/stackUsers"))


def add_stack_user_to_package(package_id: str, stack_user: str) -> Any:
    """Grant a stack user access to a hosting package."""
    path = _package_path(package_id, "/stackUsers")
    return get_client().post(path, {"stackUser": validate_string(stack_user, "stack_user")})


def remove_stack_user_from_package(package_id: str, stack_user: str) -> Any:
    """Revoke a stack user's access to a hosting package."""
    stack_user = validate_string(stack_user, "stack_user")
    return get_client().delete(_package_path(package_id, f"/stackUsers/{stack_user}"))


TOOLS = [
    list_hosting_packages,
    get_hosting_package_info,
    create_hosting_package,
    get_hosting_package_web_info,
    get_hosting_package_limits,
    get_hosting_package_usage,
    update_hosting_package,
    delete_hosting_package,
    get_package_types,
    get_package_configuration,
    update_package_configuration,
    get_package_services,
    get_package_disk_usage,
    get_package_bandwidth_usage,
    suspend_package,
    unsuspend_package,
    get_package_stack_users,
    add_stack_user_to_package,
    remove_stack_user_from_package,
]
