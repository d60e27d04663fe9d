"""Pydantic models shared across MCP handlers."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from twentyi_mcp.common.api_client import errors
from twentyi_mcp.common.validation import validate_email

ModelT = TypeVar("ModelT", bound=BaseModel)

DNS_RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV")


class RegistrantContact(BaseModel):
    """Validated registrant contact for domain registration.

    Required fields:
    - name, address, city, sp (state/province), pc (postal code),
      cc (country code), telephone, email

    Optional fields:
    - organisation
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Contact person name")
    organisation: str | None = Field(None, description="Organisation name")
    address: str = Field(..., min_length=1, description="Street address")
    city: str = Field(..., min_length=1, description="City")
    sp: str = Field(..., min_length=1, description="State/Province")
    pc: str = Field(..., min_length=1, description="Postal code")
    cc: str = Field(..., min_length=2, max_length=2, description="Country code (e.g., GB, US)")
    telephone: str = Field(..., min_length=1, description="Phone number")
    email: str = Field(..., min_length=1, description="Email address")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        try:
            return validate_email(value, "email")
        except errors.ValidationError as exc:
            raise ValueError(exc.message) from exc

    @field_validator("cc")
    @classmethod
    def _upper_country(cls, value: str) -> str:
        return value.upper()


class DnsRecord(BaseModel):
    """A single DNS record to add or update.

    ``name`` is the subdomain label, or "@" for the zone apex.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    record_type: Literal["A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV"]
    name: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    ttl: int = Field(3600, gt=0)


class DomainRegistration(BaseModel):
    """Body for POST /reseller/{id}/addDomain."""

    name: str
    years: int = Field(..., gt=0)
    contact: RegistrantContact
    privacyService: bool | None = None
    nameservers: List[str] | None = None
    stackUser: str | None = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def format_validation_error(error: ValidationError) -> str:
    """Return a concise validation error message."""
    parts: list[str] = []
    for err in error.errors():
        loc = ".".join(str(piece) for piece in err.get("loc", []) if piece != "__root__")
        prefix = f"{loc}: " if loc else ""
        parts.append(f"{prefix}{err.get('msg')}")
    return "; ".join(parts)


def parse_payload(model: Type[ModelT], data: Any, field_name: str) -> ModelT:
    """Validate ``data`` against ``model`` or raise the domain ValidationError."""
    if not isinstance(data, dict):
        raise errors.ValidationError(f"{field_name} must be an object")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise errors.ValidationError(
            f"Invalid {field_name}: {format_validation_error(exc)}"
        ) from exc
