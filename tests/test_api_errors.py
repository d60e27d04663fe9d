"""Tests for the domain error model and transport/response translation."""

import copy
import errno
import pickle
import socket
from types import SimpleNamespace

import httpx
import pytest
import requests

from twentyi_mcp.common.api_client.errors import (
    ERROR_CODES,
    ApiError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    TwentyIError,
    ValidationError,
    handle_api_error,
    validate_api_response,
)


def _status_error(status: int, **response_kwargs) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.20i.com/domain")
    response = httpx.Response(status, request=request, **response_kwargs)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


def _translate(error, context="testOp") -> TwentyIError:
    with pytest.raises(TwentyIError) as excinfo:
        handle_api_error(error, context)
    return excinfo.value


# ---------------------------------------------------------------------------
# Error model
# ---------------------------------------------------------------------------

def test_base_error_defaults_to_unknown():
    error = TwentyIError("boom")
    assert error.message == "boom"
    assert error.code == "UNKNOWN_ERROR"
    assert error.status_code is None
    assert str(error) == "boom"


def test_base_error_rejects_unknown_code():
    with pytest.raises(ValueError):
        TwentyIError("boom", "TEAPOT")


def test_error_fields_are_read_only():
    error = ApiError("bad gateway", 502)
    with pytest.raises(AttributeError):
        error.code = "NOT_FOUND"
    with pytest.raises(AttributeError):
        error.status_code = 200
    assert error.code == "API_ERROR"
    assert error.status_code == 502


@pytest.mark.parametrize(
    "error, code, status, message",
    [
        (AuthenticationError(), "AUTHENTICATION_ERROR", 401, "Authentication failed"),
        (ValidationError("name must be a non-empty string"), "VALIDATION_ERROR", 400, "name must be a non-empty string"),
        (ApiError("nope", 418), "API_ERROR", 418, "nope"),
        (NotFoundError("Domain"), "NOT_FOUND", 404, "Domain not found"),
        (RateLimitError(), "RATE_LIMIT", 429, "Rate limit exceeded"),
    ],
)
def test_variants_fill_code_and_status(error, code, status, message):
    assert isinstance(error, TwentyIError)
    assert error.code == code
    assert error.status_code == status
    assert error.message == message
    assert error.code in ERROR_CODES


def test_variant_message_can_be_overridden():
    assert AuthenticationError("bad key").message == "bad key"
    assert RateLimitError("slow down").message == "slow down"
    assert NotFoundError(message="Resource in getDomain").message == "Resource in getDomain"


@pytest.mark.parametrize(
    "error",
    [
        ApiError("API error in ctx: Bad Gateway", 502),
        NotFoundError(message="Resource in getDomain"),
        RateLimitError(),
        TwentyIError("Network error in ctx: refused", "NETWORK_ERROR"),
    ],
)
def test_errors_survive_pickle_and_copy(error):
    for clone in (pickle.loads(pickle.dumps(error)), copy.copy(error)):
        assert type(clone) is type(error)
        assert clone.message == error.message
        assert clone.code == error.code
        assert clone.status_code == error.status_code
        assert str(clone) == error.message


# ---------------------------------------------------------------------------
# Transport translator
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "status, error_type, code",
    [
        (401, AuthenticationError, "AUTHENTICATION_ERROR"),
        (404, NotFoundError, "NOT_FOUND"),
        (429, RateLimitError, "RATE_LIMIT"),
    ],
)
def test_special_statuses_map_to_variants(status, error_type, code):
    error = _translate(_status_error(status))
    assert isinstance(error, error_type)
    assert error.code == code
    assert error.status_code == status


@pytest.mark.parametrize("status", [400, 403, 409, 500, 502, 503])
def test_other_statuses_become_api_error_with_same_status(status):
    error = _translate(_status_error(status))
    assert isinstance(error, ApiError)
    assert error.code == "API_ERROR"
    assert error.status_code == status


def test_provider_message_prefers_body_message():
    error = _translate(_status_error(401, json={"message": "Invalid key"}), "getResellerInfo")
    assert error.message == "Authentication failed in getResellerInfo: Invalid key"


def test_provider_message_falls_back_to_status_text():
    error = _translate(_status_error(429, text="<html>slow</html>"), "searchDomains")
    assert error.message == "Rate limit exceeded in searchDomains: Too Many Requests"


def test_provider_message_falls_back_to_literal_default():
    failure = {"response": {"status": 500}}
    error = _translate(failure, "listDomains")
    assert error.message == "API error in listDomains: Unknown API error"
    assert error.status_code == 500


def test_not_found_message_uses_literal_resource():
    error = _translate({"response": {"status": 404}}, "getDomain")
    assert isinstance(error, NotFoundError)
    assert error.message == "Resource in getDomain"
    assert error.status_code == 404


def test_mapping_response_with_data_message_and_status_text():
    failure = {"response": {"status": 503, "data": {"message": "maintenance"}, "statusText": "Service Unavailable"}}
    assert _translate(failure, "ctx").message == "API error in ctx: maintenance"
    failure = {"response": {"status": 503, "statusText": "Service Unavailable"}}
    assert _translate(failure, "ctx").message == "API error in ctx: Service Unavailable"


def test_requests_http_error_is_classified_by_status():
    response = requests.Response()
    response.status_code = 403
    response.reason = "Forbidden"
    response._content = b"not json"
    error = _translate(requests.HTTPError("403", response=response), "createPackage")
    assert isinstance(error, ApiError)
    assert error.status_code == 403
    assert error.message == "API error in createPackage: Forbidden"


@pytest.mark.parametrize("machine_code", ["ECONNREFUSED", "ENOTFOUND"])
def test_network_codes_map_to_network_error(machine_code):
    failure = SimpleNamespace(code=machine_code, message="connect failed")
    error = _translate(failure, "listDomains")
    assert error.code == "NETWORK_ERROR"
    assert error.status_code is None
    assert error.message == "Network error in listDomains: connect failed"


@pytest.mark.parametrize(
    "failure",
    [
        httpx.ConnectError("Connection refused"),
        requests.ConnectionError("Connection refused"),
        ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"),
        socket.gaierror(-2, "Name or service not known"),
    ],
)
def test_client_connection_failures_map_to_network_error(failure):
    error = _translate(failure, "getResellerInfo")
    assert error.code == "NETWORK_ERROR"
    assert error.message.startswith("Network error in getResellerInfo: ")
    assert error.__cause__ is failure


def test_abort_code_maps_to_timeout():
    error = _translate({"code": "ECONNABORTED"}, "listDomains")
    assert error.code == "TIMEOUT_ERROR"
    assert error.message == "Request timeout in listDomains"


@pytest.mark.parametrize(
    "failure",
    [
        httpx.ReadTimeout("timed out"),
        httpx.ConnectTimeout("timed out"),
        requests.Timeout("timed out"),
        requests.ConnectTimeout("timed out"),
        TimeoutError("timed out"),
    ],
)
def test_client_timeouts_map_to_timeout(failure):
    error = _translate(failure, "getDomainWhois")
    assert error.code == "TIMEOUT_ERROR"
    assert error.message == "Request timeout in getDomainWhois"


def test_unclassified_failure_is_unknown_with_original_message():
    error = _translate(RuntimeError("socket closed"), "deletePackage")
    assert error.code == "UNKNOWN_ERROR"
    assert error.message == "Unexpected error in deletePackage: socket closed"


def test_unknown_failure_shapes_never_break_the_translator():
    assert _translate(None, "ctx").message == "Unexpected error in ctx: None"
    assert _translate("weird", "ctx").message == "Unexpected error in ctx: weird"
    assert _translate({"code": 42}, "ctx").code == "UNKNOWN_ERROR"
    assert _translate({"response": {"status": "500"}}, "ctx").code == "UNKNOWN_ERROR"


def test_response_takes_precedence_over_machine_code():
    failure = {"response": {"status": 502}, "code": "ECONNREFUSED"}
    error = _translate(failure, "ctx")
    assert error.code == "API_ERROR"
    assert error.status_code == 502


# ---------------------------------------------------------------------------
# Response-shape validator
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("body", [None, "", "   "])
def test_empty_body_is_rejected(body):
    with pytest.raises(ApiError) as excinfo:
        validate_api_response(body, "GET /domain")
    assert excinfo.value.message == "Empty response from GET /domain"
    assert excinfo.value.status_code == 500


def test_error_field_uses_body_status():
    with pytest.raises(ApiError) as excinfo:
        validate_api_response({"error": "quota exceeded", "status": 403}, "createPackage")
    assert excinfo.value.message == "API returned error in createPackage: quota exceeded"
    assert excinfo.value.status_code == 403


def test_error_field_defaults_status_to_500():
    with pytest.raises(ApiError) as excinfo:
        validate_api_response({"error": "boom"}, "ctx")
    assert excinfo.value.status_code == 500


def test_error_status_string_is_rejected():
    with pytest.raises(ApiError) as excinfo:
        validate_api_response({"status": "error"}, "ctx")
    assert excinfo.value.message == "API returned error status in ctx: Unknown error"
    assert excinfo.value.status_code == 500

    with pytest.raises(ApiError) as excinfo:
        validate_api_response({"status": "error", "message": "locked"}, "ctx")
    assert excinfo.value.message == "API returned error status in ctx: locked"


@pytest.mark.parametrize("body", [{}, [], {"status": "ok"}, [{"id": 1}], "uuid-string", 0])
def test_valid_bodies_pass(body):
    assert validate_api_response(body, "ctx") is None
