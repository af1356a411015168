"""Error Hierarchy — status codes and REST envelopes.

Tests:
    - Each access/domain/infrastructure error carries its HTTP status and code
    - to_response() produces the standard envelope
    - ValidationError includes the offending field
"""

import pytest

from sodav.core.errors import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    IdentityProviderError,
    ResourceNotFoundError,
    SodavError,
    UnauthenticatedError,
    ValidationError,
)


@pytest.mark.parametrize("error, status, code", [
    (UnauthenticatedError("x"), 401, "UNAUTHENTICATED"),
    (ForbiddenError("x"), 403, "FORBIDDEN"),
    (ResourceNotFoundError("Song", "1"), 404, "RESOURCE_NOT_FOUND"),
    (ValidationError("x", "isrc"), 400, "VALIDATION_ERROR"),
    (ConflictError("x"), 409, "CONFLICT"),
    (IdentityProviderError("x", "timeout"), 502, "IDENTITY_PROVIDER_ERROR"),
    (DatabaseError("x", "query"), 503, "DATABASE_ERROR"),
])
def test_status_and_code(error, status, code):
    assert isinstance(error, SodavError)
    assert error.http_status == status
    assert error.code == code


def test_response_envelope():
    body = ForbiddenError("Insufficient role for this action.").to_response()
    assert body["error"]["code"] == "FORBIDDEN"
    assert body["error"]["message"] == "Insufficient role for this action."
    assert body["error"]["category"] == "authorization"
    assert "timestamp" in body["error"]


def test_validation_error_reports_field():
    body = ValidationError("'ABC' is not a valid ISRC", "isrc").to_response()
    assert body["error"]["details"] == [
        {"field": "isrc", "message": "'ABC' is not a valid ISRC"},
    ]


def test_not_found_message_names_resource():
    error = ResourceNotFoundError("User", "u9")
    assert error.message == "User 'u9' not found"
