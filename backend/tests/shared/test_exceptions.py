"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    FirstPrincipleError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    TransientNetworkError,
    PermissionOrAuthError,
)


class TestFirstPrincipleError:
    def test_stores_message(self):
        """FirstPrincipleError should store message."""
        error = FirstPrincipleError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """FirstPrincipleError should default code to class name."""
        error = FirstPrincipleError("Test error")
        assert error.code == "FirstPrincipleError"

    def test_custom_code(self):
        error = FirstPrincipleError("Test error", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_default_details(self):
        error = FirstPrincipleError("Test error")
        assert error.details == {}

    def test_to_dict(self):
        """FirstPrincipleError should convert to dict."""
        error = FirstPrincipleError("Test error", code="TEST_ERROR", details={"key": "value"})
        result = error.to_dict()

        assert result["error"] == "TEST_ERROR"
        assert result["message"] == "Test error"
        assert result["details"]["key"] == "value"


class TestSubclasses:
    @pytest.mark.parametrize(
        "exc_type",
        [NotFoundError, ValidationError, AuthenticationError, AuthorizationError],
    )
    def test_inherit_base(self, exc_type):
        error = exc_type("boom")
        assert isinstance(error, FirstPrincipleError)
        assert error.code == exc_type.__name__

    def test_validation_error_with_details(self):
        """ValidationError should support field-level details."""
        error = ValidationError(
            "Validation failed",
            details={"fields": {"email": "Invalid format"}}
        )
        assert error.details["fields"]["email"] == "Invalid format"


class TestExternalServiceError:
    def test_stores_service(self):
        error = ExternalServiceError("Connection failed", service="supabase")
        assert error.service == "supabase"
        assert error.to_dict()["details"]["service"] == "supabase"

    def test_preserves_other_details(self):
        error = ExternalServiceError(
            "Connection failed",
            service="supabase",
            details={"status_code": 503}
        )
        result = error.to_dict()

        assert result["details"]["service"] == "supabase"
        assert result["details"]["status_code"] == 503


class TestTransientNetworkError:
    def test_defaults(self):
        error = TransientNetworkError()
        assert isinstance(error, ExternalServiceError)
        assert error.code == "TRANSIENT_NETWORK_ERROR"
        assert error.service == "supabase"
        assert error.message == "Backend temporarily unavailable"

    def test_custom_message_and_details(self):
        error = TransientNetworkError("timed out", details={"user_id": "u1"})
        assert error.message == "timed out"
        assert error.details == {"user_id": "u1", "service": "supabase"}


class TestPermissionOrAuthError:
    def test_is_authorization_error(self):
        error = PermissionOrAuthError()
        assert isinstance(error, AuthorizationError)
        assert error.code == "PERMISSION_OR_AUTH_ERROR"

    def test_custom_message(self):
        error = PermissionOrAuthError("JWT expired")
        assert error.to_dict()["message"] == "JWT expired"
