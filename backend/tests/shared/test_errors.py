"""Tests for shared/errors.py."""

import pytest
import httpx
from unittest.mock import MagicMock

from shared.errors import ErrorKind, classify_backend_error


class FakeAPIError(Exception):
    """Stand-in for SDK errors carrying a code and/or status."""

    def __init__(self, message: str = "", code=None, status=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


class TestTransportErrors:
    def test_connect_error_is_transient(self):
        assert classify_backend_error(httpx.ConnectError("refused")) == ErrorKind.TRANSIENT

    def test_read_timeout_is_transient(self):
        assert classify_backend_error(httpx.ReadTimeout("slow")) == ErrorKind.TRANSIENT

    def test_builtin_timeout_is_transient(self):
        assert classify_backend_error(TimeoutError()) == ErrorKind.TRANSIENT

    def test_connection_error_is_transient(self):
        assert classify_backend_error(ConnectionResetError()) == ErrorKind.TRANSIENT


class TestPostgrestCodes:
    def test_no_rows_is_not_found(self):
        error = FakeAPIError("JSON object requested, multiple (or no) rows returned", code="PGRST116")
        assert classify_backend_error(error) == ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("code", ["42501", "PGRST301", "PGRST302"])
    def test_rls_and_jwt_codes_are_permission(self, code):
        assert classify_backend_error(FakeAPIError("denied", code=code)) == ErrorKind.PERMISSION


class TestAuthCodes:
    @pytest.mark.parametrize(
        "code",
        ["otp_expired", "flow_state_expired", "flow_state_not_found", "bad_code_verifier"],
    )
    def test_dead_link_codes_are_invalid_code(self, code):
        assert classify_backend_error(FakeAPIError("nope", code=code)) == ErrorKind.INVALID_CODE

    def test_code_wins_over_status(self):
        error = FakeAPIError("nope", code="otp_expired", status=403)
        assert classify_backend_error(error) == ErrorKind.INVALID_CODE


class TestStatuses:
    @pytest.mark.parametrize("status", [408, 425, 429, 500, 502, 503])
    def test_retryable_statuses_are_transient(self, status):
        assert classify_backend_error(FakeAPIError("x", status=status)) == ErrorKind.TRANSIENT

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses_are_permission(self, status):
        assert classify_backend_error(FakeAPIError("x", status=status)) == ErrorKind.PERMISSION

    def test_404_is_not_found(self):
        assert classify_backend_error(FakeAPIError("x", status=404)) == ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("status", [400, 410, 422])
    def test_rejected_request_statuses_are_invalid_code(self, status):
        assert classify_backend_error(FakeAPIError("x", status=status)) == ErrorKind.INVALID_CODE

    def test_status_string_is_parsed(self):
        assert classify_backend_error(FakeAPIError("x", status="503")) == ErrorKind.TRANSIENT

    def test_status_from_httpx_response(self):
        response = MagicMock(status_code=401)
        error = httpx.HTTPStatusError("unauthorized", request=MagicMock(), response=response)
        assert classify_backend_error(error) == ErrorKind.PERMISSION


class TestMessages:
    @pytest.mark.parametrize(
        "message",
        [
            "Email link is invalid or has expired",
            "invalid request: both auth code and code verifier should be non-empty",
            "Token has already been used",
        ],
    )
    def test_dead_link_messages_are_invalid_code(self, message):
        assert classify_backend_error(Exception(message)) == ErrorKind.INVALID_CODE

    def test_unknown_error_is_transient(self):
        """Unknown failures must never trigger a destructive action."""
        assert classify_backend_error(RuntimeError("something odd")) == ErrorKind.TRANSIENT
