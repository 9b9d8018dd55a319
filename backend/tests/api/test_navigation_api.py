"""Tests for the navigation resolve endpoint."""

import pytest

from shared.exceptions import PermissionOrAuthError, TransientNetworkError
from tests.conftest import create_test_token, make_record, make_session

RESOLVE_URL = "/api/navigation/resolve"


class TestResolveSignedOut:
    def test_protected_page_redirects_to_login(self, client):
        """Signed-out visitors return to the page after logging in."""
        response = client.post(RESOLVE_URL, json={"path": "/dashboard"})

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "auth_required"
        assert data["redirect_to"] == "/login?redirect=%2Fdashboard"
        assert data["sign_out"] is False

    @pytest.mark.parametrize("path", ["/login", "/", "/about", "/student/signup"])
    def test_open_pages_stay(self, client, path):
        response = client.post(RESOLVE_URL, json={"path": path})
        assert response.json()["redirect_to"] is None

    def test_onboarding_page_redirects_without_return(self, client):
        response = client.post(RESOLVE_URL, json={"path": "/onboarding/student"})
        assert response.json()["redirect_to"] == "/login"

    def test_invalid_token_counts_as_signed_out(self, client, container):
        headers = {"Authorization": f"Bearer {create_test_token(expired=True)}"}

        response = client.post(RESOLVE_URL, json={"path": "/dashboard"}, headers=headers)

        assert response.json()["state"] == "auth_required"
        assert container.client_tokens == [None]


class TestResolveSignedIn:
    def test_completed_user_leaves_login(self, client, container, auth_headers):
        container.sessions.session = make_session()
        container.users.records["test-user-123"] = make_record(completed=True)

        response = client.post(RESOLVE_URL, json={"path": "/login"}, headers=auth_headers)

        data = response.json()
        assert data["state"] == "authorized"
        assert data["redirect_to"] == "/dashboard"

    def test_uses_callers_token(self, client, container, auth_headers, auth_token):
        container.sessions.session = make_session()

        client.post(RESOLVE_URL, json={"path": "/login"}, headers=auth_headers)

        assert container.client_tokens == [auth_token]

    def test_incomplete_user_goes_to_onboarding(self, client, container, auth_headers):
        container.sessions.session = make_session()
        container.users.records["test-user-123"] = make_record()

        response = client.post(RESOLVE_URL, json={"path": "/dashboard"}, headers=auth_headers)

        assert response.json()["redirect_to"] == "/onboarding/student"

    def test_unconfirmed_email_signs_out(self, client, container, auth_headers):
        container.sessions.session = make_session(confirmed=False)

        response = client.post(RESOLVE_URL, json={"path": "/dashboard"}, headers=auth_headers)

        data = response.json()
        assert data["state"] == "force_sign_out"
        assert data["sign_out"] is True
        assert data["redirect_to"] == "/login"

    def test_mobile_platform(self, client, container, auth_headers):
        container.sessions.session = make_session()
        container.users.records["test-user-123"] = make_record(completed=True)

        response = client.post(
            RESOLVE_URL,
            json={"path": "/(auth)/login", "platform": "mobile"},
            headers=auth_headers,
        )

        assert response.json()["redirect_to"] == "/(tabs)"


class TestResolveFailures:
    def test_rejected_token_forces_sign_out(self, client, container, auth_headers):
        container.client_error = PermissionOrAuthError()

        response = client.post(RESOLVE_URL, json={"path": "/dashboard"}, headers=auth_headers)

        data = response.json()
        assert data["sign_out"] is True
        assert data["redirect_to"] == "/login"

    def test_backend_unreachable_stays(self, client, container, auth_headers):
        container.client_error = TransientNetworkError()

        response = client.post(RESOLVE_URL, json={"path": "/dashboard"}, headers=auth_headers)

        data = response.json()
        assert data["state"] == "stay"
        assert data["redirect_to"] is None

    def test_record_lookup_failure_stays(self, client, container, auth_headers):
        container.sessions.session = make_session()
        container.users.errors["get_user_record"] = TransientNetworkError()

        response = client.post(RESOLVE_URL, json={"path": "/dashboard"}, headers=auth_headers)

        assert response.json()["state"] == "stay"

    def test_unknown_platform(self, client):
        response = client.post(RESOLVE_URL, json={"path": "/", "platform": "desktop"})
        assert response.status_code == 422
