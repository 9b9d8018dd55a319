"""
API test fixtures.

FakeContainer swaps the Supabase-backed stores for the in-memory fakes;
the real navigation and onboarding services run on top of them.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from api import app
from api.dependencies import ServiceContainer, get_container
from tests.conftest import FakeProfileStore, FakeSessionStore, FakeUserStore


class FakeContainer(ServiceContainer):
    def __init__(self):
        self.sessions = FakeSessionStore()
        self.users = FakeUserStore()
        self.profiles = FakeProfileStore()
        self.client_error = None
        self.client_tokens: list = []
        self.client_cookies: list = []

    def client(self, access_token=None, refresh_token="", cookies=None):
        self.client_tokens.append(access_token)
        self.client_cookies.append(dict(cookies or {}))
        if self.client_error is not None:
            raise self.client_error
        return MagicMock()

    def session_store(self, client):
        return self.sessions

    def user_store(self, client):
        return self.users

    def profile_store(self, client):
        return self.profiles


@pytest.fixture
def container():
    fake = FakeContainer()
    app.dependency_overrides[get_container] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(container):
    return TestClient(app)
