"""
Database client factory for Supabase.

Provides the device client (anon key, owns the signed-in session), a
service-role client for trusted backend operations, and user-authenticated
clients for operations respecting RLS.
"""

import base64
import json
from typing import Any, Mapping, Optional

from supabase import create_client, Client, ClientOptions

from .config import get_settings

# Module-level client cache
_client: Optional[Client] = None
_service_client: Optional[Client] = None


CODE_VERIFIER_SUFFIX = "-code-verifier"
BASE64_PREFIX = "base64-"


def _cookie_value(raw: str) -> str:
    """Unwrap a value written by the browser's Supabase client (base64 or JSON string)."""
    value = raw
    if value.startswith(BASE64_PREFIX):
        encoded = value[len(BASE64_PREFIX):]
        value = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
    if value.startswith('"'):
        try:
            value = json.loads(value)
        except ValueError:
            pass
    return value


class RequestCookieStorage:
    """
    Auth storage over the cookies of one web request.

    The browser starts the PKCE flow and keeps the code verifier in a cookie
    named "<storage key>-code-verifier". The SDK looks the verifier up under
    its own storage key, so any item ending in "-code-verifier" is answered
    from the matching cookie. Writes stay in memory for the request.
    """

    def __init__(self, cookies: Optional[Mapping[str, str]] = None):
        self._cookies = dict(cookies or {})
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        if key in self._items:
            return self._items[key]
        if key in self._cookies:
            return _cookie_value(self._cookies[key])
        if key.endswith(CODE_VERIFIER_SUFFIX):
            for name, value in self._cookies.items():
                if name.endswith(CODE_VERIFIER_SUFFIX):
                    return _cookie_value(value)
        return None

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
        self._cookies.pop(key, None)


def get_supabase_client(storage: Any = None) -> Client:
    """
    Get the Supabase client that owns the current device session.

    The first call creates the client; later calls return the cached one and
    ignore ``storage``.

    Args:
        storage: Optional session persistence primitive supplied by the
            platform (must implement get_item/set_item/remove_item)

    Returns:
        Supabase client configured with the anon key and the PKCE flow
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
            )
        if storage is not None:
            options = ClientOptions(flow_type="pkce", storage=storage)
        else:
            options = ClientOptions(flow_type="pkce")
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
            options=options,
        )

    return _client


def get_supabase_service_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this only for trusted backend operations, never on a device.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_user_client(access_token: str, refresh_token: str = "") -> Client:
    """
    Get Supabase client authenticated as a specific user.

    Use this for operations that should respect Row Level Security (RLS),
    such as writing the user's own record during onboarding.

    Args:
        access_token: JWT access token from Supabase Auth
        refresh_token: Refresh token, empty for short-lived backend use

    Returns:
        Supabase client configured with user's access token
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )

    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )
    client.auth.set_session(access_token, refresh_token)
    return client


def create_request_client(cookies: Optional[Mapping[str, str]] = None) -> Client:
    """
    Create an uncached anon client scoped to a single web request.

    The web auth callback exchanges a code on this client so sessions of
    different visitors never share state. Its PKCE storage reads the
    request's cookies, where the browser left the code verifier.

    Args:
        cookies: Cookies of the incoming request
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )
    options = ClientOptions(flow_type="pkce", storage=RequestCookieStorage(cookies))
    return create_client(settings.supabase_url, settings.supabase_anon_key, options=options)


def reset_client_cache() -> None:
    """
    Reset the cached database clients.

    Useful for testing or when configuration changes.
    """
    global _client, _service_client
    _client = None
    _service_client = None
