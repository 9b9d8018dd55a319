"""
Deep link decoder.

Turns a URL handed over by the OS (custom scheme or universal link) into a
DeepLinkIntent. Pure: no I/O, never raises.

Recognized paths, on the app scheme or a universal-link host:
    /auth/callback    OAuth completion and email verification
    /reset-password   password recovery (requires a code)

Tokens may arrive in the query string or in the fragment depending on the
auth flow; both are read and the fragment wins on conflict.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence, Union
from urllib.parse import parse_qsl, urlsplit

from shared.config import get_settings

from .models import DeepLinkIntent, DeepLinkKind, NO_INTENT

logger = logging.getLogger(__name__)

CALLBACK_PATH = ("auth", "callback")
RESET_PATH = ("reset-password",)
RECOVERY_TYPE = "recovery"

# Expo development builds prefix app paths with "/--/"
_EXPO_SCHEMES = {"exp", "exps"}
_EXPO_MARKER = "--"


def _segments(path: str) -> list[str]:
    """Split a path, dropping empty parts and route-group markers like (auth)."""
    return [
        part
        for part in path.split("/")
        if part and not (part.startswith("(") and part.endswith(")"))
    ]


def _parse_pairs(raw: str) -> dict[str, str]:
    return {key: value for key, value in parse_qsl(raw, keep_blank_values=False)}


def intent_from_params(
    path: Union[str, Sequence[str]],
    params: Mapping[str, str],
) -> DeepLinkIntent:
    """
    Build an intent from an already-split path and merged parameters.

    This is the host-independent half of decode(); the web callback endpoint
    calls it with the request path and query.

    Args:
        path: URL path, or its segments
        params: Query and fragment parameters (fragment already applied)

    Returns:
        The DeepLinkIntent, kind NONE if nothing is recognized
    """
    segments = tuple(_segments(path) if isinstance(path, str) else path)
    if segments not in (CALLBACK_PATH, RESET_PATH):
        return NO_INTENT

    params = dict(params)
    code = params.get("code") or params.get("token_hash")
    link_type = params.get("type")
    error = params.get("error_description") or params.get("error")

    # Recovery precedence: a recovery code never goes through generic callback handling
    if code and link_type == RECOVERY_TYPE:
        return DeepLinkIntent(
            kind=DeepLinkKind.PASSWORD_RESET,
            code=code,
            link_type=link_type,
            params=params,
        )

    if segments == RESET_PATH:
        if not code:
            logger.info("Reset-password link without a code, ignoring")
            return NO_INTENT
        return DeepLinkIntent(
            kind=DeepLinkKind.PASSWORD_RESET,
            code=code,
            link_type=link_type,
            params=params,
        )

    access_token = params.get("access_token")
    refresh_token = params.get("refresh_token")
    if not (code or (access_token and refresh_token) or error):
        logger.info("Auth callback link without code or tokens, ignoring")
        return NO_INTENT

    return DeepLinkIntent(
        kind=DeepLinkKind.AUTH_CALLBACK,
        code=code,
        access_token=access_token,
        refresh_token=refresh_token,
        link_type=link_type,
        error=error,
        params=params,
    )


def decode(
    url: Optional[str],
    scheme: Optional[str] = None,
    hosts: Optional[Iterable[str]] = None,
) -> DeepLinkIntent:
    """
    Decode an incoming URL into a DeepLinkIntent.

    Args:
        url: URL from the OS, or None
        scheme: Custom app scheme (defaults to settings.app_scheme)
        hosts: Universal-link hosts (defaults to settings.universal_link_hosts)

    Returns:
        The decoded intent; kind NONE for absent, unparseable or foreign URLs
    """
    if not url or not isinstance(url, str):
        return NO_INTENT

    if scheme is None or hosts is None:
        settings = get_settings()
        scheme = scheme if scheme is not None else settings.app_scheme
        hosts = hosts if hosts is not None else settings.universal_link_hosts
    allowed_hosts = {host.lower() for host in hosts}

    try:
        parts = urlsplit(url.strip())
        url_scheme = parts.scheme.lower()
        hostname = (parts.hostname or "").lower()
    except ValueError as e:
        logger.warning("Could not parse deep link %r: %s", url, e)
        return NO_INTENT

    if url_scheme == scheme.lower():
        # scheme://auth/callback puts the first path segment in the netloc
        segments = _segments(parts.netloc) + _segments(parts.path)
    elif url_scheme in _EXPO_SCHEMES:
        segments = _segments(parts.path)
        if _EXPO_MARKER not in segments:
            return NO_INTENT
        segments = segments[segments.index(_EXPO_MARKER) + 1:]
    elif url_scheme in ("http", "https") and hostname in allowed_hosts:
        segments = _segments(parts.path)
    else:
        logger.debug("Ignoring link with unrecognized scheme or host: %s", url)
        return NO_INTENT

    params = _parse_pairs(parts.query)
    params.update(_parse_pairs(parts.fragment))
    return intent_from_params(segments, params)
