from __future__ import annotations

import base64
import json

from fastapi import Request, Response

from makeup_api.domain.entities.identity import AuthSession
from makeup_api.shared.config import Settings


REFRESH_COOKIE_SUFFIX = "-refresh"
CODE_VERIFIER_COOKIE_SUFFIX = "-code-verifier"
REFRESH_COOKIE_MAX_AGE_SECONDS = 60 * 60 * 24 * 30
DEFAULT_ACCESS_MAX_AGE_SECONDS = 60 * 60


def _access_token_from_payload(payload) -> str | None:
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    if isinstance(payload, dict):
        token = payload.get("access_token")
        if isinstance(token, str):
            return token
    return None


def parse_access_token_cookie(value: str | None) -> str | None:
    """Read an access token from the auth cookie.

    Accepts a bare JWT, the JSON ``[access_token, refresh_token, ...]`` array
    or a ``base64-`` prefixed JSON session as written by Supabase's SSR helpers.
    """
    if not value:
        return None
    value = value.strip()

    if value.startswith("base64-"):
        encoded = value[len("base64-"):]
        try:
            decoded = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
            return _access_token_from_payload(json.loads(decoded))
        except ValueError:
            return None

    if value.startswith("[") or value.startswith("{"):
        try:
            return _access_token_from_payload(json.loads(value))
        except ValueError:
            return None

    return value or None


def read_access_token(request: Request, *, settings: Settings, authorization: str | None) -> str | None:
    token = parse_access_token_cookie(request.cookies.get(settings.supabase_auth_cookie))
    if token:
        return token
    if authorization and authorization.startswith("Bearer "):
        return authorization.replace("Bearer ", "", 1).strip() or None
    return None


def read_code_verifier(request: Request, *, settings: Settings) -> str | None:
    return request.cookies.get(settings.supabase_auth_cookie + CODE_VERIFIER_COOKIE_SUFFIX)


def set_session_cookies(response: Response, session: AuthSession, *, settings: Settings) -> None:
    cookie_name = settings.supabase_auth_cookie
    response.set_cookie(
        key=cookie_name,
        value=session.access_token,
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
        max_age=session.expires_in or DEFAULT_ACCESS_MAX_AGE_SECONDS,
        path="/",
    )
    if session.refresh_token:
        response.set_cookie(
            key=cookie_name + REFRESH_COOKIE_SUFFIX,
            value=session.refresh_token,
            httponly=True,
            samesite="lax",
            secure=settings.auth_cookie_secure,
            max_age=REFRESH_COOKIE_MAX_AGE_SECONDS,
            path="/",
        )
    response.delete_cookie(key=cookie_name + CODE_VERIFIER_COOKIE_SUFFIX, path="/")
