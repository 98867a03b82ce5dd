from __future__ import annotations

import logging
from typing import Any

from supabase import Client, ClientOptions, create_client

from makeup_api.application.ports.auth_port import IdentityProviderPort
from makeup_api.application.ports.session_notifier_port import (
    AuthStateListener,
    AuthSubscriptionHandle,
    SessionNotifierPort,
)
from makeup_api.domain.entities.identity import AuthSession, Identity
from makeup_api.domain.exceptions import IdentityProviderError


logger = logging.getLogger(__name__)


def create_server_client(*, url: str, key: str) -> Client:
    # Request-scoped work must not share a persisted session between callers.
    return create_client(
        url,
        key,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


def map_user_to_identity(user: Any) -> Identity | None:
    if user is None:
        return None
    user_id = getattr(user, "id", None)
    if not user_id:
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    name = metadata.get("name") or metadata.get("full_name")
    return Identity(
        id=str(user_id),
        email=getattr(user, "email", None) or None,
        name=name if isinstance(name, str) and name else None,
    )


def map_session(session: Any) -> AuthSession | None:
    if session is None:
        return None
    access_token = getattr(session, "access_token", None)
    if not access_token:
        return None
    return AuthSession(
        access_token=str(access_token),
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
        identity=map_user_to_identity(getattr(session, "user", None)),
    )


class SupabaseAuthClient(IdentityProviderPort):
    def __init__(self, *, url: str, key: str, client: Client | None = None):
        self._url = url
        self._key = key
        self._client = client or create_server_client(url=url, key=key)

    def get_identity(self, *, access_token: str) -> Identity | None:
        try:
            response = self._client.auth.get_user(access_token)
        except Exception as exc:
            logger.warning("supabase_auth_client: get_user_failed detail=%s", exc)
            return None
        if response is None:
            return None
        return map_user_to_identity(getattr(response, "user", None))

    def exchange_code_for_session(self, *, code: str, code_verifier: str | None) -> AuthSession:
        # A fresh client per exchange keeps the PKCE verifier and resulting session private.
        client = create_server_client(url=self._url, key=self._key)
        params: dict = {"auth_code": code}
        if code_verifier:
            params["code_verifier"] = code_verifier
        try:
            response = client.auth.exchange_code_for_session(params)
        except Exception as exc:
            raise IdentityProviderError(f"Code exchange failed: {exc}") from exc

        session = map_session(getattr(response, "session", None))
        if session is None:
            raise IdentityProviderError("Code exchange returned no session.")
        return session


class _SupabaseSubscription(AuthSubscriptionHandle):
    def __init__(self, subscription: Any):
        self._subscription = subscription
        self._released = False

    def unsubscribe(self) -> None:
        if self._released:
            return
        self._released = True
        self._subscription.unsubscribe()


class SupabaseSessionNotifier(SessionNotifierPort):
    """Auth-state source for a client that holds the signed-in user's session."""

    def __init__(self, *, client: Client):
        self._client = client

    def get_current_identity(self) -> Identity | None:
        try:
            response = self._client.auth.get_user()
        except Exception as exc:
            raise IdentityProviderError(str(exc) or "Failed to fetch user") from exc
        if response is None:
            return None
        return map_user_to_identity(getattr(response, "user", None))

    def subscribe(self, listener: AuthStateListener) -> AuthSubscriptionHandle:
        def _callback(event: Any, session: Any) -> None:
            listener(str(getattr(event, "value", event)), map_session(session))

        subscription = self._client.auth.on_auth_state_change(_callback)
        return _SupabaseSubscription(subscription)
