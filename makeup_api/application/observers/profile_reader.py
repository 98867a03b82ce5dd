from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from makeup_api.application.ports.profile_port import ProfilePort
from makeup_api.application.ports.session_notifier_port import (
    AuthSubscriptionHandle,
    SessionNotifierPort,
)
from makeup_api.domain.entities.identity import AuthSession, Identity
from makeup_api.domain.entities.profile import Profile


logger = logging.getLogger(__name__)

TRACKED_AUTH_EVENTS = frozenset({"SIGNED_IN", "SIGNED_OUT", "TOKEN_REFRESHED"})


@dataclass(frozen=True)
class ProfileReaderState:
    identity: Identity | None
    profile: Profile | None
    loading: bool
    error: str | None


def _message(exc: Exception, fallback: str) -> str:
    text = str(exc).strip()
    return text or fallback


class ProfileReader:
    """Keeps the signed-in identity and its profile row current.

    Use as a context manager: entering subscribes to auth-state changes and
    loads the current data, leaving releases the subscription.
    """

    def __init__(self, *, session_notifier: SessionNotifierPort, profile_port: ProfilePort):
        self._session_notifier = session_notifier
        self._profile_port = profile_port
        self._lock = threading.RLock()
        self._subscription: AuthSubscriptionHandle | None = None
        self.identity: Identity | None = None
        self.profile: Profile | None = None
        self.loading = True
        self.error: str | None = None

    def __enter__(self) -> ProfileReader:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def snapshot(self) -> ProfileReaderState:
        with self._lock:
            return ProfileReaderState(
                identity=self.identity,
                profile=self.profile,
                loading=self.loading,
                error=self.error,
            )

    def start(self) -> None:
        if self._subscription is not None:
            return
        self._subscription = self._session_notifier.subscribe(self._on_auth_state_change)
        self.refetch()

    def close(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()

    def refetch(self) -> None:
        with self._lock:
            self.loading = True
            self.error = None
            try:
                identity = self._session_notifier.get_current_identity()
                self.identity = identity
                if identity is not None:
                    self._fetch_profile(identity.id)
                else:
                    self.profile = None
            except Exception as exc:
                logger.warning("profile_reader: refetch_failed detail=%s", exc)
                self.error = _message(exc, "Failed to fetch user")
            finally:
                self.loading = False

    def _on_auth_state_change(self, event: str, session: AuthSession | None) -> None:
        if event not in TRACKED_AUTH_EVENTS:
            return
        with self._lock:
            identity = session.identity if session is not None else None
            self.identity = identity
            if identity is not None:
                self._fetch_profile(identity.id)
            else:
                self.profile = None
            self.loading = False

    def _fetch_profile(self, user_id: str) -> None:
        try:
            profile = self._profile_port.get_profile(user_id=user_id)
        except Exception as exc:
            logger.warning("profile_reader: profile_fetch_failed user_id=%s detail=%s", user_id, exc)
            self.error = _message(exc, "Failed to fetch profile")
            return
        self.profile = profile
