from __future__ import annotations

from typing import Callable, Protocol

from makeup_api.domain.entities.identity import AuthSession, Identity


AuthStateListener = Callable[[str, AuthSession | None], None]


class AuthSubscriptionHandle(Protocol):
    def unsubscribe(self) -> None:
        ...


class SessionNotifierPort(Protocol):
    def get_current_identity(self) -> Identity | None:
        ...

    def subscribe(self, listener: AuthStateListener) -> AuthSubscriptionHandle:
        ...
