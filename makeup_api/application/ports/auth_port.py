from __future__ import annotations

from typing import Protocol

from makeup_api.domain.entities.identity import AuthSession, Identity


class IdentityProviderPort(Protocol):
    def get_identity(self, *, access_token: str) -> Identity | None:
        ...

    def exchange_code_for_session(self, *, code: str, code_verifier: str | None) -> AuthSession:
        ...
