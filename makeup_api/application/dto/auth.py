from __future__ import annotations

from dataclasses import dataclass

from makeup_api.domain.entities.identity import AuthSession


@dataclass(frozen=True)
class OAuthCallbackInput:
    code: str | None
    error: str | None
    error_description: str | None
    state: str | None
    code_verifier: str | None


@dataclass(frozen=True)
class OAuthCallbackOutput:
    redirect_path: str
    error_message: str | None
    session: AuthSession | None
