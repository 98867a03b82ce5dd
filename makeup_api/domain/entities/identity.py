from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    id: str
    email: str | None
    name: str | None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str | None
    expires_in: int | None
    identity: Identity | None
