from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class MeUserResponse(BaseModel):
    id: str
    email: str | None
    name: str | None


class MeProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    avatar_url: str | None
    subscription_status: str
    usage_count: int
    monthly_usage_count: int
    usage_reset_date: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


class UsageResponse(BaseModel):
    plan: str
    allowed: bool
    used: int
    limit: int | None
    remaining: int | None
    reason: str | None


class MeResponse(BaseModel):
    user: MeUserResponse
    profile: MeProfileResponse | None
    usage: UsageResponse | None
