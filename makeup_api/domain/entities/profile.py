from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


ProfileSubscriptionStatus = Literal["free", "premium"]


@dataclass(frozen=True)
class Profile:
    id: str
    name: str
    email: str
    avatar_url: str | None
    subscription_status: ProfileSubscriptionStatus
    usage_count: int
    created_at: datetime | None
    updated_at: datetime | None
    monthly_usage_count: int = 0
    usage_reset_date: datetime | None = None

    @property
    def is_premium(self) -> bool:
        return self.subscription_status == "premium"
