from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal


SubscriptionStatus = Literal[
    "trialing",
    "active",
    "past_due",
    "canceled",
    "unpaid",
    "incomplete",
    "incomplete_expired",
]

PlanType = Literal["premium", "premium-yearly"]


@dataclass(frozen=True)
class SubscriptionSnapshot:
    id: str
    user_id: str | None
    customer_id: str | None
    price_id: str | None
    status: str
    current_period_start: datetime | None
    current_period_end: datetime | None
    cancel_at_period_end: bool


def is_subscription_active(status: str) -> bool:
    return status in {"active", "trialing"}


def plan_type_for_price(price_id: str | None) -> PlanType:
    if price_id and "yearly" in price_id:
        return "premium-yearly"
    return "premium"


def profile_status_for(status: str) -> Literal["free", "premium"]:
    return "premium" if is_subscription_active(status) else "free"
