from __future__ import annotations

from datetime import datetime
from typing import Protocol

from makeup_api.domain.entities.subscription import SubscriptionSnapshot


class SubscriptionStorePort(Protocol):
    def upsert_subscription(
        self,
        *,
        user_id: str,
        subscription: SubscriptionSnapshot,
        customer_id: str | None,
        plan_type: str,
        now: datetime,
    ) -> None:
        ...

    def update_subscription(
        self,
        *,
        user_id: str,
        subscription_id: str,
        values: dict,
        now: datetime,
    ) -> None:
        ...
