from __future__ import annotations

from datetime import datetime

from makeup_api.application.ports.subscription_store_port import SubscriptionStorePort
from makeup_api.domain.entities.subscription import SubscriptionSnapshot
from makeup_api.domain.exceptions import SubscriptionStoreError


USER_SUBSCRIPTIONS_TABLE = "user_subscriptions"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class SupabaseSubscriptionRepository(SubscriptionStorePort):
    def __init__(self, client):
        self._client = client

    def upsert_subscription(
        self,
        *,
        user_id: str,
        subscription: SubscriptionSnapshot,
        customer_id: str | None,
        plan_type: str,
        now: datetime,
    ) -> None:
        row = {
            "user_id": user_id,
            "subscription_id": subscription.id,
            "customer_id": customer_id,
            "price_id": subscription.price_id,
            "plan_type": plan_type,
            "status": subscription.status,
            "current_period_start": _iso(subscription.current_period_start),
            "current_period_end": _iso(subscription.current_period_end),
            "cancel_at_period_end": subscription.cancel_at_period_end,
            "created_at": now.isoformat(),
            "updated_at": now.isoformat(),
        }
        try:
            self._client.table(USER_SUBSCRIPTIONS_TABLE).upsert(row, on_conflict="subscription_id").execute()
        except Exception as exc:
            raise SubscriptionStoreError(f"Failed to upsert subscription: {exc}") from exc

    def update_subscription(
        self,
        *,
        user_id: str,
        subscription_id: str,
        values: dict,
        now: datetime,
    ) -> None:
        payload = dict(values)
        payload["updated_at"] = now.isoformat()
        try:
            (
                self._client.table(USER_SUBSCRIPTIONS_TABLE)
                .update(payload)
                .eq("user_id", user_id)
                .eq("subscription_id", subscription_id)
                .execute()
            )
        except Exception as exc:
            raise SubscriptionStoreError(f"Failed to update subscription: {exc}") from exc
