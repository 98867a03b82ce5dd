from __future__ import annotations

from typing import Protocol

from makeup_api.application.dto.billing import StripeWebhookEvent
from makeup_api.domain.entities.billing import BillingCustomer, CheckoutSession, PortalSession
from makeup_api.domain.entities.subscription import SubscriptionSnapshot


class StripePort(Protocol):
    def find_customer_by_email(self, *, email: str | None) -> BillingCustomer | None:
        ...

    def create_customer(self, *, user_id: str, email: str | None, name: str | None) -> BillingCustomer:
        ...

    def create_checkout_session(
        self,
        *,
        user_id: str,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        ...

    def create_portal_session(self, *, customer_id: str, return_url: str) -> PortalSession:
        ...

    def verify_webhook(self, *, signature: str, payload: bytes) -> StripeWebhookEvent:
        ...

    def retrieve_subscription(self, *, subscription_id: str) -> SubscriptionSnapshot:
        ...
