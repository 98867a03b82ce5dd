from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from typing import Any

import stripe

from makeup_api.application.dto.billing import StripeWebhookEvent
from makeup_api.application.ports.stripe_port import StripePort
from makeup_api.domain.entities.billing import BillingCustomer, CheckoutSession, PortalSession
from makeup_api.domain.entities.subscription import SubscriptionSnapshot
from makeup_api.domain.exceptions import BillingError, WebhookVerificationError


logger = logging.getLogger(__name__)


class StripeClient(StripePort):
    def __init__(self, *, secret_key: str, webhook_secret: str = "", checkout_locale: str = "ja"):
        stripe.api_key = secret_key
        self._webhook_secret = webhook_secret
        self._checkout_locale = checkout_locale

    def find_customer_by_email(self, *, email: str | None) -> BillingCustomer | None:
        # Stripe drops a None filter and would list every customer in the account.
        if not email:
            return None
        try:
            customers = stripe.Customer.list(email=email, limit=1)
        except Exception as exc:  # pragma: no cover - external API
            raise BillingError("Failed to list Stripe customers.") from exc

        data = getattr(customers, "data", None) or []
        if not data:
            return None
        return _to_billing_customer(data[0], fallback_email=email)

    def create_customer(self, *, user_id: str, email: str | None, name: str | None) -> BillingCustomer:
        try:
            customer = stripe.Customer.create(
                email=email or None,
                name=name or None,
                metadata={"userId": user_id},
                idempotency_key=customer_idempotency_key(user_id=user_id, email=email, name=name),
            )
        except Exception as exc:  # pragma: no cover - external API
            raise BillingError("Failed to create Stripe customer.") from exc

        return _to_billing_customer(customer, fallback_email=email)

    def create_checkout_session(
        self,
        *,
        user_id: str,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                mode="subscription",
                success_url=success_url,
                cancel_url=cancel_url,
                locale=self._checkout_locale,
                billing_address_collection="required",
                metadata={"userId": user_id},
                subscription_data={"metadata": {"userId": user_id}},
            )
        except Exception as exc:  # pragma: no cover - external API
            raise BillingError("Failed to create Stripe checkout session.") from exc

        session_id = getattr(session, "id", None)
        session_url = getattr(session, "url", None)
        if not session_id or not session_url:
            raise BillingError("Stripe checkout session response is incomplete.")
        return CheckoutSession(id=str(session_id), url=str(session_url))

    def create_portal_session(self, *, customer_id: str, return_url: str) -> PortalSession:
        try:
            session = stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=return_url,
            )
        except Exception as exc:  # pragma: no cover - external API
            raise BillingError("Failed to create Stripe billing portal session.") from exc

        session_url = getattr(session, "url", None)
        if not session_url:
            raise BillingError("Stripe billing portal session response is incomplete.")
        return PortalSession(url=str(session_url))

    def verify_webhook(self, *, signature: str, payload: bytes) -> StripeWebhookEvent:
        try:
            event = stripe.Webhook.construct_event(payload=payload, sig_header=signature, secret=self._webhook_secret)
        except Exception as exc:
            logger.warning("stripe_client: webhook_verification_failed detail=%s", exc)
            raise WebhookVerificationError("Webhook signature verification failed") from exc

        event = _as_dict(event)
        event_type = str(event.get("type", ""))
        data_object = (event.get("data") or {}).get("object") or {}

        subscription = None
        if event_type.startswith("customer.subscription."):
            subscription = map_subscription(data_object)

        return StripeWebhookEvent(event_type=event_type, data_object=data_object, subscription=subscription)

    def retrieve_subscription(self, *, subscription_id: str) -> SubscriptionSnapshot:
        try:
            subscription = stripe.Subscription.retrieve(subscription_id)
        except Exception as exc:  # pragma: no cover - external API
            raise BillingError("Failed to retrieve Stripe subscription.") from exc
        return map_subscription(_as_dict(subscription))


def customer_idempotency_key(*, user_id: str, email: str | None, name: str | None) -> str:
    digest = hashlib.sha256(f"{email or ''}\n{name or ''}".encode("utf-8")).hexdigest()[:16]
    return f"customer-create-{user_id}-{digest}"


def map_subscription(data: dict) -> SubscriptionSnapshot:
    if not data.get("id"):
        raise BillingError("Stripe subscription id is missing.")

    items = (data.get("items") or {}).get("data") or []
    first_item = items[0] if items else {}
    price_id = (first_item.get("price") or {}).get("id")

    # Newer API versions report billing periods on the item instead of the subscription.
    period_start = data.get("current_period_start") or first_item.get("current_period_start")
    period_end = data.get("current_period_end") or first_item.get("current_period_end")

    return SubscriptionSnapshot(
        id=str(data["id"]),
        user_id=(data.get("metadata") or {}).get("userId"),
        customer_id=data.get("customer"),
        price_id=price_id,
        status=str(data.get("status")),
        current_period_start=_to_datetime(period_start),
        current_period_end=_to_datetime(period_end),
        cancel_at_period_end=bool(data.get("cancel_at_period_end", False)),
    )


def _to_billing_customer(customer: Any, *, fallback_email: str | None) -> BillingCustomer:
    customer_id = getattr(customer, "id", None)
    if customer_id is None and isinstance(customer, dict):
        customer_id = customer.get("id")
    if not customer_id:
        raise BillingError("Stripe customer id is missing.")
    email = getattr(customer, "email", None) or fallback_email
    return BillingCustomer(id=str(customer_id), email=email)


def _as_dict(value: Any) -> dict:
    if isinstance(value, stripe.StripeObject):
        return value.to_dict()
    if isinstance(value, dict):
        return value
    return {}


def _to_datetime(value: int | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)
