from __future__ import annotations

import logging

from makeup_api.application.dto.billing import StripeWebhookEvent, StripeWebhookInput, StripeWebhookOutput
from makeup_api.application.ports.profile_port import ProfilePort
from makeup_api.application.ports.stripe_port import StripePort
from makeup_api.application.ports.subscription_store_port import SubscriptionStorePort
from makeup_api.domain.entities.subscription import (
    SubscriptionSnapshot,
    plan_type_for_price,
    profile_status_for,
)

from .common import utcnow


logger = logging.getLogger(__name__)


def _invoice_subscription_id(invoice: dict) -> str | None:
    subscription_id = invoice.get("subscription")
    if subscription_id:
        return str(subscription_id)
    details = (invoice.get("parent") or {}).get("subscription_details") or {}
    subscription_id = details.get("subscription")
    return str(subscription_id) if subscription_id else None


class ProcessStripeWebhookUseCase:
    def __init__(
        self,
        *,
        stripe_port: StripePort,
        subscription_store: SubscriptionStorePort,
        profile_port: ProfilePort,
    ):
        self._stripe_port = stripe_port
        self._subscription_store = subscription_store
        self._profile_port = profile_port

    def execute(self, command: StripeWebhookInput) -> StripeWebhookOutput:
        event = self._stripe_port.verify_webhook(signature=command.signature, payload=command.payload)

        if event.event_type == "checkout.session.completed":
            handled = self._handle_checkout_completed(event)
        elif event.event_type == "invoice.payment_succeeded":
            handled = self._handle_invoice(event, status="active")
        elif event.event_type == "invoice.payment_failed":
            handled = self._handle_invoice(event, status="past_due")
        elif event.event_type == "customer.subscription.updated":
            handled = self._handle_subscription_updated(event)
        elif event.event_type == "customer.subscription.deleted":
            handled = self._handle_subscription_deleted(event)
        else:
            logger.info("stripe_webhook: unhandled_event type=%s", event.event_type)
            handled = False

        return StripeWebhookOutput(event_type=event.event_type, handled=handled)

    def _handle_checkout_completed(self, event: StripeWebhookEvent) -> bool:
        session = event.data_object
        user_id = (session.get("metadata") or {}).get("userId")
        if not user_id:
            logger.error("stripe_webhook: checkout_missing_user_id session_id=%s", session.get("id"))
            return False

        subscription_id = session.get("subscription")
        if not subscription_id:
            logger.error("stripe_webhook: checkout_missing_subscription session_id=%s", session.get("id"))
            return False

        subscription = self._stripe_port.retrieve_subscription(subscription_id=str(subscription_id))
        self._subscription_store.upsert_subscription(
            user_id=user_id,
            subscription=subscription,
            customer_id=session.get("customer") or subscription.customer_id,
            plan_type=plan_type_for_price(subscription.price_id),
            now=utcnow(),
        )
        self._sync_profile(user_id=user_id, status=subscription.status)
        return True

    def _handle_invoice(self, event: StripeWebhookEvent, *, status: str) -> bool:
        subscription_id = _invoice_subscription_id(event.data_object)
        if not subscription_id:
            return False

        subscription = self._stripe_port.retrieve_subscription(subscription_id=subscription_id)
        if not subscription.user_id:
            logger.error("stripe_webhook: subscription_missing_user_id subscription_id=%s", subscription_id)
            return False

        values: dict = {"status": status}
        if status == "active":
            values.update(_period_values(subscription))
        self._subscription_store.update_subscription(
            user_id=subscription.user_id,
            subscription_id=subscription_id,
            values=values,
            now=utcnow(),
        )
        self._sync_profile(user_id=subscription.user_id, status=status)
        return True

    def _handle_subscription_updated(self, event: StripeWebhookEvent) -> bool:
        subscription = event.subscription
        if subscription is None or not subscription.user_id:
            return False

        values = {
            "status": subscription.status,
            "cancel_at_period_end": subscription.cancel_at_period_end,
        }
        values.update(_period_values(subscription))
        self._subscription_store.update_subscription(
            user_id=subscription.user_id,
            subscription_id=subscription.id,
            values=values,
            now=utcnow(),
        )
        self._sync_profile(user_id=subscription.user_id, status=subscription.status)
        return True

    def _handle_subscription_deleted(self, event: StripeWebhookEvent) -> bool:
        subscription = event.subscription
        if subscription is None or not subscription.user_id:
            return False

        self._subscription_store.update_subscription(
            user_id=subscription.user_id,
            subscription_id=subscription.id,
            values={"status": "canceled"},
            now=utcnow(),
        )
        self._sync_profile(user_id=subscription.user_id, status="canceled")
        return True

    def _sync_profile(self, *, user_id: str, status: str) -> None:
        self._profile_port.update_subscription_status(
            user_id=user_id,
            subscription_status=profile_status_for(status),
        )


def _period_values(subscription: SubscriptionSnapshot) -> dict:
    values: dict = {}
    if subscription.current_period_start is not None:
        values["current_period_start"] = subscription.current_period_start.isoformat()
    if subscription.current_period_end is not None:
        values["current_period_end"] = subscription.current_period_end.isoformat()
    return values
