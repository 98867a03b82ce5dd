from __future__ import annotations

from dataclasses import dataclass

from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.entities.subscription import SubscriptionSnapshot


@dataclass(frozen=True)
class CreateCheckoutSessionInput:
    identity: Identity
    price_id: str | None
    success_url: str | None
    cancel_url: str | None


@dataclass(frozen=True)
class CreateCheckoutSessionOutput:
    session_id: str
    url: str
    customer_id: str
    customer_created: bool


@dataclass(frozen=True)
class CreatePortalSessionInput:
    identity: Identity
    return_url: str | None


@dataclass(frozen=True)
class CreatePortalSessionOutput:
    url: str


@dataclass(frozen=True)
class StripeWebhookInput:
    signature: str
    payload: bytes


@dataclass(frozen=True)
class StripeWebhookOutput:
    event_type: str
    handled: bool


@dataclass(frozen=True)
class StripeWebhookEvent:
    event_type: str
    data_object: dict
    subscription: SubscriptionSnapshot | None
