from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BillingCustomer:
    id: str
    email: str | None


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


@dataclass(frozen=True)
class PortalSession:
    url: str
