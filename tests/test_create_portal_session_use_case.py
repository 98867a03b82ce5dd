from __future__ import annotations

import pytest

from makeup_api.application.dto.billing import CreatePortalSessionInput
from makeup_api.application.use_cases.create_portal_session import CreatePortalSessionUseCase
from makeup_api.domain.entities.billing import BillingCustomer, PortalSession
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.exceptions import BillingCustomerNotFoundError, BillingInputError


class FakeStripePort:
    def __init__(self, customer: BillingCustomer | None):
        self.customer = customer
        self.lookups = 0
        self.portal_calls: list[dict] = []

    def find_customer_by_email(self, *, email):
        self.lookups += 1
        return self.customer

    def create_portal_session(self, *, customer_id, return_url):
        self.portal_calls.append({"customer_id": customer_id, "return_url": return_url})
        return PortalSession(url="https://billing.stripe.com/p/session/test_1")


IDENTITY = Identity(id="user-1", email="hanako@example.com", name=None)


def test_returns_portal_url_for_existing_customer():
    stripe_port = FakeStripePort(BillingCustomer(id="cus_1", email="hanako@example.com"))
    use_case = CreatePortalSessionUseCase(stripe_port=stripe_port)

    output = use_case.execute(CreatePortalSessionInput(identity=IDENTITY, return_url="https://makeup.example/settings"))

    assert output.url == "https://billing.stripe.com/p/session/test_1"
    assert stripe_port.portal_calls == [
        {"customer_id": "cus_1", "return_url": "https://makeup.example/settings"}
    ]


def test_missing_customer_raises_not_found_without_session_call():
    stripe_port = FakeStripePort(None)
    use_case = CreatePortalSessionUseCase(stripe_port=stripe_port)

    with pytest.raises(BillingCustomerNotFoundError):
        use_case.execute(CreatePortalSessionInput(identity=IDENTITY, return_url="https://makeup.example/settings"))

    assert stripe_port.portal_calls == []


def test_missing_return_url_is_rejected_before_lookup():
    stripe_port = FakeStripePort(BillingCustomer(id="cus_1", email=None))
    use_case = CreatePortalSessionUseCase(stripe_port=stripe_port)

    with pytest.raises(BillingInputError):
        use_case.execute(CreatePortalSessionInput(identity=IDENTITY, return_url=""))

    assert stripe_port.lookups == 0


def test_identity_without_email_never_reuses_another_customer():
    stripe_port = FakeStripePort(BillingCustomer(id="cus_other_user", email="someone@example.com"))
    use_case = CreatePortalSessionUseCase(stripe_port=stripe_port)
    identity = Identity(id="user-2", email=None, name=None)

    with pytest.raises(BillingCustomerNotFoundError):
        use_case.execute(CreatePortalSessionInput(identity=identity, return_url="https://makeup.example/settings"))

    assert stripe_port.lookups == 0
    assert stripe_port.portal_calls == []
