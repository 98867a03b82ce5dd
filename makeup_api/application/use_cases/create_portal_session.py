from __future__ import annotations

from makeup_api.application.dto.billing import CreatePortalSessionInput, CreatePortalSessionOutput
from makeup_api.application.ports.stripe_port import StripePort
from makeup_api.domain.exceptions import BillingCustomerNotFoundError, BillingInputError


class CreatePortalSessionUseCase:
    def __init__(self, *, stripe_port: StripePort):
        self._stripe_port = stripe_port

    def execute(self, command: CreatePortalSessionInput) -> CreatePortalSessionOutput:
        if not command.return_url:
            raise BillingInputError("Return URL is required")

        email = command.identity.email
        customer = self._stripe_port.find_customer_by_email(email=email) if email else None
        if customer is None:
            raise BillingCustomerNotFoundError("Customer not found")

        session = self._stripe_port.create_portal_session(
            customer_id=customer.id,
            return_url=command.return_url,
        )
        return CreatePortalSessionOutput(url=session.url)
