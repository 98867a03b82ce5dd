from __future__ import annotations

import logging

from makeup_api.application.dto.billing import CreateCheckoutSessionInput, CreateCheckoutSessionOutput
from makeup_api.application.ports.stripe_port import StripePort
from makeup_api.domain.exceptions import BillingInputError


logger = logging.getLogger(__name__)


class CreateCheckoutSessionUseCase:
    def __init__(self, *, stripe_port: StripePort):
        self._stripe_port = stripe_port

    def execute(self, command: CreateCheckoutSessionInput) -> CreateCheckoutSessionOutput:
        if not command.price_id or not command.success_url or not command.cancel_url:
            raise BillingInputError("Missing required parameters")

        identity = command.identity
        customer = None
        if identity.email:
            customer = self._stripe_port.find_customer_by_email(email=identity.email)
        customer_created = False
        if customer is None:
            customer = self._stripe_port.create_customer(
                user_id=identity.id,
                email=identity.email,
                name=identity.name,
            )
            customer_created = True
            logger.info(
                "create_checkout_session: customer_created user_id=%s customer_id=%s",
                identity.id,
                customer.id,
            )

        session = self._stripe_port.create_checkout_session(
            user_id=identity.id,
            customer_id=customer.id,
            price_id=command.price_id,
            success_url=command.success_url,
            cancel_url=command.cancel_url,
        )
        logger.info(
            "create_checkout_session: session_created user_id=%s customer_id=%s session_id=%s",
            identity.id,
            customer.id,
            session.id,
        )
        return CreateCheckoutSessionOutput(
            session_id=session.id,
            url=session.url,
            customer_id=customer.id,
            customer_created=customer_created,
        )
