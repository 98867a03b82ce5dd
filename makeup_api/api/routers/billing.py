from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import BaseModel, ValidationError

from makeup_api.api.deps import (
    get_create_checkout_session_use_case,
    get_create_portal_session_use_case,
    get_current_identity,
    get_process_stripe_webhook_use_case,
)
from makeup_api.api.schemas.billing import (
    CreateCheckoutSessionRequest,
    CreateCheckoutSessionResponse,
    CustomerPortalRequest,
    CustomerPortalResponse,
    StripeWebhookResponse,
)
from makeup_api.application.dto.billing import (
    CreateCheckoutSessionInput,
    CreatePortalSessionInput,
    StripeWebhookInput,
)
from makeup_api.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from makeup_api.application.use_cases.create_portal_session import CreatePortalSessionUseCase
from makeup_api.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.exceptions import (
    BillingCustomerNotFoundError,
    BillingInputError,
    WebhookVerificationError,
)


router = APIRouter()
logger = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)


async def read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from exc


def _parse_body(model: type[RequestModel], body: Any) -> RequestModel:
    if body is None:
        return model()
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Invalid request parameters") from exc


@router.post("/api/stripe/create-checkout-session", response_model=CreateCheckoutSessionResponse)
def create_checkout_session(
    use_case: CreateCheckoutSessionUseCase = Depends(get_create_checkout_session_use_case),
    identity: Identity = Depends(get_current_identity),
    body: Any = Depends(read_json_body),
):
    req = _parse_body(CreateCheckoutSessionRequest, body)
    try:
        output = use_case.execute(
            CreateCheckoutSessionInput(
                identity=identity,
                price_id=req.price_id,
                success_url=req.success_url,
                cancel_url=req.cancel_url,
            )
        )
    except BillingInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("billing_router: checkout_session_failed user_id=%s", identity.id)
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    return CreateCheckoutSessionResponse(session_id=output.session_id, url=output.url)


@router.post("/api/stripe/customer-portal", response_model=CustomerPortalResponse)
def create_customer_portal_session(
    use_case: CreatePortalSessionUseCase = Depends(get_create_portal_session_use_case),
    identity: Identity = Depends(get_current_identity),
    body: Any = Depends(read_json_body),
):
    req = _parse_body(CustomerPortalRequest, body)
    try:
        output = use_case.execute(CreatePortalSessionInput(identity=identity, return_url=req.return_url))
    except BillingInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BillingCustomerNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("billing_router: portal_session_failed user_id=%s", identity.id)
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    return CustomerPortalResponse(url=output.url)


@router.post("/api/stripe/webhook", response_model=StripeWebhookResponse)
async def stripe_webhook(
    request: Request,
    use_case: ProcessStripeWebhookUseCase = Depends(get_process_stripe_webhook_use_case),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
):
    if not stripe_signature:
        raise HTTPException(status_code=400, detail="Missing stripe-signature header")

    payload = await request.body()
    try:
        output = use_case.execute(StripeWebhookInput(signature=stripe_signature, payload=payload))
    except WebhookVerificationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("billing_router: webhook_failed")
        raise HTTPException(status_code=500, detail="Webhook handler failed") from exc

    logger.info("billing_router: webhook_processed type=%s handled=%s", output.event_type, output.handled)
    return StripeWebhookResponse(received=True)
