from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CreateCheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price_id: str | None = Field(default=None, alias="priceId")
    success_url: str | None = Field(default=None, alias="successUrl")
    cancel_url: str | None = Field(default=None, alias="cancelUrl")


class CreateCheckoutSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    url: str


class CustomerPortalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    return_url: str | None = Field(default=None, alias="returnUrl")


class CustomerPortalResponse(BaseModel):
    url: str


class StripeWebhookResponse(BaseModel):
    received: bool
