from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request

from makeup_api.api.session import read_access_token
from makeup_api.application.ports.auth_port import IdentityProviderPort
from makeup_api.application.ports.stripe_port import StripePort
from makeup_api.application.use_cases.complete_oauth_callback import CompleteOAuthCallbackUseCase
from makeup_api.application.use_cases.consume_usage import ConsumeUsageUseCase
from makeup_api.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from makeup_api.application.use_cases.create_portal_session import CreatePortalSessionUseCase
from makeup_api.application.use_cases.get_me import GetMeUseCase
from makeup_api.application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from makeup_api.domain.entities.identity import Identity
from makeup_api.infrastructure.clients.stripe_client import StripeClient
from makeup_api.infrastructure.clients.supabase_client import SupabaseAuthClient, create_server_client
from makeup_api.infrastructure.db.repositories.profile_repository import SupabaseProfileRepository
from makeup_api.infrastructure.db.repositories.subscription_repository import (
    SupabaseSubscriptionRepository,
)
from makeup_api.shared.config import get_settings


logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _get_stripe_client(secret_key: str, webhook_secret: str, checkout_locale: str) -> StripeClient:
    return StripeClient(
        secret_key=secret_key,
        webhook_secret=webhook_secret,
        checkout_locale=checkout_locale,
    )


@lru_cache(maxsize=4)
def _get_supabase_auth_client(url: str, key: str) -> SupabaseAuthClient:
    return SupabaseAuthClient(url=url, key=key)


@lru_cache(maxsize=4)
def _get_supabase_admin_client(url: str, key: str):
    return create_server_client(url=url, key=key)


def _supabase_keys() -> tuple[str, str] | None:
    settings = get_settings()
    key = settings.supabase_service_role_key or settings.supabase_anon_key
    if not settings.supabase_url or not key:
        return None
    return settings.supabase_url, key


def get_stripe_port() -> StripePort:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=503, detail="Stripe not configured")
    return _get_stripe_client(
        settings.stripe_secret_key,
        settings.stripe_webhook_secret,
        settings.stripe_checkout_locale,
    )


def get_webhook_stripe_port() -> StripePort:
    settings = get_settings()
    if not settings.stripe_secret_key or not settings.stripe_webhook_secret:
        raise HTTPException(status_code=503, detail="Stripe not configured")
    return get_stripe_port()


def get_identity_provider() -> IdentityProviderPort:
    keys = _supabase_keys()
    if keys is None:
        raise HTTPException(status_code=503, detail="Authentication service not configured")
    return _get_supabase_auth_client(*keys)


def get_supabase_admin_client():
    keys = _supabase_keys()
    if keys is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return _get_supabase_admin_client(*keys)


def get_current_identity(
    request: Request,
    authorization: str | None = Header(default=None),
    identity_provider: IdentityProviderPort = Depends(get_identity_provider),
) -> Identity:
    token = read_access_token(request, settings=get_settings(), authorization=authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    identity = identity_provider.get_identity(access_token=token)
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


def get_create_checkout_session_use_case(
    stripe_port: StripePort = Depends(get_stripe_port),
) -> CreateCheckoutSessionUseCase:
    return CreateCheckoutSessionUseCase(stripe_port=stripe_port)


def get_create_portal_session_use_case(
    stripe_port: StripePort = Depends(get_stripe_port),
) -> CreatePortalSessionUseCase:
    return CreatePortalSessionUseCase(stripe_port=stripe_port)


def get_process_stripe_webhook_use_case(
    stripe_port: StripePort = Depends(get_webhook_stripe_port),
    supabase_client=Depends(get_supabase_admin_client),
) -> ProcessStripeWebhookUseCase:
    return ProcessStripeWebhookUseCase(
        stripe_port=stripe_port,
        subscription_store=SupabaseSubscriptionRepository(supabase_client),
        profile_port=SupabaseProfileRepository(supabase_client),
    )


def get_complete_oauth_callback_use_case() -> CompleteOAuthCallbackUseCase:
    keys = _supabase_keys()
    if keys is None:
        logger.warning("deps: supabase_not_configured for oauth callback")
        return CompleteOAuthCallbackUseCase(identity_provider=None)
    return CompleteOAuthCallbackUseCase(identity_provider=_get_supabase_auth_client(*keys))


def get_get_me_use_case(
    supabase_client=Depends(get_supabase_admin_client),
) -> GetMeUseCase:
    return GetMeUseCase(profile_port=SupabaseProfileRepository(supabase_client))


def get_consume_usage_use_case(
    supabase_client=Depends(get_supabase_admin_client),
) -> ConsumeUsageUseCase:
    return ConsumeUsageUseCase(profile_port=SupabaseProfileRepository(supabase_client))
