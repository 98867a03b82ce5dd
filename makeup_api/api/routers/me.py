from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from makeup_api.api.deps import get_current_identity, get_get_me_use_case
from makeup_api.api.schemas.me import MeProfileResponse, MeResponse, MeUserResponse, UsageResponse
from makeup_api.application.use_cases.get_me import GetMeUseCase
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.entities.usage import UsageAllowance
from makeup_api.domain.exceptions import ProfileLookupError


router = APIRouter()
logger = logging.getLogger(__name__)


def to_usage_response(allowance: UsageAllowance) -> UsageResponse:
    return UsageResponse(
        plan=allowance.plan,
        allowed=allowance.allowed,
        used=allowance.used,
        limit=allowance.limit,
        remaining=allowance.remaining,
        reason=allowance.reason,
    )


@router.get("/api/me", response_model=MeResponse)
def get_me(
    identity: Identity = Depends(get_current_identity),
    use_case: GetMeUseCase = Depends(get_get_me_use_case),
):
    try:
        output = use_case.execute(identity=identity)
    except ProfileLookupError as exc:
        logger.exception("me_router: profile_lookup_failed user_id=%s", identity.id)
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    profile = None
    if output.profile is not None:
        profile = MeProfileResponse(
            id=output.profile.id,
            name=output.profile.name,
            email=output.profile.email,
            avatar_url=output.profile.avatar_url,
            subscription_status=output.profile.subscription_status,
            usage_count=output.profile.usage_count,
            monthly_usage_count=output.profile.monthly_usage_count,
            usage_reset_date=output.profile.usage_reset_date,
            created_at=output.profile.created_at,
            updated_at=output.profile.updated_at,
        )
    return MeResponse(
        user=MeUserResponse(id=output.identity.id, email=output.identity.email, name=output.identity.name),
        profile=profile,
        usage=to_usage_response(output.usage) if output.usage is not None else None,
    )
