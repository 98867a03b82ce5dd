from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from makeup_api.api.deps import get_consume_usage_use_case, get_current_identity
from makeup_api.api.routers.me import to_usage_response
from makeup_api.api.schemas.me import UsageResponse
from makeup_api.application.use_cases.consume_usage import ConsumeUsageUseCase
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.exceptions import ProfileNotFoundError, UsageLimitExceededError


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/usage/consume", response_model=UsageResponse)
def consume_usage(
    use_case: ConsumeUsageUseCase = Depends(get_consume_usage_use_case),
    identity: Identity = Depends(get_current_identity),
):
    try:
        output = use_case.execute(identity=identity)
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UsageLimitExceededError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("usage_router: consume_failed user_id=%s", identity.id)
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    return to_usage_response(output.allowance)
