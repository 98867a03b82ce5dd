from __future__ import annotations

import logging

from makeup_api.application.dto.usage import ConsumeUsageOutput
from makeup_api.application.ports.profile_port import ProfilePort
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.exceptions import ProfileNotFoundError, UsageLimitExceededError
from makeup_api.domain.services.usage_limits import (
    USAGE_LIMIT_REACHED_MESSAGE,
    after_consumption,
    evaluate_usage,
)

from .common import utcnow


logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND_MESSAGE = "ユーザープロファイルが見つかりません"


class ConsumeUsageUseCase:
    """Records one analysis against the caller's monthly allowance."""

    def __init__(self, *, profile_port: ProfilePort):
        self._profile_port = profile_port

    def execute(self, *, identity: Identity) -> ConsumeUsageOutput:
        profile = self._profile_port.get_profile(user_id=identity.id)
        if profile is None:
            raise ProfileNotFoundError(PROFILE_NOT_FOUND_MESSAGE)

        now = utcnow()
        allowance = evaluate_usage(profile, now=now)
        if not allowance.allowed:
            logger.info("consume_usage: limit_reached user_id=%s used=%s", identity.id, allowance.used)
            raise UsageLimitExceededError(allowance.reason or USAGE_LIMIT_REACHED_MESSAGE)

        if allowance.reset_due:
            self._profile_port.reset_monthly_usage(user_id=identity.id, reset_at=now)
            logger.info("consume_usage: monthly_usage_reset user_id=%s", identity.id)

        if not self._profile_port.increment_usage_count(user_id=identity.id):
            logger.warning("consume_usage: increment_not_applied user_id=%s", identity.id)

        return ConsumeUsageOutput(user_id=identity.id, allowance=after_consumption(allowance))
