from __future__ import annotations

from datetime import datetime, timedelta

from makeup_api.domain.entities.profile import Profile
from makeup_api.domain.entities.usage import UsageAllowance


FREE_MONTHLY_ANALYSES = 3
USAGE_RESET_PERIOD = timedelta(days=30)
USAGE_LIMIT_REACHED_MESSAGE = "月間利用制限に達しました。プレミアムプランをご検討ください。"


def is_usage_reset_due(*, usage_reset_date: datetime | None, now: datetime) -> bool:
    if usage_reset_date is None:
        return True
    return now - usage_reset_date >= USAGE_RESET_PERIOD


def evaluate_usage(profile: Profile, *, now: datetime) -> UsageAllowance:
    """Monthly analysis allowance: premium is unlimited, free gets a fixed quota per period."""
    if profile.is_premium:
        return UsageAllowance(
            plan="premium",
            allowed=True,
            used=profile.monthly_usage_count,
            limit=None,
            remaining=None,
            reset_due=False,
        )

    reset_due = is_usage_reset_due(usage_reset_date=profile.usage_reset_date, now=now)
    used = 0 if reset_due else profile.monthly_usage_count
    remaining = max(0, FREE_MONTHLY_ANALYSES - used)
    return UsageAllowance(
        plan="free",
        allowed=remaining > 0,
        used=used,
        limit=FREE_MONTHLY_ANALYSES,
        remaining=remaining,
        reset_due=reset_due,
        reason=None if remaining > 0 else USAGE_LIMIT_REACHED_MESSAGE,
    )


def after_consumption(allowance: UsageAllowance) -> UsageAllowance:
    if allowance.unlimited:
        return UsageAllowance(
            plan=allowance.plan,
            allowed=True,
            used=allowance.used + 1,
            limit=None,
            remaining=None,
            reset_due=False,
        )

    used = allowance.used + 1
    remaining = max(0, (allowance.limit or 0) - used)
    return UsageAllowance(
        plan=allowance.plan,
        allowed=remaining > 0,
        used=used,
        limit=allowance.limit,
        remaining=remaining,
        reset_due=False,
        reason=None if remaining > 0 else USAGE_LIMIT_REACHED_MESSAGE,
    )
