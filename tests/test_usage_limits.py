from __future__ import annotations

from datetime import datetime, timedelta, timezone

from makeup_api.domain.entities.profile import Profile
from makeup_api.domain.services.usage_limits import (
    FREE_MONTHLY_ANALYSES,
    USAGE_LIMIT_REACHED_MESSAGE,
    after_consumption,
    evaluate_usage,
)


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _profile(*, status: str = "free", used: int = 0, reset_days_ago: int | None = 3) -> Profile:
    return Profile(
        id="user-1",
        name="Hanako",
        email="hanako@example.com",
        avatar_url=None,
        subscription_status=status,
        usage_count=used,
        created_at=None,
        updated_at=None,
        monthly_usage_count=used,
        usage_reset_date=None if reset_days_ago is None else NOW - timedelta(days=reset_days_ago),
    )


def test_free_plan_has_remaining_quota():
    allowance = evaluate_usage(_profile(used=1), now=NOW)

    assert allowance.allowed is True
    assert allowance.limit == FREE_MONTHLY_ANALYSES
    assert allowance.remaining == 2
    assert allowance.reset_due is False


def test_free_plan_exhausted_is_refused_with_reason():
    allowance = evaluate_usage(_profile(used=3), now=NOW)

    assert allowance.allowed is False
    assert allowance.remaining == 0
    assert allowance.reason == USAGE_LIMIT_REACHED_MESSAGE


def test_exhausted_quota_resets_after_thirty_days():
    allowance = evaluate_usage(_profile(used=3, reset_days_ago=30), now=NOW)

    assert allowance.allowed is True
    assert allowance.reset_due is True
    assert allowance.used == 0
    assert allowance.remaining == 3


def test_missing_reset_date_counts_as_due():
    assert evaluate_usage(_profile(used=3, reset_days_ago=None), now=NOW).reset_due is True


def test_premium_plan_is_unlimited():
    allowance = evaluate_usage(_profile(status="premium", used=42), now=NOW)

    assert allowance.allowed is True
    assert allowance.unlimited is True
    assert allowance.remaining is None
    assert allowance.reason is None


def test_last_free_analysis_leaves_nothing_remaining():
    allowance = after_consumption(evaluate_usage(_profile(used=2), now=NOW))

    assert allowance.used == 3
    assert allowance.remaining == 0
    assert allowance.allowed is False
