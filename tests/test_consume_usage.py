from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from makeup_api.api.deps import get_consume_usage_use_case, get_current_identity
from makeup_api.application.use_cases.consume_usage import ConsumeUsageUseCase
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.entities.profile import Profile
from makeup_api.domain.exceptions import ProfileNotFoundError, UsageLimitExceededError
from makeup_api.main import app


class FakeProfilePort:
    def __init__(self, profile: Profile | None, *, increment_result: bool = True):
        self.profile = profile
        self.increment_result = increment_result
        self.resets: list[str] = []
        self.increments: list[str] = []

    def get_profile(self, *, user_id: str):
        return self.profile

    def update_subscription_status(self, *, user_id, subscription_status):
        raise NotImplementedError

    def reset_monthly_usage(self, *, user_id, reset_at):
        self.resets.append(user_id)

    def increment_usage_count(self, *, user_id):
        self.increments.append(user_id)
        return self.increment_result


IDENTITY = Identity(id="user-1", email="hanako@example.com", name="Hanako")


def _profile(*, status: str = "free", used: int = 0, reset_days_ago: int = 3) -> Profile:
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
        usage_reset_date=datetime.now(timezone.utc) - timedelta(days=reset_days_ago),
    )


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    app.dependency_overrides.clear()


def test_free_user_with_quota_is_counted():
    port = FakeProfilePort(_profile(used=1))

    output = ConsumeUsageUseCase(profile_port=port).execute(identity=IDENTITY)

    assert port.increments == ["user-1"]
    assert port.resets == []
    assert output.allowance.used == 2
    assert output.allowance.remaining == 1


def test_exhausted_free_user_is_refused_without_increment():
    port = FakeProfilePort(_profile(used=3))

    with pytest.raises(UsageLimitExceededError):
        ConsumeUsageUseCase(profile_port=port).execute(identity=IDENTITY)

    assert port.increments == []


def test_expired_period_resets_before_counting():
    port = FakeProfilePort(_profile(used=3, reset_days_ago=31))

    output = ConsumeUsageUseCase(profile_port=port).execute(identity=IDENTITY)

    assert port.resets == ["user-1"]
    assert port.increments == ["user-1"]
    assert output.allowance.used == 1
    assert output.allowance.remaining == 2


def test_premium_user_is_never_limited():
    port = FakeProfilePort(_profile(status="premium", used=120))

    output = ConsumeUsageUseCase(profile_port=port).execute(identity=IDENTITY)

    assert port.increments == ["user-1"]
    assert output.allowance.unlimited is True


def test_missing_profile_is_reported():
    with pytest.raises(ProfileNotFoundError):
        ConsumeUsageUseCase(profile_port=FakeProfilePort(None)).execute(identity=IDENTITY)


def _override(port: FakeProfilePort) -> TestClient:
    app.dependency_overrides[get_current_identity] = lambda: IDENTITY
    app.dependency_overrides[get_consume_usage_use_case] = lambda: ConsumeUsageUseCase(profile_port=port)
    return TestClient(app)


def test_consume_route_returns_remaining_allowance():
    client = _override(FakeProfilePort(_profile(used=0)))

    response = client.post("/api/usage/consume")

    assert response.status_code == 200
    assert response.json() == {
        "plan": "free",
        "allowed": True,
        "used": 1,
        "limit": 3,
        "remaining": 2,
        "reason": None,
    }


def test_consume_route_refuses_exhausted_free_plan():
    client = _override(FakeProfilePort(_profile(used=3)))

    response = client.post("/api/usage/consume")

    assert response.status_code == 403
    assert response.json()["detail"] == "月間利用制限に達しました。プレミアムプランをご検討ください。"


def test_consume_route_without_profile_returns_404():
    client = _override(FakeProfilePort(None))

    response = client.post("/api/usage/consume")

    assert response.status_code == 404
