from __future__ import annotations

from datetime import datetime, timezone

from fastapi.testclient import TestClient

from makeup_api.api.deps import get_current_identity, get_get_me_use_case
from makeup_api.application.use_cases.get_me import GetMeUseCase
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.entities.profile import Profile
from makeup_api.domain.exceptions import ProfileLookupError
from makeup_api.main import app


class FakeProfilePort:
    def __init__(self, profile: Profile | None):
        self.profile = profile

    def get_profile(self, *, user_id: str):
        return self.profile

    def update_subscription_status(self, *, user_id, subscription_status):
        raise NotImplementedError


def _identity() -> Identity:
    return Identity(id="user-1", email="hanako@example.com", name="Hanako")


def test_get_me_use_case_returns_identity_and_profile():
    profile = Profile(
        id="user-1",
        name="Hanako",
        email="hanako@example.com",
        avatar_url=None,
        subscription_status="premium",
        usage_count=7,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )
    use_case = GetMeUseCase(profile_port=FakeProfilePort(profile))

    output = use_case.execute(identity=_identity())

    assert output.identity.id == "user-1"
    assert output.profile.is_premium is True
    assert output.profile.usage_count == 7


def test_me_router_returns_null_profile_when_row_missing():
    app.dependency_overrides[get_current_identity] = _identity
    app.dependency_overrides[get_get_me_use_case] = lambda: GetMeUseCase(profile_port=FakeProfilePort(None))

    client = TestClient(app)
    response = client.get("/api/me")

    assert response.status_code == 200
    assert response.json() == {
        "user": {"id": "user-1", "email": "hanako@example.com", "name": "Hanako"},
        "profile": None,
        "usage": None,
    }

    app.dependency_overrides.clear()


class FailingProfilePort(FakeProfilePort):
    def get_profile(self, *, user_id: str):
        raise ProfileLookupError("Failed to fetch profile: relation \"profiles\" does not exist")


def test_me_router_hides_profile_lookup_details():
    app.dependency_overrides[get_current_identity] = _identity
    app.dependency_overrides[get_get_me_use_case] = lambda: GetMeUseCase(profile_port=FailingProfilePort(None))

    client = TestClient(app)
    response = client.get("/api/me")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}

    app.dependency_overrides.clear()


def test_me_router_reports_free_plan_usage():
    now = datetime.now(timezone.utc)
    profile = Profile(
        id="user-1",
        name="Hanako",
        email="hanako@example.com",
        avatar_url=None,
        subscription_status="free",
        usage_count=5,
        created_at=now,
        updated_at=now,
        monthly_usage_count=1,
        usage_reset_date=now,
    )
    app.dependency_overrides[get_current_identity] = _identity
    app.dependency_overrides[get_get_me_use_case] = lambda: GetMeUseCase(profile_port=FakeProfilePort(profile))

    client = TestClient(app)
    response = client.get("/api/me")

    assert response.status_code == 200
    assert response.json()["usage"] == {
        "plan": "free",
        "allowed": True,
        "used": 1,
        "limit": 3,
        "remaining": 2,
        "reason": None,
    }

    app.dependency_overrides.clear()
