from __future__ import annotations

from datetime import datetime, timezone

from makeup_api.application.ports.profile_port import ProfilePort
from makeup_api.domain.entities.profile import Profile
from makeup_api.domain.exceptions import ProfileLookupError, SubscriptionStoreError, UsageStoreError
from makeup_api.infrastructure.db.mappers.profile_mapper import map_row_to_profile


PROFILES_TABLE = "profiles"
INCREMENT_USAGE_FUNCTION = "increment_usage_count"


class SupabaseProfileRepository(ProfilePort):
    def __init__(self, client):
        self._client = client

    def get_profile(self, *, user_id: str) -> Profile | None:
        try:
            response = (
                self._client.table(PROFILES_TABLE)
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise ProfileLookupError(f"Failed to fetch profile: {exc}") from exc

        rows = response.data or []
        if not rows:
            return None
        return map_row_to_profile(rows[0])

    def update_subscription_status(self, *, user_id: str, subscription_status: str) -> None:
        try:
            (
                self._client.table(PROFILES_TABLE)
                .update(
                    {
                        "subscription_status": subscription_status,
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    }
                )
                .eq("id", user_id)
                .execute()
            )
        except Exception as exc:
            raise SubscriptionStoreError(f"Failed to update profile subscription status: {exc}") from exc

    def reset_monthly_usage(self, *, user_id: str, reset_at: datetime) -> None:
        try:
            (
                self._client.table(PROFILES_TABLE)
                .update({"monthly_usage_count": 0, "usage_reset_date": reset_at.isoformat()})
                .eq("id", user_id)
                .execute()
            )
        except Exception as exc:
            raise UsageStoreError(f"Failed to reset monthly usage: {exc}") from exc

    def increment_usage_count(self, *, user_id: str) -> bool:
        # The database function increments both counters atomically.
        try:
            response = self._client.rpc(INCREMENT_USAGE_FUNCTION, {"p_user_id": user_id}).execute()
        except Exception as exc:
            raise UsageStoreError(f"Failed to increment usage count: {exc}") from exc
        return response.data is True
