from __future__ import annotations

from datetime import datetime
from typing import Protocol

from makeup_api.domain.entities.profile import Profile


class ProfilePort(Protocol):
    def get_profile(self, *, user_id: str) -> Profile | None:
        ...

    def update_subscription_status(self, *, user_id: str, subscription_status: str) -> None:
        ...

    def reset_monthly_usage(self, *, user_id: str, reset_at: datetime) -> None:
        ...

    def increment_usage_count(self, *, user_id: str) -> bool:
        ...
