from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from makeup_api.domain.entities.profile import Profile


def _as_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def map_row_to_profile(row: Mapping[str, Any]) -> Profile:
    status = row.get("subscription_status") or "free"
    return Profile(
        id=str(row["id"]),
        name=row.get("name") or row.get("full_name") or "",
        email=row.get("email") or "",
        avatar_url=row.get("avatar_url") or None,
        subscription_status="premium" if status == "premium" else "free",
        usage_count=int(row.get("usage_count") or 0),
        created_at=_as_datetime(row.get("created_at")),
        updated_at=_as_datetime(row.get("updated_at")),
        monthly_usage_count=int(row.get("monthly_usage_count") or 0),
        usage_reset_date=_as_datetime(row.get("usage_reset_date")),
    )
