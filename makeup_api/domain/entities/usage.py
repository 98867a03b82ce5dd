from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


UsagePlan = Literal["free", "premium"]


@dataclass(frozen=True)
class UsageAllowance:
    plan: UsagePlan
    allowed: bool
    used: int
    limit: int | None
    remaining: int | None
    reset_due: bool
    reason: str | None = None

    @property
    def unlimited(self) -> bool:
        return self.limit is None
