from __future__ import annotations

from dataclasses import dataclass

from makeup_api.domain.entities.usage import UsageAllowance


@dataclass(frozen=True)
class ConsumeUsageOutput:
    user_id: str
    allowance: UsageAllowance
