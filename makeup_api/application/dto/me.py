from __future__ import annotations

from dataclasses import dataclass

from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.entities.profile import Profile
from makeup_api.domain.entities.usage import UsageAllowance


@dataclass(frozen=True)
class MeOutput:
    identity: Identity
    profile: Profile | None
    usage: UsageAllowance | None = None
