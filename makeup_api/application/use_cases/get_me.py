from __future__ import annotations

from makeup_api.application.dto.me import MeOutput
from makeup_api.application.ports.profile_port import ProfilePort
from makeup_api.domain.entities.identity import Identity
from makeup_api.domain.services.usage_limits import evaluate_usage

from .common import utcnow


class GetMeUseCase:
    def __init__(self, *, profile_port: ProfilePort):
        self._profile_port = profile_port

    def execute(self, *, identity: Identity) -> MeOutput:
        profile = self._profile_port.get_profile(user_id=identity.id)
        usage = evaluate_usage(profile, now=utcnow()) if profile is not None else None
        return MeOutput(identity=identity, profile=profile, usage=usage)
