from __future__ import annotations

from dataclasses import asdict

from optifit.application.dto.users import HealthProfileOutput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.entities.user import HealthProfile
from optifit.domain.exceptions import HealthProfileNotFoundError


def build_health_profile_output(profile: HealthProfile) -> HealthProfileOutput:
    return HealthProfileOutput(**asdict(profile))


class GetHealthProfileUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> HealthProfileOutput:
        profile = self._auth_port.get_health_profile(user_id=user_id)
        if profile is None:
            raise HealthProfileNotFoundError("Health profile not found.")
        return build_health_profile_output(profile)
