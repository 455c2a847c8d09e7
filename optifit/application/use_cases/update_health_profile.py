from __future__ import annotations

from dataclasses import fields
from typing import Any

from optifit.application.dto.users import HealthProfileOutput, UpdateHealthProfileInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import UserNotFoundError

from .auth_common import utcnow
from .get_health_profile import build_health_profile_output


MIN_STRESS_LEVEL = 1
MAX_STRESS_LEVEL = 10


def _validate(changes: dict[str, Any]) -> None:
    for name in ("height_cm", "weight_kg"):
        if name in changes and changes[name] <= 0:
            raise ValueError(f"{name} must be positive.")
    stress_level = changes.get("stress_level")
    if stress_level is not None and not MIN_STRESS_LEVEL <= stress_level <= MAX_STRESS_LEVEL:
        raise ValueError(f"stress_level must be between {MIN_STRESS_LEVEL} and {MAX_STRESS_LEVEL}.")
    if "gender" in changes and not changes["gender"].strip():
        raise ValueError("gender must not be empty.")


class UpdateHealthProfileUseCase:
    """Creates the health profile on first write, then merges the fields that are set."""

    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, command: UpdateHealthProfileInput) -> HealthProfileOutput:
        changes = {
            field.name: getattr(command, field.name)
            for field in fields(command)
            if field.name != "user_id" and getattr(command, field.name) is not None
        }
        _validate(changes)

        def _tx(auth_port: AccountsPort) -> HealthProfileOutput:
            if auth_port.get_user_by_id(user_id=command.user_id) is None:
                raise UserNotFoundError("User not found.")
            profile = auth_port.upsert_health_profile(
                user_id=command.user_id,
                changes=changes,
                updated_at=utcnow(),
            )
            return build_health_profile_output(profile)

        return self._auth_port.execute_in_transaction(_tx)
