from __future__ import annotations

from optifit.application.dto.auth import AuthUserOutput
from optifit.application.dto.users import UpdateProfileInput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import UserNotFoundError

from .auth_common import build_auth_user_output, utcnow


class UpdateProfileUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, command: UpdateProfileInput) -> AuthUserOutput:
        changes = {
            name: value
            for name, value in (
                ("first_name", command.first_name),
                ("last_name", command.last_name),
                ("location", command.location),
                ("phone", command.phone),
            )
            if value is not None
        }
        if "first_name" in changes and not changes["first_name"].strip():
            raise ValueError("first_name must not be empty.")

        if not changes:
            user = self._auth_port.get_user_by_id(user_id=command.user_id)
        else:
            user = self._auth_port.update_user(
                user_id=command.user_id,
                changes=changes,
                updated_at=utcnow(),
            )
        if user is None:
            raise UserNotFoundError("User not found.")
        return build_auth_user_output(user)
