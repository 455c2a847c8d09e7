from __future__ import annotations

from optifit.application.dto.auth import AuthUserOutput
from optifit.application.ports.accounts_port import AccountsPort
from optifit.domain.exceptions import UserNotFoundError

from .auth_common import build_auth_user_output


class GetProfileUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> AuthUserOutput:
        user = self._auth_port.get_user_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError("User not found.")
        return build_auth_user_output(user)
