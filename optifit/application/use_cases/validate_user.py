from __future__ import annotations

from optifit.application.ports.accounts_port import AccountsPort


class ValidateUserUseCase:
    def __init__(self, *, auth_port: AccountsPort):
        self._auth_port = auth_port

    def execute(self, *, user_id: str) -> bool:
        user = self._auth_port.get_user_by_id(user_id=user_id)
        return user is not None and user.is_active
